"""
Step 8: Write Derived Data

All-or-nothing write of every generated collection. Payloads are
serialized up front, each file is written to a temporary sibling, and
only when every temporary file is on disk are they moved into place.
A failure at any point leaves the previous outputs untouched.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def serialize(payload) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_outputs(outputs: Dict[Path, List]) -> List[Path]:
    """Write {path: payload} atomically as a batch. Returns the written paths."""
    rendered = {Path(path): serialize(payload) for path, payload in outputs.items()}

    staged = []
    try:
        for path, text in rendered.items():
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + TMP_SUFFIX)
            staged.append((tmp_path, path))
            tmp_path.write_text(text, encoding="utf-8")
    except OSError:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise

    for tmp_path, path in staged:
        os.replace(tmp_path, path)
        logger.info("Wrote %s", path)

    return [path for _, path in staged]
