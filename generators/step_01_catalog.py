"""
Step 1: Load Catalogs

Reads the source catalogs (players, devices, and the optional feature and
issue catalogs) and validates them before any generation happens.
A missing or malformed required catalog aborts the whole run.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from generators import config

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "player": ["id", "slug", "name"],
    "device": ["id", "slug", "name"],
    "feature": ["id", "slug", "name"],
    "issue": ["id", "slug", "name"],
}

# Fields that drive pairing and compatibility: a list, or null/absent
LIST_FIELDS = {
    "player": ["platforms", "features"],
    "device": ["supportedPlayers"],
    "feature": ["supportedPlayers", "supportedDevices"],
    "issue": ["affectedPlayers", "affectedDevices"],
}

# Fields only used in page text. Anything but a list falls back to a generic phrase.
TEXT_LIST_FIELDS = {
    "player": ["pros", "cons", "keywords"],
    "device": ["pros", "cons", "keywords"],
    "feature": ["benefits", "requirements", "keywords"],
    "issue": ["commonCauses", "generalSolutions", "keywords"],
}


class CatalogError(ValueError):
    """Raised when a source catalog is missing or malformed."""


def read_json_array(path: Path) -> List[Dict]:
    """Read a JSON file that must contain an array of objects."""
    if not path.exists():
        raise CatalogError(f"Catalog not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {path.name}: {e}") from e
    if not isinstance(data, list):
        raise CatalogError(f"{path.name} must contain a JSON array, got {type(data).__name__}")
    return data


def validate_catalog(records: List, kind: str) -> List[str]:
    """Return every problem found in a catalog (empty list = valid)."""
    errors: List[str] = []
    seen_ids = set()
    seen_slugs = set()

    for i, record in enumerate(records):
        label = f"{kind} {i + 1}"
        if not isinstance(record, dict):
            errors.append(f"{label}: expected an object, got {type(record).__name__}")
            continue

        for field in REQUIRED_FIELDS[kind]:
            value = record.get(field)
            if not value:
                errors.append(f"{label}: '{field}' is required")
            elif not isinstance(value, str):
                errors.append(f"{label}: '{field}' must be a string, got {type(value).__name__}")

        entity_id = record.get("id")
        ref = entity_id if isinstance(entity_id, str) else "?"

        for field in LIST_FIELDS[kind]:
            if record.get(field) is not None and not isinstance(record[field], list):
                errors.append(f"{label} ({ref}): '{field}' must be a list")

        for field in TEXT_LIST_FIELDS[kind]:
            if field in record and not isinstance(record[field], list):
                logger.debug("%s (%s): '%s' is not a list, text will use fallbacks", label, ref, field)

        if entity_id and isinstance(entity_id, str):
            if entity_id in seen_ids:
                errors.append(f"{label}: duplicate id '{entity_id}'")
            seen_ids.add(entity_id)

        # Slugs become page keys, so they must be unique too
        slug = record.get("slug")
        if slug and isinstance(slug, str):
            if slug in seen_slugs:
                errors.append(f"{label}: duplicate slug '{slug}'")
            seen_slugs.add(slug)

    return errors


def load_catalog(path: Path, kind: str) -> List[Dict]:
    """Load and validate one catalog. Raises CatalogError listing all problems."""
    records = read_json_array(path)
    errors = validate_catalog(records, kind)
    if errors:
        raise CatalogError(
            f"{path.name} validation failed:\n  - " + "\n  - ".join(errors)
        )
    if not records:
        logger.warning("%s is empty, no %s pages will be generated", path.name, kind)
    logger.info("Loaded %d %ss from %s", len(records), kind, path.name)
    return records


def load_optional_catalog(path: Path, kind: str) -> Optional[List[Dict]]:
    """Load a catalog that may be absent. A present-but-broken file is still fatal."""
    if not path.exists():
        logger.info("No %s catalog at %s, skipping %s generators", kind, path, kind)
        return None
    return load_catalog(path, kind)


def load_catalogs(data_dir: Path = None) -> Dict:
    """Load every source catalog from data_dir.

    Returns dict with players, devices (lists) and features, issues
    (lists, or None when the file does not exist).
    """
    data_dir = Path(data_dir) if data_dir else config.DATA_DIR
    return {
        "players": load_catalog(data_dir / config.PLAYERS_FILE, "player"),
        "devices": load_catalog(data_dir / config.DEVICES_FILE, "device"),
        "features": load_optional_catalog(data_dir / config.FEATURES_FILE, "feature"),
        "issues": load_optional_catalog(data_dir / config.ISSUES_FILE, "issue"),
    }


def find_entity(records: List[Dict], key: str) -> Optional[Dict]:
    """Find a record by id or slug."""
    for record in records:
        if record.get("id") == key or record.get("slug") == key:
            return record
    return None
