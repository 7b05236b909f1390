"""Generated data service — read-side loader for the derived JSON files.

Loads the catalogs and derived collections from the output directory once,
on first access, and answers the lookups the page layer needs. Comparison
lookups ignore argument order: (a, b) and (b, a) resolve to the same record.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from generators import config

logger = logging.getLogger(__name__)

COMPARISON_FILES = {
    "player": config.PLAYER_COMPARISONS_FILE,
    "device": config.DEVICE_COMPARISONS_FILE,
}


class GeneratedData:
    """Derived collections loaded from static JSON files."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self._dir = Path(data_dir) if data_dir else config.OUTPUT_DIR
        self._cache: dict[str, list[dict]] = {}
        self._comparison_index: dict[str, dict[frozenset, dict]] = {}
        self._guide_index: dict[tuple, dict] | None = None

    def _load(self, filename: str) -> list[dict]:
        """Read a JSON array once. Missing files load as empty collections."""
        if filename not in self._cache:
            path = self._dir / filename
            if path.exists():
                self._cache[filename] = json.loads(path.read_text(encoding="utf-8"))
                logger.info("Loaded %d records from %s", len(self._cache[filename]), filename)
            else:
                logger.warning("Generated file not found at %s", path)
                self._cache[filename] = []
        return self._cache[filename]

    @property
    def players(self) -> list[dict]:
        return self._load(config.PLAYERS_FILE)

    @property
    def devices(self) -> list[dict]:
        return self._load(config.DEVICES_FILE)

    def comparisons(self, kind: str) -> list[dict]:
        if kind not in COMPARISON_FILES:
            raise ValueError(f"Unknown comparison kind '{kind}' (valid: {sorted(COMPARISON_FILES)})")
        return self._load(COMPARISON_FILES[kind])

    @property
    def guides(self) -> list[dict]:
        return self._load(config.PLAYER_DEVICE_GUIDES_FILE)

    @property
    def best_for(self) -> list[dict]:
        return self._load(config.BEST_FOR_FILE)

    def get_player(self, key: str) -> Optional[dict]:
        """Find a player by id or slug."""
        return next((p for p in self.players if key in (p.get("id"), p.get("slug"))), None)

    def get_device(self, key: str) -> Optional[dict]:
        """Find a device by id or slug."""
        return next((d for d in self.devices if key in (d.get("id"), d.get("slug"))), None)

    def _resolve_id(self, kind: str, key: str) -> str:
        entity = self.get_player(key) if kind == "player" else self.get_device(key)
        return entity["id"] if entity else key

    def get_comparison(self, kind: str, a: str, b: str) -> Optional[dict]:
        """Comparison record for an unordered pair. Accepts ids or slugs."""
        if kind not in self._comparison_index:
            self._comparison_index[kind] = {
                frozenset((c[f"{kind}1Id"], c[f"{kind}2Id"])): c
                for c in self.comparisons(kind)
            }
        key = frozenset((self._resolve_id(kind, a), self._resolve_id(kind, b)))
        return self._comparison_index[kind].get(key)

    def get_guide(self, player: str, device: str) -> Optional[dict]:
        """Setup guide for a (player, device) pair. Accepts ids or slugs."""
        if self._guide_index is None:
            self._guide_index = {(g["playerId"], g["deviceId"]): g for g in self.guides}
        return self._guide_index.get(
            (self._resolve_id("player", player), self._resolve_id("device", device))
        )

    def get_best_for(self, slug: str) -> Optional[dict]:
        return next((p for p in self.best_for if p["slug"] == slug), None)


# Module-level singleton
_data: GeneratedData | None = None


def get_generated_data() -> GeneratedData:
    """Returns the shared GeneratedData instance for the configured output dir."""
    global _data
    if _data is None:
        _data = GeneratedData()
    return _data
