"""
Compatibility rules shared by the generators.

Which devices a player platform covers, which install family each device
belongs to, and the internal-linking tables used for relationship annotation.
Built-in tables live here; an optional YAML file can extend or override any
of them without touching code.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from generators.step_01_catalog import CatalogError

logger = logging.getLogger(__name__)

# ── Device families ──────────────────────────────────────────
# Install flows differ by family, not by individual device.

SIDELOAD_CAPABLE = "sideload-capable"
STORE_BASED_ANDROID = "store-based-android"
APPLE_STORE = "apple-store"
DESKTOP = "desktop"
VENDOR_TV_STORE = "vendor-tv-store"

DEVICE_FAMILIES = (
    SIDELOAD_CAPABLE,
    STORE_BASED_ANDROID,
    APPLE_STORE,
    DESKTOP,
    VENDOR_TV_STORE,
)

# Used when a device record carries no "family" field
DEFAULT_DEVICE_FAMILIES = {
    "firestick": SIDELOAD_CAPABLE,
    "fire-tv-cube": SIDELOAD_CAPABLE,
    "android-tv": STORE_BASED_ANDROID,
    "chromecast": STORE_BASED_ANDROID,
    "nvidia-shield": STORE_BASED_ANDROID,
    "sony-tv": STORE_BASED_ANDROID,
    "ios": APPLE_STORE,
    "apple-tv": APPLE_STORE,
    "windows": DESKTOP,
    "mac": DESKTOP,
    "linux": DESKTOP,
    "samsung-tv": VENDOR_TV_STORE,
    "lg-tv": VENDOR_TV_STORE,
}

# Player platform tag → device ids it runs on (guide compatibility)
DEFAULT_PLATFORM_TO_DEVICES = {
    "android": ["android-tv", "nvidia-shield"],
    "firestick": ["firestick", "fire-tv-cube"],
    "android-tv": ["android-tv", "chromecast", "sony-tv", "nvidia-shield"],
    "ios": ["ios"],
    "apple-tv": ["apple-tv"],
    "windows": ["windows"],
    "mac": ["mac"],
    "linux": ["linux"],
    "smart-tv": ["samsung-tv", "lg-tv"],
    "samsung-tv": ["samsung-tv"],
    "lg-tv": ["lg-tv"],
    "nvidia-shield": ["nvidia-shield"],
}

# Player platform tag → the one device page a player profile links to
DEFAULT_PLATFORM_TO_PRIMARY_DEVICE = {
    "ios": "ios",
    "apple-tv": "apple-tv",
    "mac": "mac",
    "android": "android-tv",
    "firestick": "firestick",
    "android-tv": "android-tv",
    "nvidia-shield": "nvidia-shield",
    "windows": "windows",
    "linux": "linux",
    "smart-tv": "samsung-tv",
    "samsung-tv": "samsung-tv",
    "lg-tv": "lg-tv",
}

# Device slug → technical guide slugs (checked before the category table)
DEFAULT_DEVICE_GUIDES = {
    "firestick": ["sideload-apps-firestick", "fix-iptv-buffering", "setup-epg-guide"],
    "fire-tv-cube": ["sideload-apps-firestick", "fix-iptv-buffering", "setup-epg-guide"],
    "apple-tv": ["fix-iptv-buffering", "setup-epg-guide", "stremio-apple-tv-complete-guide"],
    "android-tv": ["fix-iptv-buffering", "setup-epg-guide", "google-tv-iptv"],
    "nvidia-shield": ["fix-iptv-buffering", "setup-epg-guide", "google-tv-iptv"],
    "samsung-tv": ["iptv-samsung-smart-tv", "fix-iptv-buffering", "setup-epg-guide"],
    "lg-tv": ["iptv-lg-smart-tv", "fix-iptv-buffering", "setup-epg-guide"],
    "chromecast": ["cast-iptv-to-chromecast", "chromecast-iptv", "tivimate-chromecast"],
    "google-tv": ["google-tv-iptv", "fix-iptv-buffering", "setup-epg-guide"],
    "windows": ["fix-iptv-buffering", "setup-epg-guide", "m3u-playlist-complete-guide"],
    "mac": ["fix-iptv-buffering", "setup-epg-guide", "m3u-playlist-complete-guide"],
    "linux": ["iptv-linux-setup", "best-iptv-player-linux", "fix-iptv-buffering"],
    "ios": ["fix-iptv-buffering", "setup-epg-guide", "stremio-ios-complete-guide"],
    "mag-box": ["mag-box-setup-guide", "fix-iptv-buffering", "xtream-codes-setup"],
    "roku": ["fix-iptv-buffering", "setup-epg-guide"],
}

# Device category → technical guide slugs
DEFAULT_CATEGORY_GUIDES = {
    "streaming-box": ["fix-iptv-buffering", "setup-epg-guide", "xtream-codes-complete-guide"],
    "smart-tv": ["fix-iptv-buffering", "setup-epg-guide", "xtream-codes-complete-guide"],
    "iptv-box": ["fix-iptv-buffering", "setup-epg-guide", "xtream-codes-complete-guide", "mag-box-setup-guide"],
    "mobile": ["fix-iptv-buffering", "setup-epg-guide"],
    "computer": ["fix-iptv-buffering", "setup-epg-guide", "m3u-playlist-complete-guide"],
    "gaming-console": ["fix-iptv-buffering"],
}

FALLBACK_DEVICE_GUIDES = ["fix-iptv-buffering", "setup-epg-guide"]

# Vendor app store names for vendor-tv-store devices
VENDOR_STORE_NAMES = {
    "samsung-tv": "Samsung Apps",
    "lg-tv": "LG Content Store",
}


@dataclass
class CompatibilityRules:
    platform_to_devices: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PLATFORM_TO_DEVICES.items()})
    device_families: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_DEVICE_FAMILIES))
    platform_to_primary_device: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_PLATFORM_TO_PRIMARY_DEVICE))
    device_guides: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_DEVICE_GUIDES.items()})
    category_guides: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORY_GUIDES.items()})
    vendor_store_names: Dict[str, str] = field(
        default_factory=lambda: dict(VENDOR_STORE_NAMES))

    def devices_for_platform(self, platform: str) -> List[str]:
        """Device ids a platform tag covers. Unmapped tags cover only themselves."""
        return self.platform_to_devices.get(platform, [platform])

    def family_of(self, device: Dict) -> Optional[str]:
        """Install family for a device: its own tag first, then the defaults table."""
        return device.get("family") or self.device_families.get(device.get("id"))


# Section name → expected value type for each key ("list" or "str")
_YAML_SECTIONS = {
    "platform_to_devices": "list",
    "device_families": "str",
    "platform_to_primary_device": "str",
    "device_guides": "list",
    "category_guides": "list",
    "vendor_store_names": "str",
}


def load_rules(path: Optional[Path] = None) -> CompatibilityRules:
    """Built-in rules, extended by the YAML file at path when given.

    Keys in the file replace the built-in entry with the same key; other
    built-in entries are kept.
    """
    rules = CompatibilityRules()
    if not path:
        return rules

    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Compatibility file not found: {path}")
    try:
        overrides = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path.name}: {e}") from e

    errors = _validate_overrides(overrides)
    if errors:
        raise CatalogError(
            f"{path.name} validation failed:\n  - " + "\n  - ".join(errors)
        )

    for section, entries in overrides.items():
        getattr(rules, section).update(entries)
        logger.info("Compatibility override: %d %s entries from %s",
                    len(entries), section, path.name)
    return rules


def _validate_overrides(overrides) -> List[str]:
    if not isinstance(overrides, dict):
        return ["top level must be a mapping of table name to entries"]

    errors = []
    for section, entries in overrides.items():
        expected = _YAML_SECTIONS.get(section)
        if expected is None:
            errors.append(f"unknown table '{section}' (valid: {sorted(_YAML_SECTIONS)})")
            continue
        if not isinstance(entries, dict):
            errors.append(f"{section}: must be a mapping")
            continue
        for key, value in entries.items():
            if expected == "list":
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    errors.append(f"{section}.{key}: must be a list of strings")
            elif not isinstance(value, str):
                errors.append(f"{section}.{key}: must be a string")
            elif section == "device_families" and value not in DEVICE_FAMILIES:
                errors.append(f"{section}.{key}: unknown family '{value}' (valid: {list(DEVICE_FAMILIES)})")
    return errors


def is_compatible(player: Dict, device: Dict, rules: CompatibilityRules) -> bool:
    """True if either side declares the pair compatible.

    The player's platforms (through the platform table) and the device's
    supportedPlayers list are unioned, never intersected.
    """
    device_id = device.get("id")
    for platform in player.get("platforms") or []:
        if device_id in rules.devices_for_platform(platform):
            return True
    return player.get("id") in (device.get("supportedPlayers") or [])
