"""Generator configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Root of the generator repo
REPO_ROOT = Path(__file__).resolve().parent.parent

# Source catalogs (players.json, devices.json, features.json, issues.json)
DATA_DIR = Path(os.environ.get("IPTV_DATA_DIR", "") or REPO_ROOT / "data")

# Derived collections are written next to the catalogs unless overridden
OUTPUT_DIR = Path(os.environ.get("IPTV_OUTPUT_DIR", "") or DATA_DIR)

# Optional YAML file extending the built-in compatibility tables
COMPATIBILITY_FILE = os.environ.get("IPTV_COMPATIBILITY_FILE", "")

# Pin the run timestamp (ISO 8601) for reproducible output
GENERATED_AT = os.environ.get("GENERATED_AT", "")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Required and optional source files
PLAYERS_FILE = "players.json"
DEVICES_FILE = "devices.json"
FEATURES_FILE = "features.json"
ISSUES_FILE = "issues.json"

# Output files
PLAYER_COMPARISONS_FILE = "player-comparisons.json"
DEVICE_COMPARISONS_FILE = "device-comparisons.json"
PLAYER_DEVICE_GUIDES_FILE = "player-device-guides.json"
BEST_FOR_FILE = "best-player-device.json"
PLAYER_FEATURE_GUIDES_FILE = "player-feature-guides.json"
DEVICE_FEATURE_GUIDES_FILE = "device-feature-guides.json"
PLAYER_TROUBLESHOOTING_FILE = "player-troubleshooting.json"
DEVICE_TROUBLESHOOTING_FILE = "device-troubleshooting.json"
