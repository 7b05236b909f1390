"""Shared pytest fixtures for iptv-page-generators."""

import json
import shutil
from datetime import datetime, timezone

import pytest
from pathlib import Path

from generators.compatibility import CompatibilityRules


BASE_DIR = Path(__file__).parent
FIXTURES_DIR = BASE_DIR / "tests" / "fixtures"

PINNED_AT = "2026-03-01T12:00:00Z"


def _load_fixture(name):
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def base_dir():
    return BASE_DIR


@pytest.fixture
def players():
    return _load_fixture("players.json")


@pytest.fixture
def devices():
    return _load_fixture("devices.json")


@pytest.fixture
def features():
    return _load_fixture("features.json")


@pytest.fixture
def issues():
    return _load_fixture("issues.json")


@pytest.fixture
def rules():
    return CompatibilityRules()


@pytest.fixture
def generated_at():
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path):
    """A writable copy of the fixture catalogs."""
    target = tmp_path / "data"
    target.mkdir()
    for name in ("players.json", "devices.json", "features.json", "issues.json"):
        shutil.copy(FIXTURES_DIR / name, target / name)
    return target
