"""Record factories for tests that need catalogs the fixture files don't cover."""

import pytest


def make_player(pid, **fields):
    record = {"id": pid, "slug": pid, "name": pid.replace("-", " ").title()}
    record.update(fields)
    return record


def make_device(did, **fields):
    record = {"id": did, "slug": did, "name": did.replace("-", " ").title()}
    record.update(fields)
    return record


@pytest.fixture
def player_factory():
    return make_player


@pytest.fixture
def device_factory():
    return make_device
