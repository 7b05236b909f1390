"""Tests for the read-side generated data lookups."""

import pytest

from generators import config
from generators.generated_data import GeneratedData, get_generated_data
from generators.step_03_comparisons import generate_comparisons
from generators.step_04_guides import generate_guides
from generators.step_05_best_for import generate_best_for
from generators.step_08_write import write_outputs


@pytest.fixture
def output_dir(tmp_path, players, devices, rules, generated_at):
    comparisons = generate_comparisons(players, devices, generated_at)
    write_outputs({
        tmp_path / config.PLAYERS_FILE: players,
        tmp_path / config.DEVICES_FILE: devices,
        tmp_path / config.PLAYER_COMPARISONS_FILE: comparisons["players"],
        tmp_path / config.DEVICE_COMPARISONS_FILE: comparisons["devices"],
        tmp_path / config.PLAYER_DEVICE_GUIDES_FILE: generate_guides(players, devices, rules, generated_at),
        tmp_path / config.BEST_FOR_FILE: generate_best_for(devices, players, generated_at),
    })
    return tmp_path


class TestComparisonLookup:
    def test_symmetric(self, output_dir):
        data = GeneratedData(output_dir)
        forward = data.get_comparison("player", "tivimate", "kodi")
        backward = data.get_comparison("player", "kodi", "tivimate")
        assert forward is not None
        assert forward is backward
        assert forward["slug"] == "tivimate-vs-kodi"

    def test_every_pair_both_orders(self, output_dir, players):
        data = GeneratedData(output_dir)
        for a in players:
            for b in players:
                if a["id"] == b["id"]:
                    assert data.get_comparison("player", a["id"], b["id"]) is None
                else:
                    assert data.get_comparison("player", a["id"], b["id"]) is \
                        data.get_comparison("player", b["id"], a["id"]) is not None

    def test_device_by_slug(self, output_dir):
        data = GeneratedData(output_dir)
        record = data.get_comparison("device", "roku", "firestick")
        assert record["slug"] == "firestick-vs-roku-for-iptv"

    def test_unknown_kind(self, output_dir):
        with pytest.raises(ValueError, match="Unknown comparison kind"):
            GeneratedData(output_dir).get_comparison("issue", "a", "b")


class TestOtherLookups:
    def test_guide(self, output_dir):
        data = GeneratedData(output_dir)
        assert data.get_guide("tivimate", "firestick")["slug"] == "tivimate-setup-firestick"
        assert data.get_guide("kodi", "firestick") is None

    def test_best_for(self, output_dir):
        data = GeneratedData(output_dir)
        assert data.get_best_for("best-iptv-player-roku")["deviceId"] == "roku"

    def test_entities(self, output_dir):
        data = GeneratedData(output_dir)
        assert data.get_player("vlc")["name"] == "VLC"
        assert data.get_device("samsung-tv")["shortName"] == "Samsung TV"
        assert data.get_device("mag-box") is None

    def test_missing_files_load_empty(self, tmp_path):
        data = GeneratedData(tmp_path)
        assert data.players == []
        assert data.get_comparison("player", "a", "b") is None

    def test_shared_instance(self):
        assert get_generated_data() is get_generated_data()
