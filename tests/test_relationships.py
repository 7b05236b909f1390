"""Tests for relationship scoring and annotation."""

import copy

from generators.compatibility import FALLBACK_DEVICE_GUIDES
from generators.step_02_relationships import (
    annotate_devices,
    annotate_players,
    device_guides,
    rank_related,
    score_devices,
    score_players,
)


class TestScoring:
    def test_player_score(self, players):
        tivimate, kodi, vlc, smarters = players
        # android shared (2) + epg shared (1)
        assert score_players(tivimate, kodi) == 3
        assert score_players(tivimate, vlc) == 0
        # android and firestick shared (4) + epg shared (1)
        assert score_players(tivimate, smarters) == 5

    def test_same_category_weight(self, player_factory):
        a = player_factory("a", category="free")
        b = player_factory("b", category="free")
        assert score_players(a, b) == 3

    def test_device_score(self, device_factory):
        a = device_factory("a", category="smart-tv", brand="lg", os="webOS")
        b = device_factory("b", category="smart-tv", brand="lg", os="webOS")
        c = device_factory("c", category="smart-tv", brand="samsung", os="Tizen")
        assert score_devices(a, b) == 10
        assert score_devices(a, c) == 5


class TestRankRelated:
    def test_highest_first_and_ties_keep_catalog_order(self, players):
        tivimate, kodi = players[0], players[1]
        assert rank_related(tivimate, players, score_players) == ["iptv-smarters", "kodi", "vlc"]
        # tivimate and iptv-smarters both score 3 against kodi
        assert rank_related(kodi, players, score_players) == ["tivimate", "iptv-smarters", "vlc"]

    def test_zero_scores_still_fill_the_list(self, player_factory):
        catalog = [player_factory(f"p{i}") for i in range(8)]
        assert rank_related(catalog[0], catalog, score_players) == ["p1", "p2", "p3", "p4", "p5"]

    def test_single_entity(self, player_factory):
        only = player_factory("only")
        assert rank_related(only, [only], score_players) == []


class TestAnnotatePlayers:
    def test_related_players_length_and_no_self(self, players, devices, rules):
        annotated = annotate_players(players, devices, rules)
        for player in annotated:
            assert len(player["relatedPlayers"]) == min(5, len(players) - 1)
            assert player["id"] not in player["relatedPlayers"]
            assert len(set(player["relatedPlayers"])) == len(player["relatedPlayers"])

    def test_related_devices_only_known_devices(self, players, devices, rules):
        annotated = {p["id"]: p for p in annotate_players(players, devices, rules)}
        assert annotated["tivimate"]["relatedDevices"] == ["android-tv", "firestick"]
        # mac and ios are not in the device catalog
        assert annotated["vlc"]["relatedDevices"] == ["windows"]
        assert annotated["iptv-smarters"]["relatedDevices"] == ["android-tv", "firestick", "samsung-tv"]

    def test_inputs_are_not_mutated(self, players, devices, rules):
        before = copy.deepcopy(players)
        annotated = annotate_players(players, devices, rules)
        assert players == before
        assert annotated[0] is not players[0]
        assert annotated[0]["name"] == players[0]["name"]

    def test_reannotating_is_stable(self, players, devices, rules):
        once = annotate_players(players, devices, rules)
        twice = annotate_players(once, devices, rules)
        assert once == twice


class TestAnnotateDevices:
    def test_related_devices(self, devices, rules):
        annotated = annotate_devices(devices, rules)
        for device in annotated:
            assert len(device["relatedDevices"]) == min(5, len(devices) - 1)
            assert device["id"] not in device["relatedDevices"]

    def test_related_guides_capped(self, devices, rules):
        for device in annotate_devices(devices, rules):
            assert 0 < len(device["relatedGuides"]) <= 4

    def test_guides_lookup_order(self, rules, device_factory):
        assert device_guides(device_factory("firestick"), rules)[0] == "sideload-apps-firestick"
        by_category = device_guides(device_factory("new-box", category="iptv-box"), rules)
        assert by_category == ["fix-iptv-buffering", "setup-epg-guide",
                               "xtream-codes-complete-guide", "mag-box-setup-guide"]
        assert device_guides(device_factory("unknown"), rules) == FALLBACK_DEVICE_GUIDES

    def test_single_device_catalog(self, rules, device_factory):
        annotated = annotate_devices([device_factory("solo")], rules)
        assert annotated[0]["relatedDevices"] == []
