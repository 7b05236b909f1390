"""Tests for the quality gates."""

import copy

import pytest

from generators.step_02_relationships import annotate_devices, annotate_players
from generators.step_03_comparisons import generate_comparisons
from generators.step_04_guides import generate_guides
from generators.step_05_best_for import generate_best_for
from generators.step_07_troubleshooting import generate_troubleshooting

from gates.quality_gates import (
    gate_1_catalogs,
    gate_2_relationships,
    gate_3_comparisons,
    gate_4_guides,
    gate_5_collection,
)


@pytest.fixture
def annotated(players, devices, rules):
    return annotate_players(players, devices, rules), annotate_devices(devices, rules)


@pytest.fixture
def comparisons(players, devices, generated_at):
    return generate_comparisons(players, devices, generated_at)


@pytest.fixture
def guides(players, devices, rules, generated_at):
    return generate_guides(players, devices, rules, generated_at)


class TestGate1:
    def test_passes(self, players, devices):
        gate_1_catalogs({"players": players, "devices": devices, "features": None, "issues": None})

    def test_empty_catalog_is_allowed(self, devices):
        gate_1_catalogs({"players": [], "devices": devices})

    def test_missing_catalog(self, devices):
        with pytest.raises(AssertionError, match="Gate 1: players catalog missing"):
            gate_1_catalogs({"players": None, "devices": devices})


class TestGate2:
    def test_passes(self, annotated):
        gate_2_relationships(*annotated)

    def test_self_reference(self, annotated):
        players, devices = annotated
        players[0]["relatedPlayers"][0] = players[0]["id"]
        with pytest.raises(AssertionError, match="contains itself"):
            gate_2_relationships(players, devices)

    def test_short_list(self, annotated):
        players, devices = annotated
        devices[0]["relatedDevices"].pop()
        with pytest.raises(AssertionError, match="expected 4"):
            gate_2_relationships(players, devices)

    def test_dangling_device(self, annotated):
        players, devices = annotated
        players[0]["relatedDevices"].append("mag-box")
        with pytest.raises(AssertionError, match="unknown devices"):
            gate_2_relationships(players, devices)


class TestGate3:
    def test_passes(self, comparisons, players, devices):
        gate_3_comparisons(comparisons, players, devices)

    def test_missing_pair(self, comparisons, players, devices):
        comparisons["players"].pop()
        with pytest.raises(AssertionError, match="expected 6"):
            gate_3_comparisons(comparisons, players, devices)

    def test_reversed_duplicate(self, comparisons, players, devices):
        flipped = copy.deepcopy(comparisons["players"][0])
        flipped["player1Id"], flipped["player2Id"] = flipped["player2Id"], flipped["player1Id"]
        comparisons["players"][-1] = flipped
        with pytest.raises(AssertionError, match="duplicate player pairs"):
            gate_3_comparisons(comparisons, players, devices)

    def test_dangling_related_slug(self, comparisons, players, devices):
        comparisons["devices"][0]["relatedGuides"][0] = "nope-vs-nothing"
        with pytest.raises(AssertionError, match="unknown guides"):
            gate_3_comparisons(comparisons, players, devices)


class TestGate4:
    def test_passes(self, guides, players, devices):
        gate_4_guides(guides, players, devices)

    def test_duplicate_key(self, guides, players, devices):
        guides.append(copy.deepcopy(guides[0]))
        with pytest.raises(AssertionError, match="duplicate player-device guides"):
            gate_4_guides(guides, players, devices)

    def test_step_gap(self, guides, players, devices):
        guides[0]["content"]["steps"][1]["stepNumber"] = 7
        with pytest.raises(AssertionError, match="step numbers"):
            gate_4_guides(guides, players, devices)


class TestGate5:
    def test_best_for_passes(self, players, devices, generated_at):
        pages = generate_best_for(devices, players, generated_at)
        gate_5_collection(pages, "best-for", {"deviceId": {d["id"] for d in devices}})

    def test_combined_troubleshooting(self, players, devices, issues, rules, generated_at):
        result = generate_troubleshooting(players, devices, issues, rules, generated_at)
        gate_5_collection(
            result["players"] + result["devices"],
            "troubleshooting",
            {"playerId": {p["id"] for p in players},
             "deviceId": {d["id"] for d in devices},
             "issueId": {i["id"] for i in issues}},
        )

    def test_unknown_id(self, players, devices, generated_at):
        pages = generate_best_for(devices, players, generated_at)
        with pytest.raises(AssertionError, match="unknown ids"):
            gate_5_collection(pages, "best-for", {"deviceId": {"firestick"}})

    def test_self_link(self, players, devices, generated_at):
        pages = generate_best_for(devices, players, generated_at)
        pages[0]["relatedGuides"][0] = pages[0]["slug"]
        with pytest.raises(AssertionError, match="links to itself"):
            gate_5_collection(pages, "best-for", {})
