"""
Quality Gates — assertions over every generated collection.

Each gate function raises AssertionError if the gate fails.
The run HALTS on any gate failure before anything is written. No partial output.
"""

from collections import Counter
from typing import Dict, Iterable, List

from generators.pairs import pair_count

MAX_RELATED = 5
MAX_DEVICE_GUIDES = 4


def _duplicates(values: Iterable) -> List:
    return [v for v, n in Counter(values).items() if n > 1]


def _assert_unique_slugs(records: List[Dict], gate: str):
    dupes = _duplicates(r["slug"] for r in records)
    assert not dupes, f"{gate}: duplicate slugs {dupes[:10]}"


def _assert_related_slugs(records: List[Dict], gate: str, cap: int = MAX_RELATED):
    """relatedGuides: capped, never self, only slugs of the same collection."""
    slugs = {r["slug"] for r in records}
    for r in records:
        related = r.get("relatedGuides", [])
        assert len(related) <= cap, (
            f"{gate}: {r['slug']} has {len(related)} related guides (max {cap})"
        )
        assert r["slug"] not in related, f"{gate}: {r['slug']} links to itself"
        assert len(set(related)) == len(related), f"{gate}: {r['slug']} has repeated related guides"
        missing = [s for s in related if s not in slugs]
        assert not missing, f"{gate}: {r['slug']} links to unknown guides {missing}"


def _assert_known_ids(records: List[Dict], field: str, known: set, gate: str):
    unknown = sorted({r[field] for r in records if field in r and r[field] not in known})
    assert not unknown, f"{gate}: {field} references unknown ids {unknown[:10]}"


# ── Gate 1: Source Catalogs ──────────────────────────────────

def gate_1_catalogs(catalogs: Dict):
    """Both required catalogs loaded. An empty catalog is valid and yields no pages."""
    for kind in ("players", "devices"):
        records = catalogs.get(kind)
        assert isinstance(records, list), f"Gate 1: {kind} catalog missing"


# ── Gate 2: Relationships ────────────────────────────────────

def gate_2_relationships(players: List[Dict], devices: List[Dict]):
    """Related lists: min(5, n-1) long, never self, only catalog ids."""
    player_ids = {p["id"] for p in players}
    device_ids = {d["id"] for d in devices}

    for records, field, known in ((players, "relatedPlayers", player_ids),
                                  (devices, "relatedDevices", device_ids)):
        expected = min(MAX_RELATED, len(records) - 1)
        for r in records:
            related = r.get(field)
            assert isinstance(related, list), f"Gate 2: {r['id']} missing {field}"
            assert len(related) == expected, (
                f"Gate 2: {r['id']}.{field} has {len(related)} entries, expected {expected}"
            )
            assert r["id"] not in related, f"Gate 2: {r['id']}.{field} contains itself"
            assert len(set(related)) == len(related), f"Gate 2: {r['id']}.{field} has repeats"
            unknown = [i for i in related if i not in known]
            assert not unknown, f"Gate 2: {r['id']}.{field} references unknown ids {unknown}"

    for p in players:
        related = p.get("relatedDevices", [])
        assert len(related) <= MAX_RELATED, f"Gate 2: {p['id']}.relatedDevices over cap"
        unknown = [i for i in related if i not in device_ids]
        assert not unknown, f"Gate 2: {p['id']}.relatedDevices references unknown devices {unknown}"

    for d in devices:
        assert len(d.get("relatedGuides", [])) <= MAX_DEVICE_GUIDES, (
            f"Gate 2: {d['id']}.relatedGuides over cap"
        )


# ── Gate 3: Comparisons ──────────────────────────────────────

def gate_3_comparisons(comparisons: Dict, players: List[Dict], devices: List[Dict]):
    """Exactly C(n,2) records per kind, each unordered pair once, no self-pairs."""
    for kind, records, catalog in (("player", comparisons["players"], players),
                                   ("device", comparisons["devices"], devices)):
        id1, id2 = f"{kind}1Id", f"{kind}2Id"
        expected = pair_count(len(catalog))
        assert len(records) == expected, (
            f"Gate 3: {len(records)} {kind} comparisons, expected {expected}"
        )
        pairs = [frozenset((r[id1], r[id2])) for r in records]
        assert all(len(p) == 2 for p in pairs), f"Gate 3: {kind} comparison pairs an entity with itself"
        dupes = _duplicates(pairs)
        assert not dupes, f"Gate 3: duplicate {kind} pairs {[sorted(p) for p in dupes[:5]]}"

        known = {e["id"] for e in catalog}
        _assert_known_ids(records, id1, known, "Gate 3")
        _assert_known_ids(records, id2, known, "Gate 3")

    combined = comparisons["players"] + comparisons["devices"]
    _assert_unique_slugs(combined, "Gate 3")
    _assert_related_slugs(combined, "Gate 3")


# ── Gate 4: Setup Guides ─────────────────────────────────────

def gate_4_guides(guides: List[Dict], players: List[Dict], devices: List[Dict]):
    """Unique (player, device) keys, known ids, steps numbered 1..N."""
    dupes = _duplicates((g["playerId"], g["deviceId"]) for g in guides)
    assert not dupes, f"Gate 4: duplicate player-device guides {dupes[:5]}"
    _assert_known_ids(guides, "playerId", {p["id"] for p in players}, "Gate 4")
    _assert_known_ids(guides, "deviceId", {d["id"] for d in devices}, "Gate 4")
    _assert_unique_slugs(guides, "Gate 4")
    _assert_related_slugs(guides, "Gate 4")

    for g in guides:
        numbers = [s["stepNumber"] for s in g["content"]["steps"]]
        assert numbers == list(range(1, len(numbers) + 1)), (
            f"Gate 4: {g['slug']} step numbers {numbers} are not 1..{len(numbers)}"
        )
        titles = [s["title"] for s in g["content"]["steps"]]
        assert titles[-1] == "Start Watching", f"Gate 4: {g['slug']} does not end with Start Watching"


# ── Gate 5: Supplementary Collections ────────────────────────

def gate_5_collection(records: List[Dict], label: str, id_fields: Dict[str, set]):
    """Best-for, feature and troubleshooting collections.

    id_fields maps each id field on the records to the set of valid ids.
    Collections that link across kinds are checked as one combined list.
    """
    gate = f"Gate 5 ({label})"
    _assert_unique_slugs(records, gate)
    _assert_related_slugs(records, gate)
    for field, known in id_fields.items():
        _assert_known_ids(records, field, known, gate)
