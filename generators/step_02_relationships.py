"""
Step 2: Relationship Annotation

Scores every entity against the rest of its catalog and attaches the
top related ids for internal linking:

    players → relatedPlayers, relatedDevices
    devices → relatedDevices, relatedGuides

Pure transform: the input catalogs are never modified, new records are
returned and only those get persisted.
"""

import logging
from typing import Callable, Dict, List, Set

from generators.compatibility import FALLBACK_DEVICE_GUIDES, CompatibilityRules
from generators.linking import dedupe

logger = logging.getLogger(__name__)

MAX_RELATED = 5
MAX_DEVICE_GUIDES = 4

# Player scoring weights
PLAYER_CATEGORY_WEIGHT = 3
PLAYER_PLATFORM_WEIGHT = 2
PLAYER_FEATURE_WEIGHT = 1

# Device scoring weights
DEVICE_CATEGORY_WEIGHT = 5
DEVICE_BRAND_WEIGHT = 3
DEVICE_OS_WEIGHT = 2


def _overlap(a: List, b: List) -> int:
    """Count tags of b that also appear in a."""
    tags = set(a or [])
    return sum(1 for tag in (b or []) if tag in tags)


def score_players(player: Dict, candidate: Dict) -> int:
    score = 0
    if candidate.get("category") == player.get("category"):
        score += PLAYER_CATEGORY_WEIGHT
    score += PLAYER_PLATFORM_WEIGHT * _overlap(player.get("platforms"), candidate.get("platforms"))
    score += PLAYER_FEATURE_WEIGHT * _overlap(player.get("features"), candidate.get("features"))
    return score


def score_devices(device: Dict, candidate: Dict) -> int:
    score = 0
    if candidate.get("category") == device.get("category"):
        score += DEVICE_CATEGORY_WEIGHT
    if candidate.get("brand") == device.get("brand"):
        score += DEVICE_BRAND_WEIGHT
    if candidate.get("os") == device.get("os"):
        score += DEVICE_OS_WEIGHT
    return score


def rank_related(
    entity: Dict,
    catalog: List[Dict],
    score: Callable[[Dict, Dict], int],
    limit: int = MAX_RELATED,
) -> List[str]:
    """Ids of the `limit` highest-scoring other entities, best first.

    sorted() is stable, so equal scores keep catalog order. There is no
    minimum score: a sparse catalog still gets a full list.
    """
    candidates = [c for c in catalog if c["id"] != entity["id"]]
    ranked = sorted(candidates, key=lambda c: -score(entity, c))
    return [c["id"] for c in ranked[:limit]]


def player_devices(player: Dict, rules: CompatibilityRules, known_devices: Set[str]) -> List[str]:
    """Device pages a player profile links to, from its declared platforms.

    Platforms without a primary device, or whose device is not in the
    catalog, contribute nothing.
    """
    devices = [
        rules.platform_to_primary_device[p]
        for p in player.get("platforms") or []
        if rules.platform_to_primary_device.get(p) in known_devices
    ]
    return dedupe(devices)[:MAX_RELATED]


def device_guides(device: Dict, rules: CompatibilityRules) -> List[str]:
    """Technical guide slugs for a device: slug table, then category table, then defaults."""
    guides = (
        rules.device_guides.get(device.get("slug"))
        or rules.category_guides.get(device.get("category"))
        or FALLBACK_DEVICE_GUIDES
    )
    return dedupe(guides)[:MAX_DEVICE_GUIDES]


def annotate_players(players: List[Dict], devices: List[Dict], rules: CompatibilityRules) -> List[Dict]:
    """Return a new player catalog with relatedPlayers and relatedDevices."""
    known_devices = {d["id"] for d in devices}
    annotated = [
        dict(
            player,
            relatedPlayers=rank_related(player, players, score_players),
            relatedDevices=player_devices(player, rules, known_devices),
        )
        for player in players
    ]
    logger.info("Added relationships to %d players", len(annotated))
    return annotated


def annotate_devices(devices: List[Dict], rules: CompatibilityRules) -> List[Dict]:
    """Return a new device catalog with relatedDevices and relatedGuides."""
    annotated = [
        dict(
            device,
            relatedDevices=rank_related(device, devices, score_devices),
            relatedGuides=device_guides(device, rules),
        )
        for device in devices
    ]
    logger.info("Added relationships to %d devices", len(annotated))
    return annotated
