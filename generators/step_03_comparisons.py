"""
Step 3: Pairwise Comparisons

Creates one "A vs B" record for every unordered pair of players and every
unordered pair of devices: C(n, 2) records per catalog, in catalog order.

Each record carries the feature/spec deltas, a winner label per category,
templated verdict prose and FAQs. Cross-links between comparison pages are
added in a separate pass once both collections exist.
"""

import logging
from datetime import datetime
from typing import Dict, List, Tuple

from generators.linking import link_in_order
from generators.pairs import unique_pairs
from generators.templating import (
    first_lower,
    first_or,
    iso_timestamp,
    items,
    price_of,
    pricing_model,
    rating_of,
    short_name,
)

logger = logging.getLogger(__name__)

MAX_RELATED_COMPARISONS = 5
TIE = "Tie"


def split_tags(a: List, b: List) -> Tuple[List, List, List]:
    """(shared, a_only, b_only), each in the order of the source list."""
    set_a, set_b = set(a), set(b)
    shared = [t for t in a if t in set_b]
    a_only = [t for t in a if t not in set_b]
    b_only = [t for t in b if t not in set_a]
    return shared, a_only, b_only


def rating_winner(a: Dict, b: Dict) -> Dict:
    """Higher rating wins. On a tie the first entity wins."""
    return a if rating_of(a) >= rating_of(b) else b


def pricing_winner(a: Dict, b: Dict) -> str:
    """A free player beats any paid model; otherwise a tie."""
    if pricing_model(a) == "free":
        return a["name"]
    if pricing_model(b) == "free":
        return b["name"]
    return TIE


def _cheaper_answer(a: Dict, b: Dict) -> str:
    if pricing_model(a) == "free":
        return f"{a['name']} is completely free."
    if pricing_model(b) == "free":
        return f"{b['name']} is completely free."
    return f"{a['name']} costs {price_of(a)}, while {b['name']} costs {price_of(b)}."


def generate_player_comparison(p1: Dict, p2: Dict, generated_at: datetime) -> Dict:
    year = generated_at.year
    features1, features2 = items(p1, "features"), items(p2, "features")
    shared, p1_only, p2_only = split_tags(features1, features2)
    shared_platforms, _, _ = split_tags(items(p1, "platforms"), items(p2, "platforms"))

    winner = rating_winner(p1, p2)
    feature_winner = p1 if len(features1) >= len(features2) else p2

    return {
        "slug": f"{p1['slug']}-vs-{p2['slug']}",
        "type": "player",
        "player1Id": p1["id"],
        "player2Id": p2["id"],
        "player1Name": p1["name"],
        "player2Name": p2["name"],
        "title": f"{p1['name']} vs {p2['name']} - Which IPTV Player is Better? {year}",
        "metaTitle": f"{p1['name']} vs {p2['name']} Comparison {year} | Best IPTV Player",
        "description": (
            f"Detailed comparison of {p1['name']} and {p2['name']} IPTV players. "
            f"Features, pricing, pros & cons for {year}."
        ),
        "content": {
            "intro": (
                f"Choosing between {p1['name']} and {p2['name']}? Both are popular IPTV players, "
                f"but they have different strengths. This comparison helps you decide which one "
                f"is right for you."
            ),
            "comparison": {
                "rating": {
                    "player1": p1.get("rating"),
                    "player2": p2.get("rating"),
                    "winner": winner["name"],
                },
                "pricing": {
                    "player1": p1.get("pricing"),
                    "player2": p2.get("pricing"),
                    "winner": pricing_winner(p1, p2),
                },
                "features": {
                    "shared": shared,
                    "player1Only": p1_only,
                    "player2Only": p2_only,
                    "winner": feature_winner["name"],
                },
                "platforms": {
                    "player1": items(p1, "platforms"),
                    "player2": items(p2, "platforms"),
                    "shared": shared_platforms,
                    "overlapCount": len(shared_platforms),
                },
            },
            "player1Summary": _player_summary(p1, p1_only, "a solid IPTV experience"),
            "player2Summary": _player_summary(p2, p2_only, "a reliable player"),
            "verdict": (
                f"{winner['name']} edges out slightly with a {winner.get('rating', 'higher')} rating. "
                f"However, your choice depends on your specific needs. "
                f"Choose {p1['name']} if you need {first_or(p1_only, 'its specific features')}. "
                f"Choose {p2['name']} if {first_or(p2_only, 'cross-platform support')} is important."
            ),
            "faqs": [
                {
                    "question": f"Is {p1['name']} better than {p2['name']}?",
                    "answer": (
                        f"It depends on your needs. {p1['name']} excels at "
                        f"{first_lower(p1, 'pros', 'its core features')}, while {p2['name']} is better "
                        f"for {first_lower(p2, 'pros', 'its core features')}."
                    ),
                },
                {
                    "question": f"Which is cheaper, {p1['name']} or {p2['name']}?",
                    "answer": _cheaper_answer(p1, p2),
                },
            ],
        },
        "relatedGuides": [],
        "tags": [p1["slug"], p2["slug"], "comparison", "vs", "iptv"],
        "keywords": [
            f"{p1['slug']} vs {p2['slug']}",
            f"{p1['name']} vs {p2['name']}",
            f"{p1['name']} or {p2['name']}",
            "best iptv player",
            "iptv player comparison",
        ],
        "lastUpdated": iso_timestamp(generated_at),
    }


def _player_summary(player: Dict, exclusive: List, fallback: str) -> Dict:
    return {
        "name": player["name"],
        "description": player.get("description", ""),
        "pros": items(player, "pros"),
        "cons": items(player, "cons"),
        "bestFor": f"Best for users who need {' and '.join(exclusive[:2]) or fallback}",
    }


def generate_device_comparison(d1: Dict, d2: Dict, generated_at: datetime) -> Dict:
    year = generated_at.year
    name1, name2 = short_name(d1), short_name(d2)
    players1, players2 = items(d1, "supportedPlayers"), items(d2, "supportedPlayers")
    app_winner = d1 if len(players1) >= len(players2) else d2

    specs1 = d1.get("specs") if isinstance(d1.get("specs"), dict) else {}
    specs2 = d2.get("specs") if isinstance(d2.get("specs"), dict) else {}
    shared_conn, d1_conn, d2_conn = split_tags(
        items(specs1, "connectivity"), items(specs2, "connectivity"))

    def tivimate_answer():
        first = name1 if "tivimate" in players1 else "Android devices"
        second = f" and {name2}" if "tivimate" in players2 else ""
        return f"TiviMate is available on {first}{second}."

    return {
        "slug": f"{d1['slug']}-vs-{d2['slug']}-for-iptv",
        "type": "device",
        "device1Id": d1["id"],
        "device2Id": d2["id"],
        "device1Name": d1["name"],
        "device1ShortName": name1,
        "device2Name": d2["name"],
        "device2ShortName": name2,
        "title": f"{name1} vs {name2} for IPTV - Which is Better? {year}",
        "metaTitle": f"{name1} vs {name2} for IPTV {year} | Comparison",
        "description": (
            f"Compare {d1['name']} and {d2['name']} for IPTV streaming. "
            f"App support, features, and recommendations for {year}."
        ),
        "content": {
            "intro": (
                f"Deciding between {name1} and {name2} for IPTV? This comparison covers app "
                f"availability, performance, and which device is better for streaming."
            ),
            "comparison": {
                "appSupport": {
                    "device1": len(players1),
                    "device2": len(players2),
                    "winner": short_name(app_winner),
                },
                "os": {"device1": d1.get("os"), "device2": d2.get("os")},
                "pricing": {"device1": d1.get("pricing"), "device2": d2.get("pricing")},
                "specs": {"device1": d1.get("specs"), "device2": d2.get("specs")},
                "connectivity": {
                    "shared": shared_conn,
                    "device1Only": d1_conn,
                    "device2Only": d2_conn,
                },
            },
            "device1Summary": _device_summary(d1),
            "device2Summary": _device_summary(d2),
            "verdict": (
                f"For IPTV, {short_name(app_winner)} has better app support with "
                f"{max(len(players1), len(players2))} compatible players. However, consider "
                f"{name1} for {first_lower(d1, 'pros', 'its core features')} or "
                f"{name2} for {first_lower(d2, 'pros', 'its core features')}."
            ),
            "faqs": [
                {
                    "question": f"Is {name1} or {name2} better for IPTV?",
                    "answer": (
                        f"{short_name(app_winner)} generally has more IPTV app options, "
                        f"but both can work well depending on your needs."
                    ),
                },
                {
                    "question": f"Can I use TiviMate on {name1} and {name2}?",
                    "answer": tivimate_answer(),
                },
            ],
        },
        "relatedGuides": [],
        "tags": [d1["slug"], d2["slug"], "comparison", "vs", "iptv", "streaming"],
        "keywords": [
            f"{d1['slug']} vs {d2['slug']}",
            f"{name1} vs {name2} iptv",
            "best device for iptv",
            "iptv streaming device",
        ],
        "lastUpdated": iso_timestamp(generated_at),
    }


def _device_summary(device: Dict) -> Dict:
    return {
        "name": short_name(device),
        "description": device.get("description", ""),
        "pros": items(device, "pros"),
        "cons": items(device, "cons"),
        "supportedPlayers": items(device, "supportedPlayers")[:5],
    }


def generate_comparisons(players: List[Dict], devices: List[Dict], generated_at: datetime) -> Dict:
    """Build both comparison collections and cross-link them.

    Returns {"players": [...], "devices": [...]}.
    """
    player_comparisons = [
        generate_player_comparison(a, b, generated_at) for a, b in unique_pairs(players)
    ]
    device_comparisons = [
        generate_device_comparison(a, b, generated_at) for a, b in unique_pairs(devices)
    ]

    # Records are shared with the per-kind lists, so linking updates both
    link_in_order(player_comparisons + device_comparisons, MAX_RELATED_COMPARISONS)

    logger.info("Generated %d player comparisons, %d device comparisons",
                len(player_comparisons), len(device_comparisons))
    return {"players": player_comparisons, "devices": device_comparisons}
