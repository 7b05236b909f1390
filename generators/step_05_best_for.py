"""
Step 5: "Best IPTV Player for {device}" Pages

Ranks the players each device lists in supportedPlayers and picks a top
pick, a runner-up and a budget pick.

Ranking score = rating * 10 + number of features. Ties keep catalog order.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from generators.linking import link_in_order
from generators.templating import (
    first_lower,
    iso_timestamp,
    items,
    price_of,
    pricing_model,
    rating_of,
    short_name,
)

logger = logging.getLogger(__name__)

MAX_RANKINGS = 10
MAX_TITLE_PICKS = 5
MAX_RELATED_PAGES = 5

CATEGORY_NOTES = {
    "smart-tv": "{name} has limited IPTV app options. Consider a streaming device for more choices.",
    "streaming-stick": "{name} supports most popular IPTV players through its app store.",
}
DEFAULT_NOTE = "{name} offers excellent IPTV app compatibility."


def rank_players(device: Dict, players: List[Dict]) -> List[Dict]:
    supported = set(items(device, "supportedPlayers"))
    compatible = [p for p in players if p["id"] in supported]
    return sorted(
        compatible,
        key=lambda p: -(rating_of(p) * 10 + len(items(p, "features"))),
    )


def _second_pro(player: Dict) -> str:
    pros = items(player, "pros")
    return pros[1].lower() if len(pros) > 1 else "excellent overall performance"


def _budget_pick(ranked: List[Dict]) -> Optional[Dict]:
    for player in ranked:
        if pricing_model(player) == "free":
            return player
    return ranked[-1] if ranked else None


def _pick_summary(player: Optional[Dict], **extra) -> Optional[Dict]:
    if player is None:
        return None
    return {
        "name": player["name"],
        "slug": player["slug"],
        "rating": player.get("rating"),
        "pricing": player.get("pricing"),
        **extra,
    }


def _free_answer(device_name: str, budget: Optional[Dict], ranked: List[Dict]) -> str:
    if budget is not None and pricing_model(budget) == "free":
        return f"Yes! {budget['name']} is completely free and works great on {device_name}."
    freemium = next((p["name"] for p in ranked if pricing_model(p) == "freemium"), "Several options")
    return f"Most players offer free versions with limited features. {freemium} has a freemium model."


def _conclusion(device_name: str, top: Optional[Dict], runner_up: Optional[Dict],
                budget: Optional[Dict]) -> str:
    if top is None:
        return (f"{device_name} has limited IPTV player options. Consider using a dedicated "
                f"streaming device for better app support.")
    text = f"For {device_name}, we recommend {top['name']} as the best overall IPTV player."
    if runner_up is not None:
        text += f" {runner_up['name']} is a solid alternative"
        if budget is not None and pricing_model(budget) == "free":
            text += f", and {budget['name']} is perfect if you want a free option"
        text += "."
    elif budget is not None and pricing_model(budget) == "free":
        text += f" {budget['name']} is perfect if you want a free option."
    return text


def generate_best_for_page(device: Dict, players: List[Dict], generated_at: datetime) -> Dict:
    year = generated_at.year
    name = short_name(device)
    ranked = rank_players(device, players)

    top = ranked[0] if ranked else None
    runner_up = ranked[1] if len(ranked) > 1 else None
    budget = _budget_pick(ranked)
    if budget is not None and top is not None and budget["id"] == top["id"]:
        budget = None

    top_pick = None
    if top is not None:
        top_pick = _pick_summary(
            top,
            description=top.get("description", ""),
            features=items(top, "features"),
            pros=items(top, "pros"),
            cons=items(top, "cons"),
            whyTopPick=(
                f"{top['name']} earns our top spot for {name} thanks to "
                f"{first_lower(top, 'pros', 'its core features')} and "
                f"{_second_pro(top)}."
            ),
        )

    budget_pick = None
    if budget is not None:
        budget_pick = _pick_summary(
            budget,
            description=budget.get("shortDescription", ""),
            whyBudget=(
                f"{budget['name']} is completely free and still offers solid features."
                if pricing_model(budget) == "free"
                else f"{budget['name']} offers great value at {price_of(budget)}."
            ),
        )

    note = CATEGORY_NOTES.get(device.get("category"), DEFAULT_NOTE)
    supports_tivimate = "tivimate" in items(device, "supportedPlayers")

    return {
        "slug": f"best-iptv-player-{device['slug']}",
        "deviceId": device["id"],
        "deviceName": device["name"],
        "deviceShortName": name,
        "title": f"Best IPTV Player for {name} {year} - Top {min(len(ranked), MAX_TITLE_PICKS)} Picks",
        "metaTitle": f"Best IPTV Player for {name} {year} | Top Picks Ranked",
        "description": (
            f"Find the best IPTV player for {device['name']} in {year}. We compare {len(ranked)} "
            f"apps and rank them by features, reliability, and value."
        ),
        "content": {
            "intro": (
                f"Looking for the best IPTV player for your {name}? We've tested and ranked the top "
                f"options available for {device['name']} to help you choose the perfect app for your "
                f"streaming needs."
            ),
            "topPick": top_pick,
            "runnerUp": _pick_summary(
                runner_up,
                description=runner_up.get("shortDescription", ""),
                pros=items(runner_up, "pros")[:3],
            ) if runner_up is not None else None,
            "budgetPick": budget_pick,
            "allRankings": [
                {
                    "rank": rank,
                    "name": p["name"],
                    "slug": p["slug"],
                    "rating": p.get("rating"),
                    "pricing": "Free" if pricing_model(p) == "free" else price_of(p),
                    "highlight": items(p, "pros")[0] if items(p, "pros") else "",
                }
                for rank, p in enumerate(ranked[:MAX_RANKINGS], start=1)
            ],
            "deviceCompatibility": {
                "totalApps": len(ranked),
                "os": device.get("os"),
                "notes": note.format(name=name),
            },
            "faqs": [
                {
                    "question": f"What is the best IPTV player for {name}?",
                    "answer": (
                        f"{top['name']} is our top pick for {name} due to "
                        f"{first_lower(top, 'pros', 'its core features')}."
                        if top is not None
                        else "Check our rankings above for the best options."
                    ),
                },
                {
                    "question": f"Is there a free IPTV player for {name}?",
                    "answer": _free_answer(name, budget, ranked),
                },
                {
                    "question": f"Does {name} support TiviMate?",
                    "answer": (
                        f"Yes, TiviMate is available on {name} and is one of our top recommendations."
                        if supports_tivimate
                        else f"Unfortunately, TiviMate is not available on {name}. Consider "
                             f"{top['name'] if top is not None else 'alternative players'} instead."
                    ),
                },
            ],
            "conclusion": _conclusion(name, top, runner_up, budget),
        },
        "relatedGuides": [],
        "tags": [device["slug"], "best", "iptv-player", "ranking", str(year)],
        "keywords": [
            f"best iptv player {device['slug']}",
            f"best iptv app {name}",
            f"{name} iptv player",
            f"top iptv apps {name}",
            f"iptv {name} {year}",
        ],
        "lastUpdated": iso_timestamp(generated_at),
    }


def generate_best_for(devices: List[Dict], players: List[Dict], generated_at: datetime) -> List[Dict]:
    pages = [generate_best_for_page(device, players, generated_at) for device in devices]
    link_in_order(pages, MAX_RELATED_PAGES)
    logger.info("Generated %d best-for pages", len(pages))
    return pages
