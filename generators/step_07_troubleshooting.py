"""
Step 7: Troubleshooting Guides

Player x issue and device x issue fix pages, generated only for pairs the
issue catalog marks as affected (affectedPlayers / affectedDevices).
Related links point at other guides for the same issue, across both kinds.

Only runs when issues.json exists.
"""

import logging
from datetime import datetime
from typing import Dict, List

from generators.compatibility import (
    SIDELOAD_CAPABLE,
    STORE_BASED_ANDROID,
    VENDOR_TV_STORE,
    CompatibilityRules,
)
from generators.linking import link_by_keys
from generators.templating import first_or, iso_timestamp, items, short_name

logger = logging.getLogger(__name__)

MAX_RELATED_GUIDES = 5

DEVICE_FAMILY_TIPS = {
    SIDELOAD_CAPABLE: "Clear Fire TV cache: Settings > Applications > Manage Installed Applications",
    STORE_BASED_ANDROID: "Try Developer Options > Force GPU rendering",
    VENDOR_TV_STORE: "Smart TVs have limited troubleshooting options - consider a streaming device",
}


def _phrase(issue: Dict) -> str:
    return issue["slug"].replace("-", " ")


def _causes(issue: Dict) -> str:
    causes = items(issue, "commonCauses")[:3]
    return ", ".join(causes) if causes else "network or app configuration problems"


def generate_player_issue_guide(player: Dict, issue: Dict, generated_at: datetime) -> Dict:
    year = generated_at.year
    name, issue_name = player["name"], issue["name"]

    tips = []
    if "external-player" in items(player, "features"):
        tips.append(f"Try using {name}'s external player option if playback issues persist")
    tips.append(f"Check {name} settings for buffer size adjustments")
    tips.append(f"Visit {player.get('officialUrl') or 'the official website'} for known issues")

    return {
        "slug": f"{player['slug']}-{issue['slug']}",
        "type": "player",
        "playerId": player["id"],
        "issueId": issue["id"],
        "playerName": name,
        "issueName": issue_name,
        "title": f"Fix {name} {issue_name} - Troubleshooting Guide {year}",
        "metaTitle": f"{name} {issue_name} Fix {year} | Troubleshooting",
        "description": (
            f"Experiencing {issue_name.lower()} with {name}? This guide provides solutions to fix "
            f"{issue['slug']} issues in {year}."
        ),
        "content": {
            "intro": (
                f"{issue_name} in {name} can be frustrating, but most issues are easy to fix. This guide "
                f"covers the most common causes and solutions specific to {name}."
            ),
            "severity": issue.get("severity"),
            "commonCauses": items(issue, "commonCauses"),
            "solutions": [
                *items(issue, "generalSolutions"),
                f"Clear {name} cache: Go to Settings > Apps > {name} > Clear Cache",
                f"Update {name} to the latest version",
                f"Try reinstalling {name} if issues persist",
            ],
            "playerSpecificTips": tips,
            "faqs": [
                {
                    "question": f"Why does {name} keep {_phrase(issue)}?",
                    "answer": (f"{issue_name} in {name} is usually caused by: {_causes(issue)}. "
                               f"Check our solutions above."),
                },
                {
                    "question": f"How do I fix {_phrase(issue)} in {name}?",
                    "answer": ("Start by clearing the app cache, then check your internet connection. "
                               "If the issue persists, try the solutions listed in this guide."),
                },
            ],
            "conclusion": (
                f"Most {issue_name.lower()} issues in {name} can be resolved with the solutions above. "
                f"If problems continue, consider contacting your IPTV provider or trying an alternative player."
            ),
        },
        "relatedGuides": [],
        "tags": [player["slug"], issue["slug"], "troubleshooting", "fix", "iptv"],
        "keywords": [
            f"{name} {issue['slug']}",
            f"fix {name} {issue['slug']}",
            f"{name} not working",
            *items(issue, "keywords"),
        ],
        "lastUpdated": iso_timestamp(generated_at),
    }


def generate_device_issue_guide(
    device: Dict, issue: Dict, rules: CompatibilityRules, generated_at: datetime
) -> Dict:
    year = generated_at.year
    name, issue_name = short_name(device), issue["name"]
    specs = device.get("specs") if isinstance(device.get("specs"), dict) else {}
    has_ethernet = "Ethernet" in items(specs, "connectivity")
    family_tip = DEVICE_FAMILY_TIPS.get(rules.family_of(device))
    players = items(device, "supportedPlayers")

    return {
        "slug": f"{device['slug']}-{issue['slug']}",
        "type": "device",
        "deviceId": device["id"],
        "issueId": issue["id"],
        "deviceName": device["name"],
        "deviceShortName": name,
        "issueName": issue_name,
        "title": f"Fix IPTV {issue_name} on {name} - {year} Guide",
        "metaTitle": f"{name} IPTV {issue_name} Fix {year} | Solutions",
        "description": (
            f"Having {issue_name.lower()} with IPTV on {device['name']}? Complete troubleshooting "
            f"guide with solutions for {year}."
        ),
        "content": {
            "intro": (
                f"{issue_name} when using IPTV on {name} is a common problem. This guide covers "
                f"{name}-specific solutions to get your streaming working smoothly."
            ),
            "severity": issue.get("severity"),
            "commonCauses": items(issue, "commonCauses"),
            "solutions": [
                *items(issue, "generalSolutions"),
                f"Restart your {name}",
                f"Check {name} for system updates",
                ("Use ethernet instead of Wi-Fi for better stability" if has_ethernet
                 else "Move closer to your Wi-Fi router"),
            ],
            "deviceSpecificTips": [family_tip] if family_tip else [],
            "recommendedPlayers": players[:3],
            "faqs": [
                {
                    "question": f"Why is IPTV {_phrase(issue)} on my {name}?",
                    "answer": f"{issue_name} on {name} is typically caused by: {_causes(issue)}.",
                },
                {
                    "question": f"What's the best IPTV player to avoid {_phrase(issue)} on {name}?",
                    "answer": (f"For {name}, we recommend {first_or(players, 'checking our player guides')} "
                               f"for the most stable experience."),
                },
            ],
            "conclusion": (
                f"{issue_name} on {name} can usually be fixed with the solutions above. If issues "
                f"persist, try a different IPTV player or contact your service provider."
            ),
        },
        "relatedGuides": [],
        "tags": [device["slug"], issue["slug"], "troubleshooting", "fix", "iptv"],
        "keywords": [
            f"{name} iptv {issue['slug']}",
            f"fix iptv {issue['slug']} {name}",
            f"{name} streaming issues",
            *items(issue, "keywords"),
        ],
        "lastUpdated": iso_timestamp(generated_at),
    }


def generate_troubleshooting(
    players: List[Dict],
    devices: List[Dict],
    issues: List[Dict],
    rules: CompatibilityRules,
    generated_at: datetime,
) -> Dict:
    """Returns {"players": [...], "devices": [...]}, linked by shared issue."""
    player_guides = [
        generate_player_issue_guide(player, issue, generated_at)
        for player in players
        for issue in issues
        if player["id"] in items(issue, "affectedPlayers")
    ]
    device_guides = [
        generate_device_issue_guide(device, issue, rules, generated_at)
        for device in devices
        for issue in issues
        if device["id"] in items(issue, "affectedDevices")
    ]
    link_by_keys(player_guides + device_guides, ["issueId"], MAX_RELATED_GUIDES)

    logger.info("Generated %d player troubleshooting guides, %d device troubleshooting guides",
                len(player_guides), len(device_guides))
    return {"players": player_guides, "devices": device_guides}
