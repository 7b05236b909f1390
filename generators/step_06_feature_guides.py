"""
Step 6: Feature Guides

Player x feature ("TiviMate EPG Setup Guide") and device x feature
("How to Record IPTV on Firestick") records. Every combination is
generated, supported or not: unsupported pairs become "alternatives"
pages pointing at players or devices that do have the feature.

Only runs when features.json exists.
"""

import logging
from datetime import datetime
from typing import Dict, List

from generators.linking import link_by_keys
from generators.templating import first_or, iso_timestamp, items, short_name

logger = logging.getLogger(__name__)

MAX_RELATED_GUIDES = 5

SETTINGS_SECTIONS = {
    "playback": "Playback",
    "management": "Playlist",
}


def _feature_name(feature: Dict) -> str:
    return feature.get("shortName") or feature["name"]


def generate_player_feature_guide(player: Dict, feature: Dict, generated_at: datetime) -> Dict:
    year = generated_at.year
    name, fname, fshort = player["name"], feature["name"], _feature_name(feature)
    has_feature = feature["id"] in items(player, "features")
    alternatives = items(feature, "supportedPlayers")
    alternative = first_or(alternatives, "another IPTV player")

    if has_feature:
        steps = [
            {"title": f"Open {name} Settings",
             "description": f"Launch {name} and navigate to the Settings or Preferences menu."},
            {"title": f"Find {fshort} Options",
             "description": (f"Look for the {fshort} section in the settings. This may be under "
                             f"Playback, Interface, or a dedicated section.")},
            {"title": f"Configure {fshort}",
             "description": (f"Adjust the {fshort} settings according to your preferences. "
                             f"Enable the feature if it's disabled.")},
            {"title": "Save and Test",
             "description": f"Save your settings and test the {fshort} functionality by playing a channel."},
        ]
    else:
        steps = [
            {"title": "Consider Alternative Players",
             "description": (f"Players that support {fname} include: "
                             f"{', '.join(alternatives[:5]) or 'none listed yet'}.")},
        ]

    section = SETTINGS_SECTIONS.get(feature.get("category"), "Interface")

    return {
        "slug": f"{player['slug']}-{feature['slug']}",
        "playerId": player["id"],
        "featureId": feature["id"],
        "playerName": name,
        "featureName": fname,
        "featureShortName": fshort,
        "hasFeature": has_feature,
        "title": (f"{name} {fshort} Guide - Complete Setup Tutorial" if has_feature
                  else f"{fshort} on {name} - Alternatives & Solutions"),
        "metaTitle": f"{name} {fshort} Setup Guide {year} | Tutorial",
        "description": (
            f"Learn how to set up and use {fname} in {name}. Complete {year} guide with "
            f"step-by-step instructions." if has_feature
            else f"{name} doesn't support {fname}. Discover alternatives and workarounds in our {year} guide."
        ),
        "content": {
            "intro": (
                f"{name} offers excellent {fname} support. This guide will show you how to configure "
                f"and get the most out of {fshort} features in {name}." if has_feature
                else f"While {name} is a great IPTV player, it currently doesn't support {fname}. "
                     f"In this guide, we'll explore alternatives and workarounds."
            ),
            "benefits": items(feature, "benefits"),
            "requirements": (items(feature, "requirements") if has_feature
                             else ["Alternative IPTV player with this feature"]),
            "steps": [{"stepNumber": i, **s} for i, s in enumerate(steps, start=1)],
            "faqs": [
                {
                    "question": f"Does {name} support {fshort}?",
                    "answer": (f"Yes, {name} fully supports {fname}. You can configure it in the settings."
                               if has_feature
                               else f"No, {name} currently doesn't support {fname}. "
                                    f"Consider using {alternative} as an alternative."),
                },
                {
                    "question": f"How do I enable {fshort} in {name}?",
                    "answer": (f"Go to Settings > {section} and look for the {fshort} option."
                               if has_feature
                               else f"{fshort} is not available in {name}. You would need to use a different player."),
                },
            ],
            "conclusion": (
                f"{fname} is a powerful feature in {name} that enhances your viewing experience. "
                f"Follow the steps above to get it configured properly." if has_feature
                else f"While {name} doesn't support {fname}, there are excellent alternatives available. "
                     f"Check out {alternative} for this functionality."
            ),
        },
        "relatedGuides": [],
        "tags": [player["slug"], feature["slug"], "feature", "tutorial", "iptv"],
        "keywords": [
            f"{player['slug']} {feature['slug']}",
            f"{name} {fshort}",
            f"{fshort} {name}",
            *items(feature, "keywords"),
        ],
        "lastUpdated": iso_timestamp(generated_at),
        "difficulty": feature.get("difficulty"),
    }


def generate_device_feature_guide(device: Dict, feature: Dict, generated_at: datetime) -> Dict:
    year = generated_at.year
    name, fname, fshort = short_name(device), feature["name"], _feature_name(feature)
    is_supported = device["id"] in items(feature, "supportedDevices")
    feature_players = set(items(feature, "supportedPlayers"))
    recommended = [p for p in items(device, "supportedPlayers") if p in feature_players]
    other_devices = items(feature, "supportedDevices")

    requirements = [device["name"], *items(feature, "requirements")]
    if recommended:
        requirements.append(f"One of: {', '.join(recommended)}")

    if is_supported:
        steps = [
            {"title": "Install a Compatible IPTV Player",
             "description": (f"For {fshort} on {name}, we recommend: "
                             f"{', '.join(recommended[:3]) or 'Check our player guides'}.")},
            {"title": "Configure Your IPTV Service",
             "description": "Add your M3U playlist or Xtream credentials to the player."},
            {"title": f"Enable {fshort}",
             "description": (f"Navigate to the player's settings and look for {fshort} options. "
                             f"Enable and configure as needed.")},
            {"title": "Test the Feature",
             "description": f"Try using {fshort} to make sure everything is working correctly."},
        ]
    else:
        steps = [
            {"title": "Consider Alternative Devices",
             "description": (f"Devices that support {fname} include: "
                             f"{', '.join(other_devices[:5]) or 'none listed yet'}.")},
        ]

    return {
        "slug": f"{device['slug']}-{feature['slug']}",
        "deviceId": device["id"],
        "featureId": feature["id"],
        "deviceName": device["name"],
        "deviceShortName": name,
        "featureName": fname,
        "featureShortName": fshort,
        "isSupported": is_supported,
        "title": (f"{fshort} on {name} - Complete Guide {year}" if is_supported
                  else f"Can You Use {fshort} on {name}?"),
        "metaTitle": f"{fshort} on {name} Guide {year} | IPTV Tutorial",
        "description": (
            f"Learn how to use {fname} on your {device['name']}. Best apps and settings for {year}."
            if is_supported
            else f"Discover if {device['name']} supports {fname} and what alternatives exist."
        ),
        "content": {
            "intro": (
                f"Want to use {fname} on your {name}? This guide covers the best apps and settings "
                f"to get {fshort} working perfectly on {device['name']}." if is_supported
                else f"{device['name']} has limited support for {fname}. Let's explore what options are available."
            ),
            "recommendedPlayers": recommended,
            "benefits": items(feature, "benefits"),
            "requirements": requirements,
            "steps": [{"stepNumber": i, **s} for i, s in enumerate(steps, start=1)],
            "faqs": [
                {
                    "question": f"Can I use {fshort} on {name}?",
                    "answer": (
                        f"Yes! {name} supports {fname} through apps like "
                        f"{first_or(recommended, 'various IPTV players')}." if is_supported
                        else f"{name} has limited support for {fname}. Consider using "
                             f"{first_or(other_devices, 'a dedicated streaming device')} instead."
                    ),
                },
                {
                    "question": f"What's the best app for {fshort} on {name}?",
                    "answer": (
                        f"For {fshort} on {name}, we recommend {recommended[0]}. "
                        f"It has excellent {fshort} support." if recommended
                        else "Check our player comparison guides to find the best option for your needs."
                    ),
                },
            ],
            "conclusion": (
                f"{fname} works great on {name} with the right app. Follow our steps above to get started."
                if is_supported
                else f"While {name} doesn't fully support {fname}, there are alternatives worth considering."
            ),
        },
        "relatedGuides": [],
        "tags": [device["slug"], feature["slug"], "guide", "iptv", "how-to"],
        "keywords": [
            f"{feature['slug']} {device['slug']}",
            f"{fshort} on {name}",
            f"{name} {fshort}",
            *items(feature, "keywords"),
        ],
        "lastUpdated": iso_timestamp(generated_at),
        "difficulty": feature.get("difficulty"),
    }


def generate_feature_guides(
    players: List[Dict],
    devices: List[Dict],
    features: List[Dict],
    generated_at: datetime,
) -> Dict:
    """Returns {"players": [...], "devices": [...]}, each linked within its own kind."""
    player_guides = [
        generate_player_feature_guide(player, feature, generated_at)
        for player in players
        for feature in features
    ]
    device_guides = [
        generate_device_feature_guide(device, feature, generated_at)
        for device in devices
        for feature in features
    ]
    link_by_keys(player_guides, ["playerId", "featureId"], MAX_RELATED_GUIDES)
    link_by_keys(device_guides, ["deviceId", "featureId"], MAX_RELATED_GUIDES)

    logger.info("Generated %d player-feature guides, %d device-feature guides",
                len(player_guides), len(device_guides))
    return {"players": player_guides, "devices": device_guides}
