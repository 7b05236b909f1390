"""
Step 4: Player-on-Device Setup Guides

Builds "How to Setup {player} on {device}" records for every compatible
(player, device) pair.

Install steps depend on the device's family (sideload, Play Store, App
Store, desktop installer, vendor TV store). Every guide then gets the
same tail: add playlist, configure EPG (only if the player has EPG),
start watching. Step numbers are assigned once the list is assembled, so
they always run 1..N.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from generators.compatibility import (
    APPLE_STORE,
    DESKTOP,
    SIDELOAD_CAPABLE,
    STORE_BASED_ANDROID,
    VENDOR_TV_STORE,
    CompatibilityRules,
    is_compatible,
)
from generators.linking import dedupe, other_slugs
from generators.templating import iso_timestamp, items, price_of, pricing_model, short_name

logger = logging.getLogger(__name__)

MAX_SAME_PLAYER = 3
MAX_SAME_DEVICE = 3
MAX_RELATED_GUIDES = 5

# Player categories distributed outside the device app store
SIDELOADED_CATEGORIES = ("free", "open-source")


def _step(title: str, description: str, tips: Optional[List[str]] = None) -> Dict:
    step = {"title": title, "description": description}
    if tips:
        step["tips"] = tips
    return step


# ── Install steps by device family ───────────────────────────

def sideload_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    if player.get("category") in SIDELOADED_CATEGORIES:
        return [
            _step(
                "Enable Apps from Unknown Sources",
                f'Go to Settings > My Fire TV > Developer Options and enable "Apps from Unknown Sources" '
                f"to allow sideloading {name}.",
                ['You may need to enable Developer Options first by clicking on "About" 7 times'],
            ),
            _step(
                "Install Downloader App",
                'Search for "Downloader" in the Amazon App Store and install it. '
                "This app lets you download APK files.",
            ),
            _step(
                f"Download {name}",
                f"Open Downloader and enter the URL for {name} APK. Download and install the application.",
                ["Use a URL shortener for easier typing", "Make sure to download from official sources only"],
            ),
        ]
    return [
        _step(
            f"Search for {name}",
            f'From the Fire TV home screen, go to the Search icon and type "{name}". '
            f"Select the app from the results.",
        ),
        _step(
            "Download and Install",
            f'Click "Get" or "Download" to install {name} on your {short_name(device)}.',
            ["Installation may take 1-2 minutes depending on your internet speed"],
        ),
    ]


def play_store_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    return [
        _step(
            "Open Google Play Store",
            f"On your {short_name(device)}, navigate to the Google Play Store from the home screen.",
        ),
        _step(
            f"Search for {name}",
            f'Use the search function to find "{name}" and select it from the results.',
        ),
        _step(
            "Install the App",
            f'Click "Install" and wait for the download to complete. {name} will appear in your apps.',
        ),
    ]


def app_store_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    return [
        _step("Open App Store", f"On your {short_name(device)}, open the App Store application."),
        _step(
            f"Search for {name}",
            f'Tap the search tab and type "{name}". Select the correct app from the results.',
        ),
        _step(
            "Download and Install",
            f'Tap "Get" to download {name}. You may need to authenticate with Face ID, '
            f"Touch ID, or your Apple ID password.",
        ),
    ]


def desktop_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    return [
        _step(
            "Download the Installer",
            f"Visit the official {name} website and download the {short_name(device)} installer.",
            ["Always download from official sources to avoid malware"],
        ),
        _step(
            "Run the Installer",
            f"Open the downloaded file and follow the installation wizard to install {name}.",
        ),
        _step(
            "Launch the Application",
            f"Find {name} in your applications folder or start menu and launch it.",
        ),
    ]


def vendor_store_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    store = rules.vendor_store_names.get(device.get("id"), "the built-in app store")
    return [
        _step(
            "Open the App Store",
            f"On your {short_name(device)}, navigate to the built-in app store ({store}).",
        ),
        _step(
            f"Search for {name}",
            f'Use the search function to find "{name}". Note that Smart TV app availability may be limited.',
            ["If the app is not available, consider using a streaming device like Firestick"],
        ),
    ]


INSTALL_STEPS: Dict[str, Callable[[Dict, Dict, CompatibilityRules], List[Dict]]] = {
    SIDELOAD_CAPABLE: sideload_steps,
    STORE_BASED_ANDROID: play_store_steps,
    APPLE_STORE: app_store_steps,
    DESKTOP: desktop_steps,
    VENDOR_TV_STORE: vendor_store_steps,
}


def install_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    family = rules.family_of(device)
    template = INSTALL_STEPS.get(family)
    if template is None:
        logger.warning("Device %s has no install family (got %r); guide gets setup steps only",
                       device.get("id"), family)
        return []
    return template(player, device, rules)


def generate_steps(player: Dict, device: Dict, rules: CompatibilityRules) -> List[Dict]:
    name = player["name"]
    steps = install_steps(player, device, rules)

    steps.append(_step(
        "Add Your IPTV Playlist",
        f"Open {name} and navigate to the playlist or settings section. You can add your M3U "
        f"playlist URL or Xtream Codes credentials here.",
        ["Have your M3U URL or Xtream login details ready",
         "Some players support both M3U and Xtream formats"],
    ))

    if "epg" in items(player, "features"):
        steps.append(_step(
            "Configure EPG (TV Guide)",
            f"In {name} settings, find the EPG section and add your EPG URL. This will show "
            f"program schedules for your channels.",
            ["EPG URL is usually provided by your IPTV service",
             "Allow time for EPG data to load (can take several minutes)"],
        ))

    steps.append(_step(
        "Start Watching",
        f"Once your playlist is loaded, browse through the channel categories and start watching "
        f"your favorite content on {name}!",
        ["Mark frequently watched channels as favorites",
         "Explore the settings for more customization options"],
    ))

    return [{"stepNumber": i, **step} for i, step in enumerate(steps, start=1)]


def generate_faqs(player: Dict, device: Dict) -> List[Dict]:
    name, device_name = player["name"], short_name(device)
    features = items(player, "features")
    model = pricing_model(player)

    if model == "free":
        pricing_answer = f"Yes, {name} is completely free to use on {device_name}."
    elif model == "freemium":
        pricing_answer = (f"{name} offers a free version with basic features. "
                          f"Premium features require a {price_of(player)} purchase.")
    else:
        pricing_answer = f"{name} is a paid app costing {price_of(player)} on {device_name}."

    return [
        {"question": f"Is {name} free on {device_name}?", "answer": pricing_answer},
        {
            "question": f"Does {name} support EPG on {device_name}?",
            "answer": (
                f"Yes, {name} fully supports EPG (Electronic Program Guide) on {device_name}. "
                f"You can add your EPG URL in the settings."
                if "epg" in features
                else f"Unfortunately, {name} does not have built-in EPG support."
            ),
        },
        {
            "question": f"Can I record with {name} on {device_name}?",
            "answer": (
                f"Yes, {name} supports recording functionality on {device_name}. "
                f"You'll need sufficient storage space."
                if "recording" in features
                else f"No, {name} does not currently support recording on {device_name}."
            ),
        },
        {
            "question": f"Why is {name} buffering on my {device_name}?",
            "answer": (
                f"Buffering on {device_name} is usually caused by slow internet, server issues, "
                f"or ISP throttling. Try using ethernet instead of Wi-Fi, or use a VPN to bypass throttling."
            ),
        },
    ]


def _conclusion(player: Dict, device: Dict) -> str:
    features = items(player, "features")
    opener = f"You've successfully set up {player['name']} on your {short_name(device)}!"
    closer = ("If you experience any issues, check our troubleshooting section "
              "or explore our other guides.")
    if not features:
        return f"{opener} You're ready to enjoy your IPTV content. {closer}"
    return (f"{opener} With {len(features)} key features including "
            f"{', '.join(features[:3])}, you're ready to enjoy your IPTV content. {closer}")


def _intro(player: Dict, device: Dict) -> str:
    text = (f"Looking to set up {player['name']} on your {device['name']}? This comprehensive guide "
            f"walks you through the complete installation process, from downloading the app to "
            f"configuring your first IPTV playlist.")
    summary = player.get("shortDescription")
    if summary:
        text += f" {player['name']} is {summary.lower()}, and it works great on {short_name(device)}."
    return text


def generate_guide(player: Dict, device: Dict, rules: CompatibilityRules, generated_at: datetime) -> Dict:
    year = generated_at.year
    name, device_name = player["name"], short_name(device)
    keywords = items(player, "keywords")

    requirements = [
        f"{device['name']} device",
        "Active internet connection",
        "IPTV subscription with M3U or Xtream credentials",
    ]
    if "epg" in items(player, "features"):
        requirements.append("EPG URL (optional, for TV guide)")

    return {
        "slug": f"{player['slug']}-setup-{device['slug']}",
        "playerId": player["id"],
        "deviceId": device["id"],
        "playerName": name,
        "deviceName": device["name"],
        "deviceShortName": device_name,
        "deviceFamily": rules.family_of(device),
        "title": f"How to Setup {name} on {device_name}",
        "metaTitle": f"{name} on {device_name} - Setup Guide {year} | Step-by-Step",
        "description": (
            f"Complete guide to install and configure {name} on {device['name']}. "
            f"Step-by-step instructions for {year} with troubleshooting tips."
        ),
        "content": {
            "intro": _intro(player, device),
            "requirements": requirements,
            "steps": generate_steps(player, device, rules),
            "troubleshooting": [
                "If the app won't install, check your device storage space",
                "For playback issues, try clearing the app cache",
                "If channels don't load, verify your playlist URL is correct",
                "For buffering, use ethernet instead of Wi-Fi when possible",
            ],
            "faqs": generate_faqs(player, device),
            "conclusion": _conclusion(player, device),
        },
        "relatedGuides": [],
        "tags": [player["slug"], device["slug"], "setup", "iptv", "guide", *keywords[:3]],
        "keywords": [
            f"{player['slug']} {device['slug']}",
            f"{name} on {device_name}",
            f"install {name} {device_name}",
            f"{name} setup guide",
            f"{device_name} iptv player",
            *keywords,
        ],
        "lastUpdated": iso_timestamp(generated_at),
        "playerRating": player.get("rating"),
        "playerPricing": player.get("pricing"),
    }


def link_guides(guides: List[Dict]) -> List[Dict]:
    """Up to 3 same-player and 3 same-device guides, deduplicated, capped at 5."""
    for guide in guides:
        same_player = other_slugs(guides, guide, MAX_SAME_PLAYER,
                                  match=lambda g, pid=guide["playerId"]: g["playerId"] == pid)
        same_device = other_slugs(guides, guide, MAX_SAME_DEVICE,
                                  match=lambda g, did=guide["deviceId"]: g["deviceId"] == did)
        guide["relatedGuides"] = dedupe(same_player + same_device)[:MAX_RELATED_GUIDES]
    return guides


def generate_guides(
    players: List[Dict],
    devices: List[Dict],
    rules: CompatibilityRules,
    generated_at: datetime,
) -> List[Dict]:
    """One guide per compatible (player, device) pair, player-major order."""
    guides = [
        generate_guide(player, device, rules, generated_at)
        for player in players
        for device in devices
        if is_compatible(player, device, rules)
    ]
    link_guides(guides)
    logger.info("Generated %d player-device guides", len(guides))
    return guides
