"""Shared text helpers for the record generators.

Source catalogs are hand-edited and some entries are sparse. These helpers
return a fallback phrase instead of raising, so one thin record never
aborts a batch of thousands.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

FALLBACK_PRO = "its core features"
FALLBACK_PRICE = "an unlisted price"


def items(entity: Dict, field: str) -> List:
    """A list field, or [] when missing or null."""
    value = entity.get(field)
    return value if isinstance(value, list) else []


def first_lower(entity: Dict, field: str, fallback: str) -> str:
    """First entry of a list field, lowercased, or fallback."""
    values = items(entity, field)
    if values and isinstance(values[0], str) and values[0].strip():
        return values[0].lower()
    logger.debug("%s has no %s, using fallback '%s'", entity.get("id", "?"), field, fallback)
    return fallback


def first_or(values: List, fallback: str) -> str:
    return values[0] if values else fallback


def pricing_model(player: Dict) -> str:
    pricing = player.get("pricing")
    return pricing.get("model", "") if isinstance(pricing, dict) else ""


def price_of(player: Dict) -> str:
    pricing = player.get("pricing")
    if isinstance(pricing, dict) and pricing.get("price"):
        return pricing["price"]
    logger.debug("%s has no price, using fallback", player.get("id", "?"))
    return FALLBACK_PRICE


def short_name(device: Dict) -> str:
    return device.get("shortName") or device.get("name", "")


def rating_of(entity: Dict) -> float:
    rating = entity.get("rating")
    return rating if isinstance(rating, (int, float)) else 0


def resolve_generated_at(value: Optional[str] = None) -> datetime:
    """Run timestamp: the pinned ISO value when given, else now (UTC)."""
    if value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
