"""Tests for shared text helpers."""

from datetime import datetime, timedelta, timezone

from generators.templating import (
    FALLBACK_PRICE,
    first_lower,
    iso_timestamp,
    price_of,
    rating_of,
    resolve_generated_at,
    short_name,
)


class TestFallbacks:
    def test_first_lower(self):
        assert first_lower({"pros": ["Fast Zapping"]}, "pros", "x") == "fast zapping"
        assert first_lower({"pros": []}, "pros", "x") == "x"
        assert first_lower({"pros": None}, "pros", "x") == "x"
        assert first_lower({"pros": ["  "]}, "pros", "x") == "x"

    def test_price(self):
        assert price_of({"pricing": {"model": "paid", "price": "$5"}}) == "$5"
        assert price_of({"pricing": {"model": "paid"}}) == FALLBACK_PRICE
        assert price_of({}) == FALLBACK_PRICE

    def test_rating(self):
        assert rating_of({"rating": 4.5}) == 4.5
        assert rating_of({"rating": "great"}) == 0
        assert rating_of({}) == 0

    def test_short_name(self):
        assert short_name({"name": "Amazon Fire TV Stick", "shortName": "Firestick"}) == "Firestick"
        assert short_name({"name": "Windows PC"}) == "Windows PC"


class TestTimestamps:
    def test_pinned_value(self):
        moment = resolve_generated_at("2026-03-01T12:00:00Z")
        assert moment == datetime(2026, 3, 1, 12, tzinfo=timezone.utc)

    def test_naive_value_is_utc(self):
        assert resolve_generated_at("2026-03-01T12:00:00").tzinfo is not None

    def test_now_when_unset(self):
        moment = resolve_generated_at(None)
        assert abs(datetime.now(timezone.utc) - moment) < timedelta(minutes=1)

    def test_iso_format(self):
        moment = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert iso_timestamp(moment) == "2026-03-01T12:00:00.123Z"

    def test_iso_converts_to_utc(self):
        moment = datetime(2026, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert iso_timestamp(moment) == "2026-03-01T12:00:00.000Z"
