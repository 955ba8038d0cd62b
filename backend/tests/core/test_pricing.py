"""Rent Pricing — percentile bands, adjustments and insights."""

import pytest

from urbanestate.core.pricing import (
    choose_comparables, percentile, pricing_recommendation,
)


def test_percentile_interpolates():
    values = [1000, 2000, 3000, 4000]
    assert percentile(values, 50) == 2500
    assert percentile(values, 25) == 1750
    assert percentile([5], 75) == 5


def test_area_comparables_preferred_when_enough():
    assert choose_comparables([1, 2, 3], [9] * 10) == [1, 2, 3]
    assert choose_comparables([1, 2], [9] * 10) == [9] * 10


def test_no_comparables_gives_default_band():
    result = pricing_recommendation(
        [], area="Marina", current_price=1000, currency="AED",
        amenities=[], furnished=False, month=1,
    )
    assert result["suggested_range"]["low"] == pytest.approx(850)
    assert result["suggested_range"]["high"] == pytest.approx(1150)
    assert result["confidence"] == "low"
    assert result["comparable_count"] == 0


def test_adjustments_and_position():
    rents = [1000, 1000, 1000, 1000, 1000]
    result = pricing_recommendation(
        rents, area="Marina", current_price=500, currency="AED",
        amenities=["Pool", "Gym", "Garden", "Sauna"], furnished=True, month=6,
    )
    # 1 + 3 * 0.02 + 0.10 + 0.07
    assert result["suggested_range"]["median"] == 1230
    assert result["price_position"] == "below"
    assert result["seasonal_adjustment"] == 7
    assert result["confidence"] == "medium"
    assert any("3 premium amenities" in i for i in result["insights"])
    assert any("Current season" in i for i in result["insights"])


def test_premium_and_competitive_positions():
    rents = [1000] * 10
    premium = pricing_recommendation(
        rents, area="Marina", current_price=5000, currency="AED",
        amenities=[], furnished=False, month=10,
    )
    assert premium["price_position"] == "premium"
    assert premium["confidence"] == "high"
    competitive = pricing_recommendation(
        rents, area="Marina", current_price=1000, currency="AED",
        amenities=[], furnished=False, month=10,
    )
    assert competitive["price_position"] == "competitive"
    assert competitive["insights"][0] == "Your price is competitive for the Marina area."
