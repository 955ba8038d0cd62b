"""Fraud Rules — rule flags, scoring and model merge."""

import math

import pytest

from urbanestate.core.fraud_rules import (
    area_average, merge_fraud_analysis, recommendation_for,
    rule_based_fraud_flags, rule_score,
)


def test_area_average():
    assert area_average([]) is None
    assert area_average([1000, 2000]) == 1500


def test_all_rule_flags():
    flags = rule_based_fraud_flags(
        rent=500, currency="AED", photo_count=0,
        description="Cheap!", area_avg_price=2000,
    )
    assert [f["type"] for f in flags] == ["pricing", "photos", "description"]
    assert "75% below area average" in flags[0]["description"]
    assert rule_score(flags) == 50


def test_no_flags_for_normal_listing():
    flags = rule_based_fraud_flags(
        rent=1900, currency="AED", photo_count=4,
        description="x" * 80, area_avg_price=2000,
    )
    assert flags == []


def test_missing_description_is_not_flagged():
    assert rule_based_fraud_flags(1000, "AED", 2, None, None) == []


def test_recommendation_thresholds():
    assert recommendation_for(70).value == "reject"
    assert recommendation_for(40).value == "review"
    assert recommendation_for(39).value == "approve"


def test_model_can_only_raise_risk():
    flags = [{"type": "photos", "severity": "medium", "description": "none"}]
    lowered = merge_fraud_analysis(flags, {"riskScore": 5})
    assert lowered["risk_score"] == 15
    raised = merge_fraud_analysis(flags, {"riskScore": 85, "flags": [
        {"type": "account", "severity": "high", "description": "New account"},
    ]})
    assert raised["risk_score"] == 85
    assert raised["recommendation"] == "reject"
    assert len(raised["flags"]) == 2


def test_model_unavailable():
    result = merge_fraud_analysis([], None)
    assert result == {"risk_score": 0, "flags": [], "recommendation": "approve"}


@pytest.mark.parametrize("risk", [math.nan, math.inf, -math.inf, True])
def test_non_numeric_model_risk_counts_as_zero(risk):
    flags = [{"type": "photos", "severity": "medium", "description": "none"}]
    result = merge_fraud_analysis(flags, {"riskScore": risk})
    assert result["risk_score"] == 15
    assert result["recommendation"] == "approve"
