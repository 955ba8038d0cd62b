"""Fair-Housing Compliance Rules — regex pre-screen and model merge.

Tests:
    - Each protected category is caught as a critical fair_housing violation
    - Word boundaries keep innocent phrases from matching
    - Merging never drops regex violations and normalizes model output
"""

import pytest

from urbanestate.core.compliance import (
    has_critical, merge_compliance, quick_compliance_check, sanitize_listing_text,
)


@pytest.mark.parametrize("text, regulation", [
    ("Lovely flat, no kids please", "US Fair Housing Act - Familial Status"),
    ("Christian only tenants", "US Fair Housing Act - Religion"),
    ("Females only building", "US Fair Housing Act - Sex"),
    ("Nationals only", "US Fair Housing Act - National Origin"),
    ("Quiet street, white neighborhood", "US Fair Housing Act - Race"),
    ("No elderly tenants", "EU Anti-Discrimination - Age"),
])
def test_banned_phrases_are_critical(text, regulation):
    result = quick_compliance_check(text)
    assert result["passed"] is False
    assert result["violations"][0]["regulation"] == regulation
    assert result["violations"][0]["severity"] == "critical"
    assert result["violations"][0]["type"] == "fair_housing"
    assert has_critical(result)


def test_clean_text_passes():
    result = quick_compliance_check(
        "Whitewashed walls, family friendly, close to schools and the metro.",
    )
    assert result == {"passed": True, "violations": []}


def test_every_match_is_reported():
    result = quick_compliance_check("Adults only. Men only.")
    assert len(result["violations"]) == 2


def test_merge_keeps_regex_violations_and_normalizes_model():
    quick = quick_compliance_check("no children")
    merged = merge_compliance(quick, {
        "passed": True,
        "violations": [
            {"type": "weird", "severity": "loud", "text": "perfect for young professionals"},
            {"type": "privacy"},
            "garbage",
        ],
    })
    assert merged["passed"] is False
    assert len(merged["violations"]) == 2
    model_violation = merged["violations"][1]
    assert model_violation["type"] == "discrimination"
    assert model_violation["severity"] == "warning"
    assert model_violation["suggestion"] == ""


def test_merge_model_failure_verdict():
    quick = quick_compliance_check("Bright studio near the park")
    assert merge_compliance(quick, {"passed": False, "violations": []})["passed"] is False
    assert merge_compliance(quick, {})["passed"] is True


def test_sanitize_listing_text_removes_phrases():
    text, changes = sanitize_listing_text("Great view. No pets. Couples only please.")
    assert "Couples only" not in text
    assert len(changes) == 1
    assert "  " not in text
