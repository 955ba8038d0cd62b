"""Fair-Housing Compliance Rules — regex pre-screen and result merging.

Invariants:
    - quick_compliance_check is synchronous and model-free (safe for as-you-type calls)
    - Every regex match is one fair_housing/critical violation
    - merge_compliance never drops a rule-based violation
    - merged passed requires both the regex pass and the model verdict to pass

Design Decisions:
    - Patterns are case-insensitive and word-bounded so "whitewashed walls" is not flagged
    - Model output is normalized (missing keys, wrong types) before merging
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class BannedPattern:
    pattern: re.Pattern
    regulation: str
    suggestion: str


def _p(expr: str) -> re.Pattern:
    return re.compile(expr, re.IGNORECASE)


BANNED_PATTERNS: tuple[BannedPattern, ...] = (
    BannedPattern(
        _p(r"\b(white|black|asian|hispanic|latino|caucasian)\s*(only|preferred|neighborhood|area|community)\b"),
        "US Fair Housing Act - Race",
        "Remove racial references",
    ),
    BannedPattern(
        _p(r"\b(christian|muslim|jewish|hindu|buddhist)\s*(only|preferred|neighborhood|community)\b"),
        "US Fair Housing Act - Religion",
        "Remove religious references",
    ),
    BannedPattern(
        _p(r"\b(no\s*(kids|children|families)|adults?\s*only|couples?\s*only|singles?\s*only)\b"),
        "US Fair Housing Act - Familial Status",
        "Remove familial status restrictions. Use 'occupancy limits' based on property size instead",
    ),
    BannedPattern(
        _p(r"\b(males?\s*only|females?\s*only|men\s*only|women\s*only)\b"),
        "US Fair Housing Act - Sex",
        "Remove gender restrictions",
    ),
    BannedPattern(
        _p(r"\b(no\s*(disabled|handicapped|wheelchair)|able[- ]bodied\s*only)\b"),
        "US Fair Housing Act - Disability",
        "Remove disability-related restrictions. Describe accessibility features instead",
    ),
    BannedPattern(
        _p(r"\b(no\s*(foreigners|immigrants)|citizens?\s*only|nationals?\s*only)\b"),
        "US Fair Housing Act - National Origin",
        "Remove national origin restrictions",
    ),
    BannedPattern(
        _p(r"\b(no\s*(elderly|seniors|old people|young people)|age\s*\d+\s*(and\s*)?(over|under|only))\b"),
        "EU Anti-Discrimination - Age",
        "Remove age-based restrictions",
    ),
)

_VIOLATION_TYPES = {"fair_housing", "discrimination", "privacy", "misleading"}
_SEVERITIES = {"warning", "critical"}


def quick_compliance_check(text: str) -> dict:
    """Regex-only pass. Returns {"passed": bool, "violations": [...]}."""
    violations = []
    for banned in BANNED_PATTERNS:
        for match in banned.pattern.finditer(text):
            violations.append({
                "type": "fair_housing",
                "severity": "critical",
                "text": match.group(0),
                "suggestion": banned.suggestion,
                "regulation": banned.regulation,
            })
    return {"passed": not violations, "violations": violations}


def has_critical(result: dict) -> bool:
    return any(v.get("severity") == "critical" for v in result["violations"])


def normalize_model_violations(raw: object) -> list[dict]:
    """Coerce model-reported violations into the rule-based shape."""
    if not isinstance(raw, list):
        return []
    violations = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("text"):
            continue
        v_type = item.get("type")
        severity = item.get("severity")
        violations.append({
            "type": v_type if v_type in _VIOLATION_TYPES else "discrimination",
            "severity": severity if severity in _SEVERITIES else "warning",
            "text": str(item["text"]),
            "suggestion": str(item.get("suggestion") or ""),
            "regulation": str(item.get("regulation") or ""),
        })
    return violations


def merge_compliance(quick: dict, model_output: dict) -> dict:
    """Combine the regex pass with a model-assisted pass."""
    model_violations = normalize_model_violations(model_output.get("violations"))
    model_passed = model_output.get("passed", True) is not False
    violations = [*quick["violations"], *model_violations]
    return {
        "passed": quick["passed"] and model_passed,
        "violations": violations,
    }


def sanitize_listing_text(text: str) -> tuple[str, list[str]]:
    """Remove flagged phrases. Returns (sanitized_text, changes_applied)."""
    sanitized = text
    changes: list[str] = []
    for banned in BANNED_PATTERNS:
        for match in list(banned.pattern.finditer(sanitized)):
            phrase = match.group(0)
            sanitized = sanitized.replace(phrase, "", 1)
            changes.append(f'Removed "{phrase}" - {banned.suggestion}')
    sanitized = re.sub(r"\s{2,}", " ", sanitized).strip()
    return sanitized, changes
