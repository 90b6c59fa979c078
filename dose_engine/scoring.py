"""Safety score calculation.

The score starts at 100 and each alert deducts a fixed amount by severity.
Deductions simply add up and the score floors at zero, so five critical
alerts and twenty critical alerts both score 0.
"""

from common.dose_alerts import AlertSeverity, DoseCalculationAlert, SafetyRating

SEVERITY_DEDUCTIONS = {
    AlertSeverity.CRITICAL: 30,
    AlertSeverity.HIGH: 20,
    AlertSeverity.MODERATE: 10,
    AlertSeverity.LOW: 5,
}

# Lower bound of each rating band
SAFETY_RATING_BANDS = (
    (80, SafetyRating.SAFE),
    (60, SafetyRating.CAUTION),
    (40, SafetyRating.WARNING),
)


def calculate_safety_score(alerts: list[DoseCalculationAlert]) -> int:
    """Reduce an alert list to a 0-100 score (100 = safest)."""
    score = 100
    for alert in alerts:
        score -= SEVERITY_DEDUCTIONS.get(AlertSeverity(alert.severity), 0)
    return max(0, score)


def classify_safety_score(score: int) -> SafetyRating:
    """Map a safety score to its display band."""
    for lower_bound, rating in SAFETY_RATING_BANDS:
        if score >= lower_bound:
            return rating
    return SafetyRating.HIGH_RISK
