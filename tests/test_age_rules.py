"""Tests for age-based dose adjustment rules."""

import pytest

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from dose_engine.rules.age_rules import AgeAdjustmentRules

from factories import make_context, make_patient


@pytest.mark.parametrize(
    "age, drug_name, expected_factor",
    [
        (80, "Doxorubicin", 0.75),
        (80, "Adriamycin", 0.75),
        (75, "Carboplatin", 0.8),
        (90, "Cisplatin", 0.8),
        (76, "Fluorouracil", 0.85),
        (76, "5-FU", 0.85),
        (80, "Paclitaxel", 0.9),
        (70, "Doxorubicin", 0.85),
        (65, "Carboplatin", 0.95),
        (74, "Irinotecan", 0.95),
        (64, "Doxorubicin", 1.0),
        (40, "Carboplatin", 1.0),
    ],
)
def test_age_band_factors(age, drug_name, expected_factor):
    """Each age band applies its drug-specific factor."""
    outcome = AgeAdjustmentRules().assess(make_context(make_patient(age=age), drug_name))
    assert outcome.factor == expected_factor


def test_elderly_alert_fields():
    """An applied age factor raises one moderate dosing alert."""
    outcome = AgeAdjustmentRules().assess(make_context(make_patient(age=80), "Carboplatin"))

    assert len(outcome.alerts) == 1
    alert = outcome.alerts[0]
    assert alert.type == AlertType.DOSING
    assert alert.severity == AlertSeverity.MODERATE  # 0.8 is not below 0.7
    assert alert.category == AlertCategory.AGE
    assert alert.priority == 7
    assert alert.recommended_action == "Consider 20% dose reduction"
    assert "80 years" in alert.details
    assert outcome.reason == "Increased nephrotoxicity and ototoxicity risk"


def test_under_65_produces_nothing():
    outcome = AgeAdjustmentRules().assess(make_context(make_patient(age=64), "Doxorubicin"))
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_get_age_adjustment_reason_when_not_needed():
    context = make_context(make_patient(age=30), "Doxorubicin")
    factor, reason = AgeAdjustmentRules().get_age_adjustment(30, context.drug)
    assert factor == 1.0
    assert reason == "No age-based adjustment needed"
