"""Tests for renal adjustment rules."""

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from dose_engine.rules.renal_rules import RenalAdjustmentRules

from factories import lab, make_context, make_patient


def renal_outcome(crcl_labs, drug_name):
    patient = make_patient(labs=crcl_labs)
    return RenalAdjustmentRules().assess(make_context(patient, drug_name))


def test_severe_impairment_halves_carboplatin():
    outcome = renal_outcome([lab("Creatinine Clearance", 25)], "Carboplatin")

    assert outcome.factor == 0.5
    assert len(outcome.alerts) == 1
    alert = outcome.alerts[0]
    assert alert.type == AlertType.DOSING
    assert alert.severity == AlertSeverity.CRITICAL
    assert alert.priority == 9
    assert alert.category == AlertCategory.RENAL


def test_severe_impairment_flags_cisplatin_without_reducing():
    """Cisplatin is flagged as contraindicated, never dose-reduced."""
    outcome = renal_outcome([lab("CrCl", 25)], "Cisplatin")

    assert outcome.factor == 1.0
    assert len(outcome.alerts) == 1
    alert = outcome.alerts[0]
    assert alert.type == AlertType.CONTRAINDICATION
    assert alert.severity == AlertSeverity.CRITICAL
    assert alert.priority == 10


def test_severe_impairment_other_drug_silent():
    outcome = renal_outcome([lab("CrCl", 20)], "Paclitaxel")
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_moderate_impairment_reduces_platinum_agents():
    for drug_name in ("Carboplatin", "Cisplatin"):
        outcome = renal_outcome([lab("CrCl", 40)], drug_name)
        assert outcome.factor == 0.75
        assert outcome.alerts[0].severity == AlertSeverity.HIGH
        assert outcome.alerts[0].priority == 8


def test_moderate_impairment_boundaries():
    assert renal_outcome([lab("CrCl", 30)], "Carboplatin").factor == 0.75
    assert renal_outcome([lab("CrCl", 49.9)], "Carboplatin").factor == 0.75
    assert renal_outcome([lab("CrCl", 50)], "Carboplatin").factor == 1.0


def test_mild_impairment_monitoring_only():
    outcome = renal_outcome([lab("CrCl", 65)], "Doxorubicin")

    assert outcome.factor == 1.0
    assert len(outcome.alerts) == 1
    assert outcome.alerts[0].type == AlertType.MONITORING
    assert outcome.alerts[0].severity == AlertSeverity.MODERATE
    assert outcome.alerts[0].priority == 5


def test_normal_function_no_alert():
    outcome = renal_outcome([lab("CrCl", 80)], "Carboplatin")
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_missing_crcl_requests_test():
    """Missing data is surfaced, never assumed normal."""
    outcome = renal_outcome([lab("AST", 20)], "Carboplatin")

    assert outcome.factor == 1.0
    assert len(outcome.alerts) == 1
    alert = outcome.alerts[0]
    assert alert.type == AlertType.LAB
    assert alert.severity == AlertSeverity.MODERATE
    assert alert.priority == 6
    assert alert.category == AlertCategory.RENAL


def test_most_recent_crcl_wins():
    labs = [
        lab("Creatinine Clearance", 25, days_ago=30),
        lab("Creatinine Clearance", 90, days_ago=1),
    ]
    outcome = renal_outcome(labs, "Carboplatin")
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_non_numeric_crcl_treated_as_missing():
    outcome = renal_outcome([lab("CrCl", "pending")], "Carboplatin")
    assert outcome.alerts[0].type == AlertType.LAB
