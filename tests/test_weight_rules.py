"""Tests for weight and BSA checks."""

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from dose_engine.rules.weight_rules import WeightBasedRules

from factories import lab, make_context, make_patient


def weight_alerts(patient, drug_name="Paclitaxel", target_auc=None):
    context = make_context(patient, drug_name)
    if target_auc is not None:
        context.carboplatin_target_auc = target_auc
    return WeightBasedRules().evaluate(context)


def test_missing_weight_alert():
    alerts = weight_alerts(make_patient(weight_kg=None))

    assert len(alerts) == 1
    assert alerts[0].type == AlertType.DOSING
    assert alerts[0].severity == AlertSeverity.HIGH
    assert alerts[0].priority == 8
    assert alerts[0].category == AlertCategory.WEIGHT


def test_zero_weight_counts_as_missing():
    alerts = weight_alerts(make_patient(weight_kg=0))
    assert alerts[0].message == "Patient weight required for accurate dosing"


def test_underweight_alert():
    alerts = weight_alerts(make_patient(weight_kg=45, height_cm=175))  # BMI 14.7

    assert len(alerts) == 1
    assert alerts[0].type == AlertType.MONITORING
    assert alerts[0].severity == AlertSeverity.MODERATE
    assert alerts[0].priority == 6


def test_obese_alert():
    alerts = weight_alerts(make_patient(weight_kg=110, height_cm=170))  # BMI 38.1

    assert len(alerts) == 1
    assert alerts[0].priority == 5
    assert "38.1" in alerts[0].details


def test_normal_bmi_and_no_height_are_silent():
    assert weight_alerts(make_patient(weight_kg=70, height_cm=175)) == []
    assert weight_alerts(make_patient(weight_kg=70, height_cm=None)) == []


def test_carboplatin_always_gets_calvert_alert():
    """The Calvert recommendation fires even when weight is missing."""
    alerts = weight_alerts(make_patient(weight_kg=None), "Carboplatin")

    assert len(alerts) == 2
    calvert = [a for a in alerts if a.source == "Calvert Formula"]
    assert len(calvert) == 1
    assert calvert[0].type == AlertType.DOSING
    assert calvert[0].severity == AlertSeverity.MODERATE
    assert calvert[0].priority == 7


def test_calvert_dose_hint_uses_crcl():
    patient = make_patient(labs=[lab("Creatinine Clearance", 75)])
    alerts = weight_alerts(patient, "Carboplatin", target_auc=5)

    # 5 × (75 + 25)
    assert "500 mg" in alerts[0].details


def test_calvert_without_crcl_has_no_hint():
    alerts = weight_alerts(make_patient(labs=[]), "Carboplatin")
    assert "mg" not in alerts[0].details
