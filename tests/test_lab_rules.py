"""Tests for ANC, platelet and LVEF checks."""

from common.dose_alerts import AlertCategory, AlertSeverity
from dose_engine.rules.lab_rules import LabValueRules

from factories import lab, make_context, make_patient


def lab_alerts(labs, drug_name):
    return LabValueRules().evaluate(make_context(make_patient(labs=labs), drug_name))


def test_severe_neutropenia_holds_myelosuppressive_drug():
    alerts = lab_alerts([lab("Absolute Neutrophil Count", 800)], "Doxorubicin")

    assert len(alerts) == 1
    assert alerts[0].severity == AlertSeverity.CRITICAL
    assert alerts[0].priority == 10
    assert alerts[0].category == AlertCategory.HEMATOLOGIC


def test_borderline_neutropenia():
    alerts = lab_alerts([lab("ANC", 1200)], "Carboplatin")
    assert alerts[0].severity == AlertSeverity.HIGH
    assert alerts[0].priority == 8


def test_anc_ignored_for_non_myelosuppressive_drug():
    assert lab_alerts([lab("ANC", 500)], "Trastuzumab") == []


def test_anc_at_threshold_is_fine():
    assert lab_alerts([lab("ANC", 1500)], "Paclitaxel") == []


def test_creatinine_clearance_is_not_anc():
    assert lab_alerts([lab("Creatinine Clearance", 20)], "Doxorubicin") == []


def test_platelets_checked_for_any_drug():
    severe = lab_alerts([lab("Platelets", 40)], "Irinotecan")
    assert severe[0].severity == AlertSeverity.CRITICAL
    assert severe[0].priority == 10
    assert severe[0].message == "Severe thrombocytopenia detected"

    moderate = lab_alerts([lab("PLT", 80)], "Irinotecan")
    assert moderate[0].severity == AlertSeverity.HIGH
    assert moderate[0].priority == 8
    assert moderate[0].message == "Moderate thrombocytopenia detected"

    assert lab_alerts([lab("Platelet Count", 150)], "Irinotecan") == []


def test_reduced_lvef_for_cardiotoxic_drug():
    severe = lab_alerts([lab("LVEF", 35)], "Trastuzumab")
    assert severe[0].severity == AlertSeverity.CRITICAL
    assert severe[0].category == AlertCategory.CARDIAC
    assert severe[0].priority == 9

    reduced = lab_alerts([lab("Ejection Fraction", 45)], "Doxorubicin")
    assert reduced[0].severity == AlertSeverity.HIGH
    assert reduced[0].priority == 9


def test_lvef_ignored_for_other_drugs():
    assert lab_alerts([lab("LVEF", 30)], "Carboplatin") == []


def test_most_recent_value_used():
    labs = [lab("ANC", 500, days_ago=10), lab("ANC", 2500, days_ago=1)]
    assert lab_alerts(labs, "Doxorubicin") == []


def test_combined_findings():
    labs = [lab("ANC", 700), lab("Platelets", 45), lab("LVEF", 38)]
    alerts = lab_alerts(labs, "Doxorubicin")
    assert len(alerts) == 3
