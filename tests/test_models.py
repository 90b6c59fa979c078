"""Tests for input parsing, output serialization and clinical calculations."""

from datetime import date, datetime, timezone

import pytest

from common.dose_alerts import (
    AlertCategory,
    AlertSeverity,
    AlertType,
    Confidence,
    DoseCalculationAlert,
    DoseRecommendation,
)
from dose_engine.calculations import calculate_age, calculate_bmi, calculate_bsa, calvert_dose
from dose_engine.models import Demographics, Drug, InvalidDoseRequest, LabValue, PatientProfile


PATIENT_PAYLOAD = {
    "id": "PT-100",
    "demographics": {"dateOfBirth": "1950-06-01", "sex": "male", "heightCm": 170, "weightKg": "68.5"},
    "labValues": [
        {"labType": "CrCl", "value": 42, "units": "mL/min", "timestamp": "2026-01-10T08:00:00Z"},
        {"lab_type": "AST", "value": 30, "unit": "U/L", "timestamp": "2026-01-10T08:00:00"},
    ],
    "genetics": [{"geneSymbol": "DPYD", "phenotype": "Normal", "metabolizerStatus": "normal"}],
    "allergies": [{"allergen": "Penicillin", "severity": "mild"}],
    "conditions": [{"condition": "Hypertension", "status": "chronic"}],
}


class TestPatientProfile:
    def test_from_camel_case_payload(self):
        patient = PatientProfile.from_dict(PATIENT_PAYLOAD)

        assert patient.patient_id == "PT-100"
        assert patient.demographics.date_of_birth == date(1950, 6, 1)
        assert patient.demographics.weight_kg == 68.5
        assert len(patient.lab_values) == 2
        assert patient.genetics[0].metabolizer_status == "normal"
        assert patient.allergies[0].allergen == "Penicillin"
        assert patient.conditions[0].status == "chronic"

    def test_timestamps_are_utc_aware(self):
        patient = PatientProfile.from_dict(PATIENT_PAYLOAD)
        for lab in patient.lab_values:
            assert lab.timestamp.tzinfo is not None
        assert patient.lab_values[0].timestamp == datetime(2026, 1, 10, 8, tzinfo=timezone.utc)

    def test_missing_date_of_birth_rejected(self):
        with pytest.raises(InvalidDoseRequest):
            PatientProfile.from_dict({"demographics": {"weightKg": 70}})

    def test_bad_date_rejected(self):
        with pytest.raises(InvalidDoseRequest):
            PatientProfile.from_dict({"demographics": {"dateOfBirth": "not-a-date"}})

    def test_non_numeric_weight_rejected(self):
        with pytest.raises(InvalidDoseRequest):
            PatientProfile.from_dict({"demographics": {"dateOfBirth": "1980-01-01", "weightKg": "heavy"}})

    def test_non_object_rejected(self):
        with pytest.raises(InvalidDoseRequest):
            PatientProfile.from_dict(["not", "a", "dict"])


class TestLabValue:
    def test_numeric_value(self):
        ts = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert LabValue("ANC", "1200", "cells/uL", ts).numeric_value == 1200.0
        assert LabValue("ANC", "pending", None, ts).numeric_value is None
        assert LabValue("ANC", None, None, ts).numeric_value is None
        assert LabValue("ANC", float("nan"), None, ts).numeric_value is None

    def test_undated_result_sorts_oldest(self):
        undated = LabValue.from_dict({"labType": "ANC", "value": 100})
        dated = LabValue.from_dict({"labType": "ANC", "value": 2000, "timestamp": "2020-01-01"})
        assert undated.timestamp < dated.timestamp


class TestDrug:
    def test_from_dict(self):
        drug = Drug.from_dict({"name": "Carboplatin", "classification": "platinum", "rxnormCode": 40048})
        assert drug.classification == ["platinum"]
        assert drug.rxnorm_code == "40048"


class TestSerialization:
    def test_alert_to_dict_uses_camel_case(self):
        alert = DoseCalculationAlert(
            id="renal-abc",
            type=AlertType.DOSING,
            severity=AlertSeverity.HIGH,
            message="m",
            details="d",
            recommended_action="a",
            category=AlertCategory.RENAL,
            source="s",
            priority=8,
            affected_medication="Cisplatin",
        )
        data = alert.to_dict()
        assert data["recommendedAction"] == "a"
        assert data["affectedMedication"] == "Cisplatin"
        assert data["severity"] == "high"

    def test_affected_medication_omitted_when_unset(self):
        alert = DoseCalculationAlert(
            id="x", type=AlertType.LAB, severity=AlertSeverity.LOW, message="m", details="d",
            recommended_action="a", category=AlertCategory.GENERAL, source="s", priority=1,
        )
        assert "affectedMedication" not in alert.to_dict()

    def test_recommendation_to_dict(self):
        rec = DoseRecommendation(100, 75, "mg", "Renal function adjustment", 0.75, Confidence.HIGH, ["KDIGO"])
        data = rec.to_dict()
        assert data["adjustmentFactor"] == 0.75
        assert data["confidence"] == "high"


class TestCalculations:
    def test_age_before_and_after_birthday(self):
        dob = date(1950, 6, 1)
        assert calculate_age(dob, date(2026, 5, 31)) == 75
        assert calculate_age(dob, date(2026, 6, 1)) == 76

    def test_bmi(self):
        assert calculate_bmi(70, 175) == pytest.approx(22.857, rel=1e-3)

    def test_bsa_mosteller(self):
        assert calculate_bsa(70, 175) == pytest.approx(1.8447, rel=1e-3)

    def test_calvert(self):
        assert calvert_dose(5, 75) == 500


class TestLabTimestampNormalization:
    def test_naive_timestamp_becomes_utc(self):
        result = LabValue("ANC", 1500, "cells/uL", datetime(2026, 1, 10, 8))
        assert result.timestamp == datetime(2026, 1, 10, 8, tzinfo=timezone.utc)

    def test_missing_timestamp_sorts_oldest(self):
        undated = LabValue("ANC", 1500, "cells/uL", None)
        assert undated.timestamp == datetime.min.replace(tzinfo=timezone.utc)

    def test_direct_and_parsed_results_compare(self):
        direct = LabValue("CrCl", 90, "mL/min", datetime(2026, 1, 10, 8))
        parsed = LabValue.from_dict({"labType": "CrCl", "value": 25, "timestamp": "2026-01-14T08:00:00Z"})
        assert max([direct, parsed], key=lambda lab: lab.timestamp) is parsed

    def test_date_of_birth_string_is_parsed(self):
        assert Demographics(date_of_birth="1950-06-01").date_of_birth == date(1950, 6, 1)
