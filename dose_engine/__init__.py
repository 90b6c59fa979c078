"""Oncology dose calculation and safety alerting engine."""

from .drug_identity import DrugIdentity, ResolvedDrug, resolve_drug
from .models import (
    Allergy,
    Condition,
    Demographics,
    Drug,
    GeneticResult,
    InvalidDoseRequest,
    LabValue,
    PatientProfile,
)
from .rules_engine import (
    DoseCalculationEngine,
    calculate_dose_with_alerts,
    get_monitoring_recommendations,
)

__all__ = [
    "Allergy",
    "Condition",
    "Demographics",
    "DoseCalculationEngine",
    "Drug",
    "DrugIdentity",
    "GeneticResult",
    "InvalidDoseRequest",
    "LabValue",
    "PatientProfile",
    "ResolvedDrug",
    "calculate_dose_with_alerts",
    "get_monitoring_recommendations",
    "resolve_drug",
]
