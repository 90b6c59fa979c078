"""Shared alert and recommendation models for oncology dose calculation."""

from .models import (
    AlertCategory,
    AlertSeverity,
    AlertType,
    Confidence,
    DoseCalculationAlert,
    DoseRecommendation,
    EngineResult,
    MonitoringRecommendation,
    MonitoringUrgency,
    SafetyRating,
)

__all__ = [
    "AlertCategory",
    "AlertSeverity",
    "AlertType",
    "Confidence",
    "DoseCalculationAlert",
    "DoseRecommendation",
    "EngineResult",
    "MonitoringRecommendation",
    "MonitoringUrgency",
    "SafetyRating",
]
