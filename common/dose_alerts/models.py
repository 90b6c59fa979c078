"""Data models for dose calculation alerts and recommendations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AlertType(str, Enum):
    """Kind of issue an alert reports."""
    DOSING = "dosing"
    ALLERGY = "allergy"
    INTERACTION = "interaction"
    CONTRAINDICATION = "contraindication"
    MONITORING = "monitoring"
    LAB = "lab"

    @classmethod
    def all_options(cls):
        """Get all options as (value, display_name) tuples for dropdowns."""
        return [(t.value, t.value.title()) for t in cls]


class AlertSeverity(str, Enum):
    """Alert severity, drives the safety score deduction."""
    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"

    @classmethod
    def all_options(cls):
        """Get all options as (value, display_name) tuples for dropdowns."""
        return [
            (cls.CRITICAL.value, "Critical"),
            (cls.HIGH.value, "High"),
            (cls.MODERATE.value, "Moderate"),
            (cls.LOW.value, "Low"),
        ]

    @property
    def rank(self) -> int:
        """Numeric rank (higher = more severe)."""
        return {
            AlertSeverity.CRITICAL: 3,
            AlertSeverity.HIGH: 2,
            AlertSeverity.MODERATE: 1,
            AlertSeverity.LOW: 0,
        }[self]


class AlertCategory(str, Enum):
    """Clinical area the alert belongs to."""
    RENAL = "renal"
    HEPATIC = "hepatic"
    CARDIAC = "cardiac"
    HEMATOLOGIC = "hematologic"
    AGE = "age"
    WEIGHT = "weight"
    BSA = "bsa"
    GENETIC = "genetic"
    GENERAL = "general"

    @classmethod
    def display_name(cls, value):
        """Get human-readable display name for a category."""
        display_map = {
            cls.BSA: "BSA",
            cls.HEMATOLOGIC: "Hematologic",
        }
        if isinstance(value, cls):
            return display_map.get(value, value.value.title())
        return display_map.get(cls(value) if value else None, value.title() if value else "")


class Confidence(str, Enum):
    """Confidence in a dose recommendation."""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class MonitoringUrgency(str, Enum):
    """How urgently a monitoring parameter must be followed."""
    ROUTINE = "routine"
    URGENT = "urgent"
    CRITICAL = "critical"


class SafetyRating(str, Enum):
    """Banding of the 0-100 safety score."""
    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    HIGH_RISK = "high_risk"

    @classmethod
    def display_name(cls, value):
        """Get human-readable display name for a rating."""
        return {
            cls.SAFE: "Safe",
            cls.CAUTION: "Caution",
            cls.WARNING: "Warning",
            cls.HIGH_RISK: "High Risk",
        }.get(value, value)


@dataclass
class DoseCalculationAlert:
    """A single safety alert raised while calculating a dose."""
    id: str
    type: AlertType
    severity: AlertSeverity
    message: str
    details: str
    recommended_action: str
    category: AlertCategory
    source: str
    priority: int  # 1-10, 10 being highest priority
    affected_medication: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "type": self.type.value if isinstance(self.type, AlertType) else self.type,
            "severity": self.severity.value if isinstance(self.severity, AlertSeverity) else self.severity,
            "message": self.message,
            "details": self.details,
            "recommendedAction": self.recommended_action,
            "category": self.category.value if isinstance(self.category, AlertCategory) else self.category,
            "source": self.source,
            "priority": self.priority,
        }
        if self.affected_medication is not None:
            data["affectedMedication"] = self.affected_medication
        return data


@dataclass
class DoseRecommendation:
    """One applied multiplicative dose adjustment."""
    original_dose: float
    recommended_dose: float
    unit: str
    adjustment_reason: str
    adjustment_factor: float
    confidence: Confidence
    references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "originalDose": self.original_dose,
            "recommendedDose": self.recommended_dose,
            "unit": self.unit,
            "adjustmentReason": self.adjustment_reason,
            "adjustmentFactor": self.adjustment_factor,
            "confidence": self.confidence.value if isinstance(self.confidence, Confidence) else self.confidence,
            "references": list(self.references),
        }


@dataclass
class MonitoringRecommendation:
    """A drug-driven monitoring parameter and its schedule."""
    parameter: str
    frequency: str
    rationale: str
    urgency: MonitoringUrgency

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "parameter": self.parameter,
            "frequency": self.frequency,
            "rationale": self.rationale,
            "urgency": self.urgency.value if isinstance(self.urgency, MonitoringUrgency) else self.urgency,
        }


@dataclass
class EngineResult:
    """Complete output of one dose calculation."""
    recommended_dose: float
    alerts: list[DoseCalculationAlert]
    adjustments: list[DoseRecommendation]
    safety_score: int

    # Request echo
    assessment_id: str = ""
    drug: str = ""
    standard_dose: float = 0.0
    unit: str = ""
    indication: str | None = None

    # Summary
    max_severity: AlertSeverity | None = None
    safety_rating: SafetyRating | None = None
    patient_factors: dict[str, Any] = field(default_factory=dict)
    assessed_at: str = ""
    assessed_by: str = ""

    @property
    def total_adjustment_factor(self) -> float:
        """Product of all applied adjustment factors."""
        total = 1.0
        for adjustment in self.adjustments:
            total *= adjustment.adjustment_factor
        return total

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "assessmentId": self.assessment_id,
            "drug": self.drug,
            "standardDose": self.standard_dose,
            "unit": self.unit,
            "indication": self.indication,
            "recommendedDose": self.recommended_dose,
            "alerts": [a.to_dict() for a in self.alerts],
            "adjustments": [a.to_dict() for a in self.adjustments],
            "safetyScore": self.safety_score,
            "safetyRating": self.safety_rating.value if self.safety_rating else None,
            "maxSeverity": self.max_severity.value if self.max_severity else None,
            "patientFactors": self.patient_factors,
            "assessedAt": self.assessed_at,
            "assessedBy": self.assessed_by,
        }
