"""Input models for the dose calculation engine.

The calling application owns retrieval and persistence; these dataclasses
are the already-validated, in-memory shape the engine reads from. The
``from_dict`` constructors accept both the camelCase payload used by the
treatment-planning frontend and snake_case keys.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any


class InvalidDoseRequest(ValueError):
    """Raised when a dose request is malformed and cannot be evaluated."""


def _get(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key from ``data``."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_timestamp(value: Any) -> datetime:
    """Parse a lab timestamp into a timezone-aware datetime (naive = UTC)."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value:
        try:
            ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidDoseRequest(f"Invalid lab timestamp: {value!r}") from e
    else:
        # Undated results sort as oldest
        ts = datetime.min
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _parse_date(value: Any) -> date:
    """Parse a date of birth."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError as e:
            raise InvalidDoseRequest(f"Invalid date of birth: {value!r}") from e
    raise InvalidDoseRequest("Patient date of birth is required")


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidDoseRequest(f"Expected a number, got {value!r}") from e


@dataclass
class Demographics:
    """Patient demographics relevant to dosing."""
    date_of_birth: date
    sex: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None

    def __post_init__(self):
        if isinstance(self.date_of_birth, str):
            self.date_of_birth = _parse_date(self.date_of_birth)

    @classmethod
    def from_dict(cls, data: dict) -> "Demographics":
        if not isinstance(data, dict):
            raise InvalidDoseRequest("Patient demographics are required")
        return cls(
            date_of_birth=_parse_date(_get(data, "dateOfBirth", "date_of_birth")),
            sex=_get(data, "sex", "gender"),
            height_cm=_optional_float(_get(data, "heightCm", "height_cm")),
            weight_kg=_optional_float(_get(data, "weightKg", "weight_kg")),
        )


@dataclass
class LabValue:
    """A single lab result. History is unbounded and unordered."""
    lab_type: str
    value: Any  # Numeric in practice; non-numeric results are ignored by the rules
    units: str | None
    timestamp: datetime

    def __post_init__(self):
        # Always timezone-aware so results from any source compare
        self.timestamp = _parse_timestamp(self.timestamp)

    @property
    def numeric_value(self) -> float | None:
        """The value as a float, or None if it is not numeric."""
        try:
            number = float(self.value)
        except (TypeError, ValueError):
            return None
        if number != number:  # NaN
            return None
        return number

    @classmethod
    def from_dict(cls, data: dict) -> "LabValue":
        return cls(
            lab_type=str(_get(data, "labType", "lab_type", "name", default="")),
            value=_get(data, "value"),
            units=_get(data, "units", "unit"),
            timestamp=_parse_timestamp(_get(data, "timestamp", "date")),
        )


@dataclass
class GeneticResult:
    """A pharmacogenomic test result."""
    gene_symbol: str
    phenotype: str = ""
    metabolizer_status: str | None = None  # poor, intermediate, normal, rapid

    @classmethod
    def from_dict(cls, data: dict) -> "GeneticResult":
        return cls(
            gene_symbol=str(_get(data, "geneSymbol", "gene_symbol", "gene", default="")),
            phenotype=str(_get(data, "phenotype", default="")),
            metabolizer_status=_get(data, "metabolizerStatus", "metabolizer_status"),
        )


@dataclass
class Allergy:
    """A documented allergy."""
    allergen: str
    severity: str | None = None  # mild, moderate, severe, life-threatening

    @classmethod
    def from_dict(cls, data: dict) -> "Allergy":
        return cls(
            allergen=str(_get(data, "allergen", "name", "substance", default="")),
            severity=_get(data, "severity"),
        )


@dataclass
class Condition:
    """A problem-list condition."""
    condition: str
    status: str | None = None  # active, chronic, resolved, inactive

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        return cls(
            condition=str(_get(data, "condition", "name", default="")),
            status=_get(data, "status"),
        )


@dataclass
class PatientProfile:
    """All patient data the engine reads for one calculation."""
    demographics: Demographics
    lab_values: list[LabValue] = field(default_factory=list)
    genetics: list[GeneticResult] = field(default_factory=list)
    allergies: list[Allergy] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)
    patient_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PatientProfile":
        """Build a profile from the calling application's JSON payload."""
        if not isinstance(data, dict):
            raise InvalidDoseRequest("Patient profile must be an object")
        return cls(
            demographics=Demographics.from_dict(_get(data, "demographics")),
            lab_values=[LabValue.from_dict(lab) for lab in _get(data, "labValues", "lab_values", default=[])],
            genetics=[GeneticResult.from_dict(g) for g in _get(data, "genetics", default=[])],
            allergies=[Allergy.from_dict(a) for a in _get(data, "allergies", default=[])],
            conditions=[Condition.from_dict(c) for c in _get(data, "conditions", default=[])],
            patient_id=_get(data, "id", "patientId", "patient_id"),
        )


@dataclass
class Drug:
    """A prescribed drug as entered by the clinician."""
    name: str
    classification: list[str] = field(default_factory=list)
    rxnorm_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Drug":
        if not isinstance(data, dict):
            raise InvalidDoseRequest("Drug must be an object")
        classification = _get(data, "classification", default=[])
        if isinstance(classification, str):
            classification = [classification]
        rxnorm_code = _get(data, "rxnormCode", "rxnorm_code", "rxcui")
        return cls(
            name=str(_get(data, "name", default="")),
            classification=list(classification),
            rxnorm_code=str(rxnorm_code) if rxnorm_code is not None else None,
        )
