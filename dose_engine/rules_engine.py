"""Core rules engine for oncology dose calculation and safety alerting."""

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime

from common.dose_alerts import (
    AlertCategory,
    AlertSeverity,
    AlertType,
    Confidence,
    DoseCalculationAlert,
    DoseRecommendation,
    EngineResult,
    MonitoringRecommendation,
)
from .calculations import calculate_age, calculate_bmi, calculate_bsa
from .config import config as default_config
from .drug_identity import ResolvedDrug, resolve_drug
from .labs import most_recent_value
from .models import Drug, InvalidDoseRequest, PatientProfile
from .monitoring import monitoring_recommendations_for
from .scoring import calculate_safety_score, classify_safety_score

logger = logging.getLogger(__name__)


@dataclass
class DoseContext:
    """Everything a rule module may read for one calculation."""
    patient: PatientProfile
    drug: ResolvedDrug
    standard_dose: float
    unit: str
    age_years: int
    as_of: date
    indication: str | None = None
    carboplatin_target_auc: float = 5.0


@dataclass
class RuleOutcome:
    """What a rule module contributes: a dose factor and alerts."""
    factor: float = 1.0
    reason: str = ""
    alerts: list[DoseCalculationAlert] = field(default_factory=list)


def new_alert_id(prefix: str) -> str:
    """Generate an alert ID, unique per invocation."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class BaseRuleModule:
    """Base class for independent checks that raise alerts only."""

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        """Return list of alerts for this dose context.

        Args:
            context: Patient, drug and dose being evaluated

        Returns:
            List of DoseCalculationAlert objects
        """
        raise NotImplementedError

    def assess(self, context: DoseContext) -> RuleOutcome:
        """Checks never change the dose."""
        return RuleOutcome(alerts=self.evaluate(context))


class BaseFactorModule(BaseRuleModule):
    """Base class for evaluators that may scale the dose.

    Subclasses return a factor in (0, 1]; a factor of 1.0 leaves the dose
    unchanged and produces no adjustment entry.
    """

    adjustment_reason = ""
    confidence = Confidence.HIGH
    references: tuple[str, ...] = ()

    def assess(self, context: DoseContext) -> RuleOutcome:
        raise NotImplementedError

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        return self.assess(context).alerts


class DoseCalculationEngine:
    """Composes dose adjustments and safety checks into one recommendation.

    Holds no per-calculation state, so a single instance can be shared
    between callers and threads.
    """

    def __init__(self, config=None):
        """Initialize rules engine.

        Args:
            config: Optional settings object (defaults to environment config)
        """
        self.config = config or default_config
        self.rules: list[BaseRuleModule] = []

        self._register_rules()

    def _register_rules(self) -> None:
        """Register all rule modules in evaluation order."""
        from .rules.age_rules import AgeAdjustmentRules
        from .rules.allergy_rules import AllergyRules
        from .rules.contraindication_rules import ContraindicationRules
        from .rules.genetic_rules import PharmacogenomicRules
        from .rules.hepatic_rules import HepaticAdjustmentRules
        from .rules.lab_rules import LabValueRules
        from .rules.renal_rules import RenalAdjustmentRules
        from .rules.weight_rules import WeightBasedRules

        # Dose factors compose in this order; adjustments are reported in it
        self.rules = [
            AgeAdjustmentRules(),
            RenalAdjustmentRules(),
            HepaticAdjustmentRules(),
            WeightBasedRules(),
            PharmacogenomicRules(),
            AllergyRules(),
            LabValueRules(),
            ContraindicationRules(),
        ]

    def calculate_dose_with_alerts(
        self,
        patient: PatientProfile,
        drug: Drug,
        standard_dose: float,
        unit: str,
        indication: str | None = None,
        as_of: date | None = None,
    ) -> EngineResult:
        """Calculate a safety-adjusted dose with prioritized alerts.

        Args:
            patient: Patient clinical profile
            drug: Prescribed drug
            standard_dose: Protocol dose before adjustment
            unit: Dose unit (mg, mg/m², ...)
            indication: Optional indication, echoed in the result
            as_of: Date to compute age against (defaults to today)

        Returns:
            EngineResult with the rounded dose, alerts sorted by priority
            (highest first), applied adjustments and a 0-100 safety score

        Raises:
            InvalidDoseRequest: If the request is malformed
        """
        self._validate_request(patient, drug, standard_dose, unit)

        as_of = as_of or date.today()
        context = DoseContext(
            patient=patient,
            drug=resolve_drug(drug),
            standard_dose=float(standard_dose),
            unit=unit,
            age_years=calculate_age(patient.demographics.date_of_birth, as_of),
            as_of=as_of,
            indication=indication,
            carboplatin_target_auc=self.config.CARBOPLATIN_TARGET_AUC,
        )
        if not context.drug.identities:
            logger.debug(f"No drug-specific rules for '{drug.name}'")

        alerts: list[DoseCalculationAlert] = []
        adjustments: list[DoseRecommendation] = []
        final_dose = context.standard_dose

        for rule_module in self.rules:
            try:
                outcome = rule_module.assess(context)
            except Exception as e:
                logger.error(
                    f"Error in {rule_module.__class__.__name__}: {e}", exc_info=True
                )
                alerts.append(self._rule_failure_alert(rule_module, drug.name))
                continue

            alerts.extend(outcome.alerts)

            if isinstance(rule_module, BaseFactorModule) and outcome.factor != 1.0:
                original_dose = final_dose
                final_dose *= outcome.factor
                adjustments.append(
                    DoseRecommendation(
                        original_dose=round(original_dose, 2),
                        recommended_dose=round(final_dose, 2),
                        unit=unit,
                        adjustment_reason=outcome.reason or rule_module.adjustment_reason,
                        adjustment_factor=outcome.factor,
                        confidence=rule_module.confidence,
                        references=list(rule_module.references),
                    )
                )

        # Stable sort keeps generation order within a priority
        alerts.sort(key=lambda a: a.priority, reverse=True)
        safety_score = calculate_safety_score(alerts)

        result = EngineResult(
            recommended_dose=round(final_dose, 2),
            alerts=alerts,
            adjustments=adjustments,
            safety_score=safety_score,
            assessment_id=self._generate_assessment_id(),
            drug=drug.name,
            standard_dose=context.standard_dose,
            unit=unit,
            indication=indication,
            max_severity=self._get_max_severity(alerts),
            safety_rating=classify_safety_score(safety_score),
            patient_factors=self._patient_factors(context),
            assessed_at=datetime.now().isoformat(),
            assessed_by=self.config.ASSESSED_BY,
        )

        logger.info(
            f"Dose calculation {result.assessment_id} for patient {patient.patient_id or 'unknown'}: "
            f"{drug.name} {standard_dose} -> {result.recommended_dose} {unit}, "
            f"{len(alerts)} alerts, safety score {safety_score}"
        )
        return result

    def get_monitoring_recommendations(
        self, patient: PatientProfile, drug: Drug
    ) -> list[MonitoringRecommendation]:
        """Monitoring parameters to follow for this drug."""
        if patient is None:
            raise InvalidDoseRequest("Patient profile is required")
        if not isinstance(drug, Drug) or not drug.name or not drug.name.strip():
            raise InvalidDoseRequest("Drug with a name is required")
        return monitoring_recommendations_for(resolve_drug(drug))

    def _validate_request(self, patient, drug, standard_dose, unit) -> None:
        """Fail fast on malformed requests before any rule runs."""
        if patient is None:
            raise InvalidDoseRequest("Patient profile is required")
        if not isinstance(patient, PatientProfile):
            raise InvalidDoseRequest(
                f"Expected PatientProfile, got {type(patient).__name__}"
            )
        if patient.demographics is None or patient.demographics.date_of_birth is None:
            raise InvalidDoseRequest("Patient date of birth is required")
        if not isinstance(patient.demographics.date_of_birth, date):
            raise InvalidDoseRequest(
                f"Patient date of birth must be a date, got {patient.demographics.date_of_birth!r}"
            )
        if drug is None:
            raise InvalidDoseRequest("Drug is required")
        if not isinstance(drug, Drug):
            raise InvalidDoseRequest(f"Expected Drug, got {type(drug).__name__}")
        if not drug.name or not drug.name.strip():
            raise InvalidDoseRequest("Drug name is required")
        if isinstance(standard_dose, bool) or not isinstance(standard_dose, (int, float)):
            raise InvalidDoseRequest(f"Standard dose must be a number, got {standard_dose!r}")
        if not math.isfinite(standard_dose) or standard_dose <= 0:
            raise InvalidDoseRequest(f"Standard dose must be positive, got {standard_dose}")
        if not isinstance(unit, str) or not unit.strip():
            raise InvalidDoseRequest("Dose unit is required")

    def _rule_failure_alert(self, rule_module: BaseRuleModule, drug_name: str) -> DoseCalculationAlert:
        """Alert raised in place of a rule module that failed to run."""
        return DoseCalculationAlert(
            id=new_alert_id("rule-error"),
            type=AlertType.DOSING,
            severity=AlertSeverity.HIGH,
            message="Safety check could not be completed",
            details=f"{rule_module.__class__.__name__} failed while evaluating {drug_name}",
            recommended_action="Verify this safety check manually before administration",
            affected_medication=drug_name,
            category=AlertCategory.GENERAL,
            source="Dose Calculation Engine",
            priority=9,
        )

    def _patient_factors(self, context: DoseContext) -> dict:
        """Patient factors used in the calculation, for display."""
        demographics = context.patient.demographics
        factors = {
            "ageYears": context.age_years,
            "weightKg": demographics.weight_kg,
            "heightCm": demographics.height_cm,
            "bmi": None,
            "bsa": None,
            "crcl": most_recent_value(context.patient.lab_values, "crcl"),
        }
        if demographics.weight_kg and demographics.height_cm:
            factors["bmi"] = round(calculate_bmi(demographics.weight_kg, demographics.height_cm), 1)
            factors["bsa"] = round(calculate_bsa(demographics.weight_kg, demographics.height_cm), 2)
        return factors

    def _generate_assessment_id(self) -> str:
        """Generate unique assessment ID."""
        return f"DOSE-{uuid.uuid4().hex[:12].upper()}"

    def _get_max_severity(self, alerts: list[DoseCalculationAlert]) -> AlertSeverity | None:
        """Get the maximum severity across all alerts."""
        if not alerts:
            return None
        return max((AlertSeverity(a.severity) for a in alerts), key=lambda s: s.rank)


_engine: DoseCalculationEngine | None = None


def get_engine() -> DoseCalculationEngine:
    """Shared engine instance (stateless, safe to reuse)."""
    global _engine
    if _engine is None:
        _engine = DoseCalculationEngine()
    return _engine


def calculate_dose_with_alerts(
    patient: PatientProfile,
    drug: Drug,
    standard_dose: float,
    unit: str,
    indication: str | None = None,
    as_of: date | None = None,
) -> EngineResult:
    """Calculate a safety-adjusted dose using the shared engine."""
    return get_engine().calculate_dose_with_alerts(
        patient, drug, standard_dose, unit, indication=indication, as_of=as_of
    )


def get_monitoring_recommendations(patient: PatientProfile, drug: Drug) -> list[MonitoringRecommendation]:
    """Monitoring recommendations using the shared engine."""
    return get_engine().get_monitoring_recommendations(patient, drug)
