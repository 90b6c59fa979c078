"""Renal adjustment rules for oncology dosing.

Uses the most recent creatinine clearance (CrCl, mL/min) on file:
- < 30: carboplatin halved; cisplatin flagged as contraindicated, not reduced
- 30-49: platinum agents reduced 25%
- 50-79: monitoring only
- No CrCl: request the test, never assume normal function
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType, Confidence
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import DrugIdentity
from ..labs import most_recent_value
from ..rules_engine import BaseFactorModule, DoseContext, RuleOutcome, new_alert_id

logger = logging.getLogger(__name__)


SEVERE_IMPAIRMENT_CRCL = 30
MODERATE_IMPAIRMENT_CRCL = 50
MILD_IMPAIRMENT_CRCL = 80

SEVERE_CARBOPLATIN_FACTOR = 0.5
MODERATE_PLATINUM_FACTOR = 0.75


class RenalAdjustmentRules(BaseFactorModule):
    """Adjust dose (or flag the drug) for impaired renal function."""

    adjustment_reason = "Renal impairment adjustment"
    confidence = Confidence.HIGH
    references = (
        "Kidney Disease: Improving Global Outcomes (KDIGO)",
        "FDA Renal Impairment Guidance",
    )

    def assess(self, context: DoseContext) -> RuleOutcome:
        drug = context.drug
        crcl = most_recent_value(context.patient.lab_values, "crcl")

        if crcl is None:
            logger.debug(f"No CrCl on file for patient {context.patient.patient_id}")
            return RuleOutcome(alerts=[self._missing_crcl_alert(drug.name)])

        if crcl < SEVERE_IMPAIRMENT_CRCL:
            if drug.is_any(DrugIdentity.CARBOPLATIN):
                return RuleOutcome(
                    factor=SEVERE_CARBOPLATIN_FACTOR,
                    alerts=[DoseCalculationAlert(
                        id=new_alert_id("renal-severe"),
                        type=AlertType.DOSING,
                        severity=AlertSeverity.CRITICAL,
                        message="Severe renal impairment detected",
                        details=f"CrCl {crcl:g} mL/min requires significant dose reduction for {drug.name}",
                        recommended_action="50% dose reduction recommended, consider nephrology consultation",
                        affected_medication=drug.name,
                        category=AlertCategory.RENAL,
                        source="Renal Dosing Guidelines",
                        priority=9,
                    )],
                )
            if drug.is_any(DrugIdentity.CISPLATIN):
                # Cisplatin is avoided, not dose-reduced
                return RuleOutcome(alerts=[DoseCalculationAlert(
                    id=new_alert_id("renal-contraindication"),
                    type=AlertType.CONTRAINDICATION,
                    severity=AlertSeverity.CRITICAL,
                    message="Cisplatin contraindicated in severe renal impairment",
                    details=f"CrCl {crcl:g} mL/min is below safe threshold for cisplatin administration",
                    recommended_action="Consider alternative platinum agent (carboplatin) or non-platinum regimen",
                    affected_medication=drug.name,
                    category=AlertCategory.RENAL,
                    source="FDA Drug Label",
                    priority=10,
                )])
            return RuleOutcome()

        if crcl < MODERATE_IMPAIRMENT_CRCL:
            if drug.is_any(DrugIdentity.CARBOPLATIN, DrugIdentity.CISPLATIN):
                return RuleOutcome(
                    factor=MODERATE_PLATINUM_FACTOR,
                    alerts=[DoseCalculationAlert(
                        id=new_alert_id("renal-moderate"),
                        type=AlertType.DOSING,
                        severity=AlertSeverity.HIGH,
                        message="Moderate renal impairment requires dose adjustment",
                        details=f"CrCl {crcl:g} mL/min requires dose modification for {drug.name}",
                        recommended_action="25% dose reduction recommended",
                        affected_medication=drug.name,
                        category=AlertCategory.RENAL,
                        source="NCCN Guidelines",
                        priority=8,
                    )],
                )
            return RuleOutcome()

        if crcl < MILD_IMPAIRMENT_CRCL:
            return RuleOutcome(alerts=[DoseCalculationAlert(
                id=new_alert_id("renal-mild"),
                type=AlertType.MONITORING,
                severity=AlertSeverity.MODERATE,
                message="Mild renal impairment detected",
                details=f"CrCl {crcl:g} mL/min requires close monitoring during {drug.name} therapy",
                recommended_action="Monitor renal function before each cycle",
                affected_medication=drug.name,
                category=AlertCategory.RENAL,
                source="Clinical Guidelines",
                priority=5,
            )])

        return RuleOutcome()

    def _missing_crcl_alert(self, drug_name: str) -> DoseCalculationAlert:
        return DoseCalculationAlert(
            id=new_alert_id("renal-missing"),
            type=AlertType.LAB,
            severity=AlertSeverity.MODERATE,
            message="Recent renal function test required",
            details=f"No recent creatinine clearance available for safe {drug_name} dosing",
            recommended_action="Obtain creatinine clearance before drug administration",
            affected_medication=drug_name,
            category=AlertCategory.RENAL,
            source="Standard of Care",
            priority=6,
        )
