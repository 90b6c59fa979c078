"""Weight and body-size checks for oncology dosing.

These checks never change the dose:
- Missing weight: weight is required for safe dosing
- Underweight (BMI < 18.5) / obese (BMI > 30): monitoring alerts
- Carboplatin: AUC-based (Calvert) dosing preferred over BSA-based dosing
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from common.dose_alerts import DoseCalculationAlert
from ..calculations import calculate_bmi, calvert_dose
from ..drug_identity import DrugIdentity
from ..labs import most_recent_value
from ..rules_engine import BaseRuleModule, DoseContext, new_alert_id

logger = logging.getLogger(__name__)


UNDERWEIGHT_BMI = 18.5
OBESE_BMI = 30


class WeightBasedRules(BaseRuleModule):
    """Check that body-size data supports the requested dosing."""

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        alerts: list[DoseCalculationAlert] = []
        drug_name = context.drug.name
        demographics = context.patient.demographics
        weight_kg = demographics.weight_kg
        height_cm = demographics.height_cm

        if not weight_kg or weight_kg <= 0:
            alerts.append(DoseCalculationAlert(
                id=new_alert_id("weight-missing"),
                type=AlertType.DOSING,
                severity=AlertSeverity.HIGH,
                message="Patient weight required for accurate dosing",
                details=f"Body weight is required for safe {drug_name} dosing calculations",
                recommended_action="Obtain current accurate weight before dosing",
                affected_medication=drug_name,
                category=AlertCategory.WEIGHT,
                source="Standard of Care",
                priority=8,
            ))
        elif height_cm and height_cm > 0:
            bmi = calculate_bmi(weight_kg, height_cm)
            if bmi < UNDERWEIGHT_BMI:
                alerts.append(DoseCalculationAlert(
                    id=new_alert_id("weight-underweight"),
                    type=AlertType.MONITORING,
                    severity=AlertSeverity.MODERATE,
                    message="Patient underweight - monitor for toxicity",
                    details=f"BMI {bmi:.1f} may increase risk of drug toxicity",
                    recommended_action="Consider dose reduction and enhanced monitoring",
                    affected_medication=drug_name,
                    category=AlertCategory.WEIGHT,
                    source="Clinical Guidelines",
                    priority=6,
                ))
            elif bmi > OBESE_BMI:
                alerts.append(DoseCalculationAlert(
                    id=new_alert_id("weight-obese"),
                    type=AlertType.MONITORING,
                    severity=AlertSeverity.MODERATE,
                    message="Obesity may affect drug distribution",
                    details=f"BMI {bmi:.1f} may require dosing adjustment considerations",
                    recommended_action="Consider BSA-based dosing and monitor for efficacy",
                    affected_medication=drug_name,
                    category=AlertCategory.WEIGHT,
                    source="Obesity Pharmacology Guidelines",
                    priority=5,
                ))

        if context.drug.is_any(DrugIdentity.CARBOPLATIN):
            alerts.append(self._calvert_alert(context))

        return alerts

    def _calvert_alert(self, context: DoseContext) -> DoseCalculationAlert:
        """Carboplatin should be dosed by target AUC, not BSA."""
        details = "Carboplatin should be dosed using Calvert formula (AUC-based) rather than BSA"
        crcl = most_recent_value(context.patient.lab_values, "crcl")
        if crcl is not None:
            auc = context.carboplatin_target_auc
            details += (
                f". At target AUC {auc:g} with CrCl {crcl:g} mL/min: "
                f"{calvert_dose(auc, crcl):.0f} mg"
            )

        return DoseCalculationAlert(
            id=new_alert_id("dosing-method"),
            type=AlertType.DOSING,
            severity=AlertSeverity.MODERATE,
            message="Carboplatin dosing recommendation",
            details=details,
            recommended_action="Use AUC-based dosing: Dose = AUC × (CrCl + 25)",
            affected_medication=context.drug.name,
            category=AlertCategory.GENERAL,
            source="Calvert Formula",
            priority=7,
        )
