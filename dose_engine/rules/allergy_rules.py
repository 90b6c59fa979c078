"""Allergy checking and cross-sensitivity rules for oncology drugs.

Checks for direct allergy matches and known cross-sensitivity patterns.
Allergies never change the dose: a direct match means do not administer.
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import PLATINUM_AGENTS, DrugIdentity
from ..models import Allergy
from ..rules_engine import BaseRuleModule, DoseContext, new_alert_id

logger = logging.getLogger(__name__)


# Documented allergy severity -> alert severity (anything else is moderate)
ALLERGY_SEVERITY_MAP = {
    "life-threatening": AlertSeverity.CRITICAL,
    "severe": AlertSeverity.HIGH,
}


# Cross-sensitivity rules: allergen fragment -> drugs that may cross-react
CROSS_SENSITIVITY_RULES = [
    {
        "allergen_contains": "platinum",
        "drugs": PLATINUM_AGENTS,
        "id_prefix": "allergy-cross-platinum",
        "message": "Potential platinum cross-sensitivity",
        "details": "Patient has allergy to {allergen}, cross-sensitivity possible with {drug}",
        "recommendation": "Consider premedication or alternative non-platinum regimen",
    },
    {
        "allergen_contains": "sulfa",
        "drugs": frozenset({DrugIdentity.SULFAMETHOXAZOLE}),
        "id_prefix": "allergy-cross-sulfa",
        "message": "Sulfa allergy cross-sensitivity",
        "details": "Patient has sulfa allergy, potential cross-reactivity with {drug}",
        "recommendation": "Consider alternative antibiotic",
    },
]


class AllergyRules(BaseRuleModule):
    """Check for documented allergies to the prescribed drug."""

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        alerts: list[DoseCalculationAlert] = []
        drug = context.drug
        drug_lower = drug.name.strip().lower()

        for allergy in context.patient.allergies:
            allergen_lower = (allergy.allergen or "").strip().lower()
            if not allergen_lower:
                continue

            if allergen_lower in drug_lower or drug_lower in allergen_lower:
                alerts.append(self._direct_allergy_alert(allergy, drug.name))

            for rule in CROSS_SENSITIVITY_RULES:
                if rule["allergen_contains"] in allergen_lower and drug.in_group(rule["drugs"]):
                    alerts.append(DoseCalculationAlert(
                        id=new_alert_id(rule["id_prefix"]),
                        type=AlertType.ALLERGY,
                        severity=AlertSeverity.HIGH,
                        message=rule["message"],
                        details=rule["details"].format(allergen=allergy.allergen, drug=drug.name),
                        recommended_action=rule["recommendation"],
                        affected_medication=drug.name,
                        category=AlertCategory.GENERAL,
                        source="Cross-Sensitivity Database",
                        priority=8,
                    ))

        return alerts

    def _direct_allergy_alert(self, allergy: Allergy, drug_name: str) -> DoseCalculationAlert:
        severity_text = (allergy.severity or "").strip().lower()
        return DoseCalculationAlert(
            id=new_alert_id("allergy-direct"),
            type=AlertType.ALLERGY,
            severity=ALLERGY_SEVERITY_MAP.get(severity_text, AlertSeverity.MODERATE),
            message="Known drug allergy detected",
            details=f"Patient has documented {severity_text or 'unspecified severity'} allergy to {allergy.allergen}",
            recommended_action="DO NOT ADMINISTER - Consider alternative agent",
            affected_medication=drug_name,
            category=AlertCategory.GENERAL,
            source="Patient Allergy History",
            priority=10,
        )
