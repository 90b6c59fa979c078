"""Lab value safety checks.

Independent of the renal and hepatic evaluators, these look at marrow and
cardiac reserve:
- ANC before myelosuppressive chemotherapy
- Platelets before any treatment
- LVEF before cardiotoxic therapy
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import CARDIOTOXIC_AGENTS, MYELOSUPPRESSIVE_AGENTS
from ..labs import most_recent_value
from ..rules_engine import BaseRuleModule, DoseContext, new_alert_id

logger = logging.getLogger(__name__)


ANC_HOLD = 1000          # cells/μL
ANC_BORDERLINE = 1500
PLATELETS_SEVERE = 50    # × 10³/μL
PLATELETS_MODERATE = 100
LVEF_SEVERE = 40         # %
LVEF_REDUCED = 50


class LabValueRules(BaseRuleModule):
    """Flag lab values that make treatment unsafe."""

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        alerts: list[DoseCalculationAlert] = []
        labs = context.patient.lab_values
        drug = context.drug

        if drug.in_group(MYELOSUPPRESSIVE_AGENTS):
            anc = most_recent_value(labs, "anc")
            if anc is not None:
                alert = self._check_anc(anc, drug.name)
                if alert:
                    alerts.append(alert)

        platelets = most_recent_value(labs, "platelets")
        if platelets is not None:
            alert = self._check_platelets(platelets, drug.name)
            if alert:
                alerts.append(alert)

        if drug.in_group(CARDIOTOXIC_AGENTS):
            lvef = most_recent_value(labs, "lvef")
            if lvef is not None:
                alert = self._check_lvef(lvef, drug.name)
                if alert:
                    alerts.append(alert)

        return alerts

    def _check_anc(self, anc: float, drug_name: str) -> DoseCalculationAlert | None:
        if anc < ANC_HOLD:
            return DoseCalculationAlert(
                id=new_alert_id("lab-anc-low"),
                type=AlertType.LAB,
                severity=AlertSeverity.CRITICAL,
                message="Severe neutropenia - hold chemotherapy",
                details=f"ANC {anc:g} cells/μL is below safe threshold for chemotherapy",
                recommended_action="Hold treatment until ANC > 1000, consider growth factor support",
                affected_medication=drug_name,
                category=AlertCategory.HEMATOLOGIC,
                source="NCCN Guidelines",
                priority=10,
            )
        if anc < ANC_BORDERLINE:
            return DoseCalculationAlert(
                id=new_alert_id("lab-anc-borderline"),
                type=AlertType.LAB,
                severity=AlertSeverity.HIGH,
                message="Borderline neutropenia detected",
                details=f"ANC {anc:g} cells/μL requires close monitoring",
                recommended_action="Consider dose reduction or delay, monitor closely",
                affected_medication=drug_name,
                category=AlertCategory.HEMATOLOGIC,
                source="Clinical Guidelines",
                priority=8,
            )
        return None

    def _check_platelets(self, platelets: float, drug_name: str) -> DoseCalculationAlert | None:
        if platelets >= PLATELETS_MODERATE:
            return None

        severe = platelets < PLATELETS_SEVERE
        return DoseCalculationAlert(
            id=new_alert_id("lab-platelets-low"),
            type=AlertType.LAB,
            severity=AlertSeverity.CRITICAL if severe else AlertSeverity.HIGH,
            message=f"{'Severe' if severe else 'Moderate'} thrombocytopenia detected",
            details=f"Platelet count {platelets:g} × 10³/μL may contraindicate therapy",
            recommended_action=(
                "Hold treatment, consider platelet transfusion"
                if severe
                else "Monitor closely, consider dose reduction"
            ),
            affected_medication=drug_name,
            category=AlertCategory.HEMATOLOGIC,
            source="Hematology Guidelines",
            priority=10 if severe else 8,
        )

    def _check_lvef(self, lvef: float, drug_name: str) -> DoseCalculationAlert | None:
        if lvef >= LVEF_REDUCED:
            return None

        severe = lvef < LVEF_SEVERE
        return DoseCalculationAlert(
            id=new_alert_id("lab-lvef-low"),
            type=AlertType.LAB,
            severity=AlertSeverity.CRITICAL if severe else AlertSeverity.HIGH,
            message="Reduced cardiac function detected",
            details=f"LVEF {lvef:g}% may contraindicate cardiotoxic therapy",
            recommended_action=(
                "Cardiology consultation required before treatment"
                if severe
                else "Close cardiac monitoring recommended"
            ),
            affected_medication=drug_name,
            category=AlertCategory.CARDIAC,
            source="Cardio-Oncology Guidelines",
            priority=9,
        )
