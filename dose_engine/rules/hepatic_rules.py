"""Hepatic adjustment rules for oncology dosing.

Requires the most recent AST, ALT and total bilirubin; with any of the three
missing the evaluator stays silent. Any single value crossing a band's
threshold triggers that band, most severe band first.
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType, Confidence
from common.dose_alerts import DoseCalculationAlert
from ..labs import most_recent_value
from ..rules_engine import BaseFactorModule, DoseContext, RuleOutcome, new_alert_id

logger = logging.getLogger(__name__)


# Upper limits of normal assumed: AST/ALT 40 U/L, bilirubin 1.2 mg/dL.
# One entry per band, most severe first
HEPATIC_BANDS = (
    {
        "ast_gt": 120,
        "alt_gt": 120,
        "bilirubin_gt": 3.0,
        "factor": 0.5,
        "id_prefix": "hepatic-severe",
        "type": AlertType.DOSING,
        "severity": AlertSeverity.CRITICAL,
        "message": "Severe hepatic impairment detected",
        "action": "50% dose reduction recommended, consider hepatology consultation",
        "source": "Child-Pugh Classification",
        "priority": 9,
    },
    {
        "ast_gt": 80,
        "alt_gt": 80,
        "bilirubin_gt": 2.0,
        "factor": 0.75,
        "id_prefix": "hepatic-moderate",
        "type": AlertType.DOSING,
        "severity": AlertSeverity.HIGH,
        "message": "Moderate hepatic impairment requires dose adjustment",
        "action": "25% dose reduction recommended",
        "source": "FDA Hepatic Impairment Guidance",
        "priority": 8,
    },
    {
        "ast_gt": 40,
        "alt_gt": 40,
        "bilirubin_gt": 1.2,
        "factor": 1.0,
        "id_prefix": "hepatic-mild",
        "type": AlertType.MONITORING,
        "severity": AlertSeverity.MODERATE,
        "message": "Mild hepatic impairment detected",
        "action": "Monitor liver function before each cycle",
        "source": "Clinical Guidelines",
        "priority": 5,
    },
)


class HepaticAdjustmentRules(BaseFactorModule):
    """Adjust dose for elevated liver enzymes or bilirubin."""

    adjustment_reason = "Hepatic impairment adjustment"
    confidence = Confidence.MODERATE
    references = ("Child-Pugh Classification", "FDA Hepatic Impairment Guidance")

    def assess(self, context: DoseContext) -> RuleOutcome:
        labs = context.patient.lab_values
        ast = most_recent_value(labs, "ast")
        alt = most_recent_value(labs, "alt")
        bilirubin = most_recent_value(labs, "bilirubin")

        if ast is None or alt is None or bilirubin is None:
            logger.debug(
                f"Incomplete liver panel for patient {context.patient.patient_id}, skipping hepatic rules"
            )
            return RuleOutcome()

        band = self._match_band(ast, alt, bilirubin)
        if band is None:
            return RuleOutcome()

        alert = DoseCalculationAlert(
            id=new_alert_id(band["id_prefix"]),
            type=band["type"],
            severity=band["severity"],
            message=band["message"],
            details=(
                f"Elevated liver tests (AST: {ast:g}, ALT: {alt:g}, Bilirubin: {bilirubin:g}) "
                f"during {context.drug.name} therapy"
            ),
            recommended_action=band["action"],
            affected_medication=context.drug.name,
            category=AlertCategory.HEPATIC,
            source=band["source"],
            priority=band["priority"],
        )
        return RuleOutcome(factor=band["factor"], alerts=[alert])

    def _match_band(self, ast: float, alt: float, bilirubin: float) -> dict | None:
        """First band (most severe first) with any value over its threshold."""
        for band in HEPATIC_BANDS:
            if ast > band["ast_gt"] or alt > band["alt_gt"] or bilirubin > band["bilirubin_gt"]:
                return band
        return None
