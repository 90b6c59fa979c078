"""Condition-based contraindication rules.

Matches the patient's problem list against a fixed condition x drug table.
Resolved or inactive conditions are ignored.
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import DrugIdentity
from ..rules_engine import BaseRuleModule, DoseContext, new_alert_id

logger = logging.getLogger(__name__)


INACTIVE_CONDITION_STATUSES = frozenset({"resolved", "inactive"})

CONTRAINDICATION_RULES = [
    {
        "condition_contains": "heart failure",
        "drug": DrugIdentity.DOXORUBICIN,
        "id_prefix": "contraindication-hf-doxorubicin",
        "severity": AlertSeverity.CRITICAL,
        "priority": 10,
        "category": AlertCategory.CARDIAC,
        "message": "Doxorubicin contraindicated in heart failure",
        "details": "Active heart failure is a contraindication to doxorubicin therapy",
        "action": "Consider alternative anthracycline-free regimen",
        "source": "FDA Drug Label",
    },
    {
        "condition_contains": "renal failure",
        "drug": DrugIdentity.CISPLATIN,
        "id_prefix": "contraindication-rf-cisplatin",
        "severity": AlertSeverity.CRITICAL,
        "priority": 10,
        "category": AlertCategory.RENAL,
        "message": "Cisplatin contraindicated in renal failure",
        "details": "Renal failure is a contraindication to cisplatin therapy",
        "action": "Consider carboplatin or alternative regimen",
        "source": "FDA Drug Label",
    },
    {
        "condition_contains": "hearing loss",
        "drug": DrugIdentity.CISPLATIN,
        "id_prefix": "contraindication-hearing-cisplatin",
        "severity": AlertSeverity.HIGH,
        "priority": 8,
        "category": AlertCategory.GENERAL,
        "message": "Cisplatin ototoxicity risk in hearing impairment",
        "details": "Pre-existing hearing loss increases ototoxicity risk with cisplatin",
        "action": "Consider carboplatin, baseline audiometry recommended",
        "source": "Clinical Guidelines",
    },
    {
        "condition_contains": "neuropathy",
        "drug": DrugIdentity.PACLITAXEL,
        "id_prefix": "contraindication-neuropathy-paclitaxel",
        "severity": AlertSeverity.HIGH,
        "priority": 8,
        "category": AlertCategory.GENERAL,
        "message": "Paclitaxel neurotoxicity risk in existing neuropathy",
        "details": "Pre-existing neuropathy may be exacerbated by paclitaxel",
        "action": "Consider alternative taxane or non-taxane regimen",
        "source": "Neurotoxicity Guidelines",
    },
]


class ContraindicationRules(BaseRuleModule):
    """Check active conditions against drug contraindications."""

    def evaluate(self, context: DoseContext) -> list[DoseCalculationAlert]:
        alerts: list[DoseCalculationAlert] = []
        drug = context.drug

        for condition in context.patient.conditions:
            condition_name = (condition.condition or "").strip().lower()
            if not condition_name:
                continue
            if (condition.status or "").strip().lower() in INACTIVE_CONDITION_STATUSES:
                logger.debug(f"Skipping {condition.status} condition '{condition.condition}'")
                continue

            for rule in CONTRAINDICATION_RULES:
                if rule["condition_contains"] in condition_name and drug.is_any(rule["drug"]):
                    alerts.append(DoseCalculationAlert(
                        id=new_alert_id(rule["id_prefix"]),
                        type=AlertType.CONTRAINDICATION,
                        severity=rule["severity"],
                        message=rule["message"],
                        details=rule["details"],
                        recommended_action=rule["action"],
                        affected_medication=drug.name,
                        category=rule["category"],
                        source=rule["source"],
                        priority=rule["priority"],
                    ))

        return alerts
