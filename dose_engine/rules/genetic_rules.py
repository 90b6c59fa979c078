"""Pharmacogenomic dose adjustment rules.

CPIC-based gene/drug pairs:
- DPYD + fluoropyrimidines (fluorouracil, capecitabine)
- UGT1A1 + irinotecan
- TPMT + thiopurines (mercaptopurine, azathioprine)

Every matching genetic result contributes its factor; matches compound
multiplicatively.
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType, Confidence
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import FLUOROPYRIMIDINES, THIOPURINES, DrugIdentity
from ..models import GeneticResult
from ..rules_engine import BaseFactorModule, DoseContext, RuleOutcome, new_alert_id

logger = logging.getLogger(__name__)


# Gene -> drugs it affects and the phenotype rules, most severe first.
# Each phenotype rule matches on metabolizer status and/or a phenotype fragment.
PHARMACOGENOMIC_RULES = {
    "DPYD": {
        "drugs": FLUOROPYRIMIDINES,
        "phenotypes": (
            {
                "statuses": ("poor",),
                "phenotype_contains": "deficient",
                "factor": 0.25,
                "id_prefix": "genetic-dpyd",
                "severity": AlertSeverity.CRITICAL,
                "priority": 10,
                "message": "DPYD deficiency detected - severe dose reduction required",
                "details": "{phenotype} DPYD status requires 75% dose reduction for fluoropyrimidines",
                "action": "Start with 25% of standard dose and monitor closely",
                "source": "CPIC Guidelines",
            },
            {
                "statuses": ("intermediate",),
                "factor": 0.5,
                "id_prefix": "genetic-dpyd-intermediate",
                "severity": AlertSeverity.HIGH,
                "priority": 9,
                "message": "DPYD intermediate metabolism - dose reduction required",
                "details": "Intermediate DPYD activity requires dose reduction for fluoropyrimidines",
                "action": "Start with 50% of standard dose",
                "source": "CPIC Guidelines",
            },
        ),
    },
    "UGT1A1": {
        "drugs": frozenset({DrugIdentity.IRINOTECAN}),
        "phenotypes": (
            {
                "statuses": ("poor",),
                "phenotype_contains": "*28/*28",
                "factor": 0.7,
                "id_prefix": "genetic-ugt1a1",
                "severity": AlertSeverity.HIGH,
                "priority": 8,
                "message": "UGT1A1 polymorphism affects irinotecan metabolism",
                "details": "UGT1A1*28/*28 genotype increases risk of severe neutropenia and diarrhea",
                "action": "30% dose reduction recommended for initial cycles",
                "source": "FDA Drug Label",
            },
        ),
    },
    "TPMT": {
        "drugs": THIOPURINES,
        "phenotypes": (
            {
                "statuses": ("poor",),
                "factor": 0.1,
                "id_prefix": "genetic-tpmt",
                "severity": AlertSeverity.CRITICAL,
                "priority": 10,
                "message": "TPMT deficiency - extreme dose reduction required",
                "details": "TPMT poor metabolizer status requires 90% dose reduction",
                "action": "Start with 10% of standard dose",
                "source": "CPIC Guidelines",
            },
            {
                "statuses": ("intermediate",),
                "factor": 0.5,
                "id_prefix": "genetic-tpmt-intermediate",
                "severity": AlertSeverity.HIGH,
                "priority": 9,
                "message": "TPMT intermediate metabolism - dose reduction required",
                "details": "Intermediate TPMT activity requires dose reduction",
                "action": "Start with 50% of standard dose",
                "source": "CPIC Guidelines",
            },
        ),
    },
}


class PharmacogenomicRules(BaseFactorModule):
    """Reduce dose for actionable pharmacogenomic results."""

    confidence = Confidence.HIGH
    references = ("CPIC Guidelines",)

    def assess(self, context: DoseContext) -> RuleOutcome:
        factor = 1.0
        reasons: list[str] = []
        alerts: list[DoseCalculationAlert] = []

        for genetic in context.patient.genetics:
            gene = (genetic.gene_symbol or "").strip().upper()
            gene_rules = PHARMACOGENOMIC_RULES.get(gene)
            if not gene_rules or not context.drug.in_group(gene_rules["drugs"]):
                continue

            rule = self._match_phenotype(genetic, gene_rules["phenotypes"])
            if rule is None:
                logger.debug(f"{gene} result '{genetic.phenotype}' not actionable for {context.drug.name}")
                continue

            factor *= rule["factor"]
            reasons.append(f"{gene} {genetic.metabolizer_status or genetic.phenotype}".strip())
            alerts.append(DoseCalculationAlert(
                id=new_alert_id(rule["id_prefix"]),
                type=AlertType.DOSING,
                severity=rule["severity"],
                message=rule["message"],
                details=rule["details"].format(phenotype=genetic.phenotype or gene),
                recommended_action=rule["action"],
                affected_medication=context.drug.name,
                category=AlertCategory.GENETIC,
                source=rule["source"],
                priority=rule["priority"],
            ))

        if not alerts:
            return RuleOutcome()

        reason = f"Pharmacogenomic adjustment ({', '.join(reasons)})"
        return RuleOutcome(factor=factor, reason=reason, alerts=alerts)

    def _match_phenotype(self, genetic: GeneticResult, phenotype_rules: tuple) -> dict | None:
        """First phenotype rule matching this result, most severe first."""
        # "Poor Metabolizer" and "poor" are the same status
        status = (genetic.metabolizer_status or "").strip().lower()
        status = status.removesuffix("metabolizer").strip()
        phenotype = (genetic.phenotype or "").lower()

        for rule in phenotype_rules:
            if status in rule["statuses"]:
                return rule
            fragment = rule.get("phenotype_contains")
            if fragment and fragment in phenotype:
                return rule
        return None
