"""Age-based dose adjustment rules for oncology drugs.

Elderly patients carry higher toxicity risk for several agents:
- >= 75 years: drug-specific reductions, 10% for anything else
- 65-74 years: doxorubicin 15%, anything else 5%
- < 65 years: no adjustment
"""

import logging

from common.dose_alerts import AlertCategory, AlertSeverity, AlertType, Confidence
from common.dose_alerts import DoseCalculationAlert
from ..drug_identity import DrugIdentity, ResolvedDrug
from ..rules_engine import BaseFactorModule, DoseContext, RuleOutcome, new_alert_id

logger = logging.getLogger(__name__)


# Age bands, evaluated oldest first; first matching band wins.
# Structure: (min_age, ((drugs, factor, reason), ...), default_factor, default_reason)
AGE_ADJUSTMENTS = (
    (
        75,
        (
            (
                frozenset({DrugIdentity.DOXORUBICIN}),
                0.75,
                "Increased cardiotoxicity risk in elderly patients",
            ),
            (
                frozenset({DrugIdentity.CARBOPLATIN, DrugIdentity.CISPLATIN}),
                0.8,
                "Increased nephrotoxicity and ototoxicity risk",
            ),
            (
                frozenset({DrugIdentity.FLUOROURACIL}),
                0.85,
                "Increased risk of severe mucositis and myelosuppression",
            ),
        ),
        0.9,
        "General elderly dose reduction for safety",
    ),
    (
        65,
        (
            (
                frozenset({DrugIdentity.DOXORUBICIN}),
                0.85,
                "Moderate cardiotoxicity risk reduction",
            ),
        ),
        0.95,
        "Mild elderly dose adjustment",
    ),
)


class AgeAdjustmentRules(BaseFactorModule):
    """Reduce dose for elderly patients."""

    confidence = Confidence.HIGH
    references = ("Geriatric Dosing Guidelines", "Beers Criteria")

    def assess(self, context: DoseContext) -> RuleOutcome:
        factor, reason = self.get_age_adjustment(context.age_years, context.drug)
        if factor == 1.0:
            return RuleOutcome()

        alert = DoseCalculationAlert(
            id=new_alert_id("age"),
            type=AlertType.DOSING,
            severity=AlertSeverity.HIGH if factor < 0.7 else AlertSeverity.MODERATE,
            message="Age-based dose adjustment recommended",
            details=f"Patient age {context.age_years} years requires dose modification for {context.drug.name}",
            recommended_action=f"Consider {round((1 - factor) * 100)}% dose reduction",
            affected_medication=context.drug.name,
            category=AlertCategory.AGE,
            source="Geriatric Pharmacology Guidelines",
            priority=7,
        )
        return RuleOutcome(factor=factor, reason=reason, alerts=[alert])

    def get_age_adjustment(self, age: int, drug: ResolvedDrug) -> tuple[float, str]:
        """Look up the age-band factor for a drug.

        Returns:
            Tuple of (factor, reason); factor is 1.0 below 65
        """
        for min_age, drug_rules, default_factor, default_reason in AGE_ADJUSTMENTS:
            if age < min_age:
                continue
            for drugs, factor, reason in drug_rules:
                if drug.in_group(drugs):
                    return factor, reason
            return default_factor, default_reason

        return 1.0, "No age-based adjustment needed"
