"""Dose calculation rule modules."""

from .age_rules import AgeAdjustmentRules
from .allergy_rules import AllergyRules
from .contraindication_rules import ContraindicationRules
from .genetic_rules import PharmacogenomicRules
from .hepatic_rules import HepaticAdjustmentRules
from .lab_rules import LabValueRules
from .renal_rules import RenalAdjustmentRules
from .weight_rules import WeightBasedRules

__all__ = [
    "AgeAdjustmentRules",
    "AllergyRules",
    "ContraindicationRules",
    "HepaticAdjustmentRules",
    "LabValueRules",
    "PharmacogenomicRules",
    "RenalAdjustmentRules",
    "WeightBasedRules",
]
