"""Clinical calculations used by the dosing rules."""

import math
from datetime import date


def calculate_age(date_of_birth: date, as_of: date | None = None) -> int:
    """Age in whole years, not counting a birthday that has not yet occurred."""
    today = as_of or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body mass index (kg/m²)."""
    height_m = height_cm / 100
    return weight_kg / (height_m ** 2)


def calculate_bsa(weight_kg: float, height_cm: float) -> float:
    """Body surface area (m²) by the Mosteller formula."""
    return math.sqrt(height_cm * weight_kg / 3600)


def calvert_dose(target_auc: float, crcl: float) -> float:
    """Carboplatin dose (mg) by the Calvert formula: AUC × (GFR + 25).

    CrCl stands in for GFR, as is standard practice.
    """
    return target_auc * (crcl + 25)
