"""Lab result lookup.

Lab types arrive as free text ("Creatinine Clearance", "AST (SGOT)",
"Absolute Neutrophil Count"). Matching is on whole words so that short
abbreviations do not match inside longer names; "clearance" must never be
read as an ANC.
"""

import re

from .models import LabValue

LAB_PATTERNS = {
    "crcl": re.compile(r"\bcreatinine clearance\b|\bcrcl\b", re.IGNORECASE),
    "ast": re.compile(r"\b(ast|sgot)\b", re.IGNORECASE),
    "alt": re.compile(r"\b(alt|sgpt)\b", re.IGNORECASE),
    "bilirubin": re.compile(r"\bbilirubin\b", re.IGNORECASE),
    "anc": re.compile(r"\b(anc|neutrophils?)\b", re.IGNORECASE),
    "platelets": re.compile(r"\b(platelets?|plt)\b", re.IGNORECASE),
    "lvef": re.compile(r"\blvef\b|\bejection fraction\b", re.IGNORECASE),
}

# Fractionated bilirubin is not total bilirubin
_BILIRUBIN_FRACTIONS = re.compile(r"\b(direct|indirect|conjugated|unconjugated)\b", re.IGNORECASE)


def matches_lab(lab_type: str, kind: str) -> bool:
    """True if a free-text lab type is the given lab kind."""
    if not lab_type:
        return False
    if not LAB_PATTERNS[kind].search(lab_type):
        return False
    if kind == "bilirubin" and _BILIRUBIN_FRACTIONS.search(lab_type):
        return False
    return True


def most_recent_lab(lab_values: list[LabValue], kind: str) -> LabValue | None:
    """Most recent result of the given kind, or None if none on file."""
    matching = [lab for lab in lab_values if matches_lab(lab.lab_type, kind)]
    if not matching:
        return None
    return max(matching, key=lambda lab: lab.timestamp)


def most_recent_value(lab_values: list[LabValue], kind: str) -> float | None:
    """Numeric value of the most recent result of the given kind."""
    lab = most_recent_lab(lab_values, kind)
    if lab is None:
        return None
    return lab.numeric_value
