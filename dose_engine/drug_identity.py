"""Drug identity resolution.

Free-text drug names are resolved once, at the engine boundary, into a set
of ``DrugIdentity`` members. Every rule table keys off these identities
rather than re-matching strings. A combination product or regimen name
(e.g. "carboplatin/paclitaxel") resolves to more than one identity.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .models import Drug


class DrugIdentity(Enum):
    """Ingredients the dosing rules know about."""
    DOXORUBICIN = "doxorubicin"
    CARBOPLATIN = "carboplatin"
    CISPLATIN = "cisplatin"
    OXALIPLATIN = "oxaliplatin"
    FLUOROURACIL = "fluorouracil"
    CAPECITABINE = "capecitabine"
    IRINOTECAN = "irinotecan"
    MERCAPTOPURINE = "mercaptopurine"
    AZATHIOPRINE = "azathioprine"
    PACLITAXEL = "paclitaxel"
    TRASTUZUMAB = "trastuzumab"
    SULFAMETHOXAZOLE = "sulfamethoxazole"


# Name fragments (lowercase) -> identity
DRUG_NAME_ALIASES: MappingProxyType = MappingProxyType({
    "doxorubicin": DrugIdentity.DOXORUBICIN,
    "adriamycin": DrugIdentity.DOXORUBICIN,
    "carboplatin": DrugIdentity.CARBOPLATIN,
    "cisplatin": DrugIdentity.CISPLATIN,
    "oxaliplatin": DrugIdentity.OXALIPLATIN,
    "fluorouracil": DrugIdentity.FLUOROURACIL,
    "5-fu": DrugIdentity.FLUOROURACIL,
    "capecitabine": DrugIdentity.CAPECITABINE,
    "irinotecan": DrugIdentity.IRINOTECAN,
    "mercaptopurine": DrugIdentity.MERCAPTOPURINE,
    "azathioprine": DrugIdentity.AZATHIOPRINE,
    "paclitaxel": DrugIdentity.PACLITAXEL,
    "trastuzumab": DrugIdentity.TRASTUZUMAB,
    "sulfamethoxazole": DrugIdentity.SULFAMETHOXAZOLE,
})

# RxNorm ingredient codes (RxCUI) -> identity
RXNORM_INGREDIENTS: MappingProxyType = MappingProxyType({
    "3639": DrugIdentity.DOXORUBICIN,
    "40048": DrugIdentity.CARBOPLATIN,
    "2555": DrugIdentity.CISPLATIN,
    "32592": DrugIdentity.OXALIPLATIN,
    "4492": DrugIdentity.FLUOROURACIL,
    "194000": DrugIdentity.CAPECITABINE,
    "51499": DrugIdentity.IRINOTECAN,
    "103": DrugIdentity.MERCAPTOPURINE,
    "1256": DrugIdentity.AZATHIOPRINE,
    "56946": DrugIdentity.PACLITAXEL,
    "224905": DrugIdentity.TRASTUZUMAB,
    "10180": DrugIdentity.SULFAMETHOXAZOLE,
})

# Drug groups shared by several rule modules
PLATINUM_AGENTS = frozenset({
    DrugIdentity.CARBOPLATIN,
    DrugIdentity.CISPLATIN,
    DrugIdentity.OXALIPLATIN,
})
FLUOROPYRIMIDINES = frozenset({DrugIdentity.FLUOROURACIL, DrugIdentity.CAPECITABINE})
THIOPURINES = frozenset({DrugIdentity.MERCAPTOPURINE, DrugIdentity.AZATHIOPRINE})
MYELOSUPPRESSIVE_AGENTS = frozenset({
    DrugIdentity.DOXORUBICIN,
    DrugIdentity.CARBOPLATIN,
    DrugIdentity.PACLITAXEL,
})
CARDIOTOXIC_AGENTS = frozenset({DrugIdentity.DOXORUBICIN, DrugIdentity.TRASTUZUMAB})


@dataclass(frozen=True)
class ResolvedDrug:
    """A drug name together with the identities it resolved to."""
    name: str
    identities: frozenset

    def is_any(self, *identities: DrugIdentity) -> bool:
        """True if the drug resolved to any of the given identities."""
        return any(identity in self.identities for identity in identities)

    def in_group(self, group: frozenset) -> bool:
        """True if the drug shares at least one identity with ``group``."""
        return bool(self.identities & group)


def resolve_identities(name: str, rxnorm_code: str | None = None) -> frozenset:
    """Resolve a drug name (and optional RxCUI) into a set of identities."""
    identities = set()

    if rxnorm_code:
        identity = RXNORM_INGREDIENTS.get(rxnorm_code.strip())
        if identity:
            identities.add(identity)

    name_lower = (name or "").lower()
    for fragment, identity in DRUG_NAME_ALIASES.items():
        if fragment in name_lower:
            identities.add(identity)

    return frozenset(identities)


def resolve_drug(drug: Drug) -> ResolvedDrug:
    """Resolve a prescribed drug once for use by every rule module."""
    return ResolvedDrug(
        name=drug.name,
        identities=resolve_identities(drug.name, drug.rxnorm_code),
    )
