"""
Exade domain codes catalog.

Static lookup tables for the codes the tariff web service understands, plus the
per-insurer commission tiers. Nothing here talks to the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

UNKNOWN_LABEL = "Non renseigné"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

PROFESSIONAL_CATEGORIES: Dict[int, str] = {
    1: "Salarié cadre",
    2: "Salarié non cadre",
    3: "Profession libérale",
    4: "Chirurgien",
    5: "Chirurgien-dentiste",
    6: "Médecin spécialiste",
    7: "Vétérinaire",
    8: "Artisan",
    9: "Commerçant",
    10: "Retraité, pré-retraité",
    11: "Sans activité professionnelle",
}

CIVILITIES: Dict[str, str] = {
    "M": "Monsieur",
    "Mme": "Madame",
    "Mlle": "Mademoiselle",
}

LOAN_TYPES: Dict[int, str] = {
    1: "Amortissable",
    2: "In fine",
    3: "Relais",
    4: "Crédit-bail",
    5: "LOA",
    6: "Taux 0%",
    7: "Palier",
    8: "Prêt d'honneur",
    9: "Restructuration",
    10: "Amortissable professionnel",
}

RATE_TYPES: Dict[int, str] = {
    1: "Fixe",
    2: "Variable",
}

FINANCING_PURPOSES: Dict[int, str] = {
    1: "Résidence principale",
    2: "Résidence secondaire",
    3: "Travaux",
    4: "Investissement locatif",
    5: "Crédit professionnel",
    6: "Autre projet",
    7: "Construction",
    8: "Restructuration",
}

GUARANTEE_PLANS: Dict[int, str] = {
    1: "Décès / PTIA",
    2: "Décès / PTIA / ITT / IPT",
    3: "Décès / PTIA / ITT / IPT / ITP / IPP",
    4: "Décès / PTIA / ITT / IPT (rachat dos/psy)",
    5: "Décès / PTIA / ITT / IPT / ITP / IPP (rachat dos/psy)",
    6: "Décès / PTIA / ITT / IPT / PE",
    7: "Décès / PTIA / ITT / IPT / ITP / IPP / PE",
    8: "Décès / PTIA / ITT / IPT (rachat) / PE",
    9: "Décès / PTIA / ITT / IPT / ITP / IPP (rachat) / PE",
    10: "Décès / PTIA / IPPRO (SwissLife)",
    11: "Décès / PTIA / IPT",
    12: "Décès / PTIA / IPT / IPP",
    13: "Décès / PTIA / IPT / IPP (rachat)",
}

MEMBERSHIP_TYPES: Dict[int, str] = {
    0: "Nouveau prêt",
    3: "Résiliation Banque",
    4: "Résiliation délégation",
}

CREDIT_CATEGORIES: Dict[int, str] = {
    0: "Immobilier",
    1: "Non immobilier",
}

BILLING_FREQUENCIES: Dict[int, str] = {
    1: "Annuel",
    2: "Semestriel",
    4: "Trimestriel",
    12: "Mensuel",
    10: "Prime unique",
}

BILLING_MONTHLY = 12
BILLING_SINGLE_PREMIUM = 10


# ---------------------------------------------------------------------------
# Wire defaults
# ---------------------------------------------------------------------------

# Fallback applied by the request builder whenever a code is not supplied.
CODE_DEFAULTS: Dict[str, object] = {
    "civility": "M",
    "professional_category": 1,
    "business_travel": 1,
    "manual_work": 0,
    "birth_country_id": 118,
    "nationality_id": 84,
    "tax_residence_country_id": 84,
    "deductible_days": 90,
    "loan_type": 1,
    "rate_type": 1,
    "deferment_months": 0,
    "amortization_frequency": 12,
    "membership_type": 0,
    "financing_purpose": 1,
    "credit_category": 0,
    "billing_frequency": BILLING_MONTHLY,
    "operation_type": 2,
}


def default_for(field_name: str):
    """Return the documented wire default for a defaultable code field."""
    try:
        return CODE_DEFAULTS[field_name]
    except KeyError:
        raise KeyError(f"No default registered for '{field_name}'") from None


# ---------------------------------------------------------------------------
# Commission tiers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CommissionTier:
    code: str
    label: str
    product: str
    rate: str
    is_default: bool = False
    single_premium: bool = False
    bridge_loan: bool = False


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    full_name: str
    codes: Tuple[str, ...]
    special_codes: Tuple[str, ...] = ()


def _linear_tiers(
    prefix: str,
    short_name: str,
    product: str,
    steps: int,
    default_step: int,
    default_rate: str,
) -> List[CommissionTier]:
    # T1..Tn where T1 is 0%, T2 5%, T3 10%, T4 the blended default, then 15%+ in 5% steps
    linear = {1: "0% linéaire", 2: "5% linéaire", 3: "10% linéaire"}
    for step in range(5, steps + 1):
        linear[step] = f"{(step - 2) * 5}% linéaire"
    tiers = []
    for step in range(1, steps + 1):
        rate = default_rate if step == default_step else linear[step]
        tiers.append(
            CommissionTier(
                code=f"{prefix}T{step}",
                label=f"{short_name} - Palier {step} ({rate.replace(' linéaire', '')})",
                product=product,
                rate=rate,
                is_default=step == default_step,
            )
        )
    return tiers


def _build_commission_tiers() -> Dict[str, CommissionTier]:
    tiers: List[CommissionTier] = []

    tiers += _linear_tiers("1", "GENERALI CI", "GENERALI 7301 CI", 10, 4, "30%/10%")
    tiers += [
        CommissionTier("1T4bis", "GENERALI CI - Palier 4bis (55%/20%)", "GENERALI 7301 CI", "55%/20%"),
        CommissionTier("1PU1", "GENERALI CI - Prime unique 1 (10%)", "GENERALI 7301 CI", "10% linéaire", single_premium=True),
        CommissionTier("1PU2", "GENERALI CI - Prime unique 2 (20%)", "GENERALI 7301 CI", "20% linéaire", single_premium=True),
    ]

    swisslife = "SWISSLIFE L1047"
    tiers += [
        CommissionTier("2T1", "SWISSLIFE - Palier 1 (30%/5%)", swisslife, "30%/5%"),
        CommissionTier("2T2", "SWISSLIFE - Palier 2 (40%/10%)", swisslife, "40%/10%", is_default=True),
        CommissionTier("2T3", "SWISSLIFE - Palier 3 (40%/15%)", swisslife, "40%/15%"),
        CommissionTier("2T4", "SWISSLIFE - Palier 4 (18% linéaire)", swisslife, "18% linéaire"),
        CommissionTier("2T5", "SWISSLIFE - Palier 5 (40%/30%)", swisslife, "40%/30%"),
        CommissionTier("2T6", "SWISSLIFE - Palier 6 (40% linéaire)", swisslife, "40% linéaire"),
        CommissionTier("2PR1", "SWISSLIFE - Prêt relais 1 (5%)", swisslife, "5% linéaire", bridge_loan=True),
        CommissionTier("2PR2", "SWISSLIFE - Prêt relais 2 (10%)", swisslife, "10% linéaire", bridge_loan=True),
        CommissionTier("2PR3", "SWISSLIFE - Prêt relais 3 (15%)", swisslife, "15% linéaire", bridge_loan=True),
        CommissionTier("2PU1", "SWISSLIFE - Prime unique 1 (5%)", swisslife, "5%", single_premium=True),
        CommissionTier("2PU2", "SWISSLIFE - Prime unique 2 (10%)", swisslife, "10%", single_premium=True),
        CommissionTier("2PU3", "SWISSLIFE - Prime unique 3 (15%)", swisslife, "15%", single_premium=True),
    ]

    tiers += _linear_tiers("3", "MNCAP", "MNCAP ALTERNATIVE", 10, 4, "40%/10%")
    tiers += _linear_tiers("4", "CNP", "CNP CREDIT +", 10, 4, "30%/10%")
    tiers.append(CommissionTier("4PR1", "CNP - Prêt relais", "CNP CREDIT +", "Taux relais", bridge_loan=True))
    tiers += _linear_tiers("5", "DIGITAL CRD", "ASSUREA DIGITAL CRD", 10, 4, "40%/10%")
    tiers += _linear_tiers("6", "DIGITAL CI", "ASSUREA DIGITAL CI", 10, 4, "40%/10%")
    tiers += _linear_tiers("7", "PROTECTION+", "ASSUREA PROTECTION+", 10, 4, "30%/10%")
    tiers.append(CommissionTier("7PR1", "PROTECTION+ - Prêt relais", "ASSUREA PROTECTION+", "Taux relais", bridge_loan=True))
    tiers += _linear_tiers("8", "GENERALI CRD", "GENERALI 7301 CRD", 10, 4, "30%/10%")
    tiers += [
        CommissionTier("8T4bis", "GENERALI CRD - Palier 4bis (55%/20%)", "GENERALI 7301 CRD", "55%/20%"),
        CommissionTier("8PU1", "GENERALI CRD - Prime unique 1 (10%)", "GENERALI 7301 CRD", "10% linéaire", single_premium=True),
        CommissionTier("8PU2", "GENERALI CRD - Prime unique 2 (20%)", "GENERALI 7301 CRD", "20% linéaire", single_premium=True),
    ]
    tiers += _linear_tiers("9", "OPEN CRD", "ASSUREA OPEN CRD", 8, 4, "30%/10%")
    tiers += _linear_tiers("10", "MAIF", "MAIF AVANTAGE", 10, 4, "30%/10%")
    tiers += _linear_tiers("11", "HUMANIS", "MALAKOFF HUMANIS", 10, 4, "40%/10%")
    tiers += _linear_tiers("12", "PERFORMANCE", "ASSUREA PERFORMANCE", 10, 4, "30%/10%")

    return {tier.code: tier for tier in tiers}


COMMISSION_TIERS: Dict[str, CommissionTier] = _build_commission_tiers()


def _steps(prefix: str, count: int, extra: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    codes = [f"{prefix}T{step}" for step in range(1, count + 1)]
    for code in extra:
        # "bis" tiers sit right after their base tier
        base = code.replace("bis", "")
        codes.insert(codes.index(base) + 1, code)
    return tuple(codes)


COMPANIES: Dict[str, Company] = {
    "1": Company("1", "GENERALI CI", "GENERALI ASSUREA PRET 7301 CI", _steps("1", 10, ("1T4bis",)), ("1PU1", "1PU2")),
    "2": Company(
        "2",
        "SWISSLIFE",
        "ASSUREA PREMIUM L1047 (SwissLife)",
        _steps("2", 6),
        ("2PR1", "2PR2", "2PR3", "2PU1", "2PU2", "2PU3"),
    ),
    "3": Company("3", "MNCAP", "MNCAP ASSUREA ALTERNATIVE 1350", _steps("3", 10)),
    "4": Company("4", "CNP", "CNP ASSUREA CREDIT +", _steps("4", 10), ("4PR1",)),
    "5": Company("5", "DIGITAL CRD", "ASSUREA DIGITAL 4044 CRD", _steps("5", 10)),
    "6": Company("6", "DIGITAL CI", "ASSUREA DIGITAL 4044 CI", _steps("6", 10)),
    "7": Company("7", "PROTECTION+", "ASSUREA PROTECTION +", _steps("7", 10), ("7PR1",)),
    "8": Company("8", "GENERALI CRD", "GENERALI ASSUREA PRET 7301 CRD", _steps("8", 10, ("8T4bis",)), ("8PU1", "8PU2")),
    "9": Company("9", "OPEN CRD", "ASSUREA OPEN EMPRUNTEUR CRD", _steps("9", 8)),
    "10": Company("10", "MAIF", "MAIF AVANTAGE EMPRUNTEUR ASSUREA", _steps("10", 10)),
    "11": Company("11", "HUMANIS", "MALAKOFF HUMANIS EMPRUNTEUR CI", _steps("11", 10)),
    "12": Company("12", "PERFORMANCE", "ASSUREA PERFORMANCE 6092/200164", _steps("12", 10)),
}

# Insurer names as returned in <compagnie>, checked in order
_COMPANY_NAME_ALIASES: Tuple[Tuple[str, str], ...] = (
    ("MALAKOFF HUMANIS", "11"),
    ("GENERALI VIE", "1"),
    ("GENERALI", "1"),
    ("SWISS LIFE", "2"),
    ("SWISSLIFE", "2"),
    ("MNCAP", "3"),
    ("CNP ASSURANCES", "4"),
    ("CNP", "4"),
    ("ASSUREA DIGITAL", "5"),
    ("DIGITAL", "5"),
    ("ASSUREA PROTECTION", "7"),
    ("PROTECTION", "7"),
    ("MAIF VIE", "10"),
    ("MAIF", "10"),
    ("HUMANIS", "11"),
    ("MALAKOFF", "11"),
    ("PERFORMANCE", "12"),
    ("GAN", "12"),
)


# ---------------------------------------------------------------------------
# Label resolution
# ---------------------------------------------------------------------------

def _label(table: Dict, code, fallback: str = UNKNOWN_LABEL) -> str:
    if code is None or code == "":
        return fallback
    try:
        key = int(code) if not isinstance(code, int) else code
    except (TypeError, ValueError):
        return fallback
    return table.get(key, fallback)


def professional_category_label(code) -> str:
    return _label(PROFESSIONAL_CATEGORIES, code, "Non renseignée")


def loan_type_label(code) -> str:
    return _label(LOAN_TYPES, code)


def rate_type_label(code) -> str:
    return _label(RATE_TYPES, code)


def financing_purpose_label(code) -> str:
    return _label(FINANCING_PURPOSES, code)


def guarantee_plan_label(code) -> str:
    return _label(GUARANTEE_PLANS, code, "Non renseignée")


def membership_type_label(code) -> str:
    # absent membership type means a new loan
    return _label(MEMBERSHIP_TYPES, code, MEMBERSHIP_TYPES[0])


def billing_frequency_label(code) -> str:
    return _label(BILLING_FREQUENCIES, code)


def civility_label(code: Optional[str]) -> str:
    return CIVILITIES.get(code or "", UNKNOWN_LABEL)


def commission_tier_label(code: Optional[str]) -> str:
    tier = COMMISSION_TIERS.get(code or "")
    return tier.label if tier else UNKNOWN_LABEL


# ---------------------------------------------------------------------------
# Commission helpers
# ---------------------------------------------------------------------------

def get_commission_codes_for_company(company_id: str, include_special: bool = False) -> List[CommissionTier]:
    """Ordered commission tiers for an insurer, standard tiers first."""
    company = COMPANIES.get(str(company_id))
    if company is None:
        return []
    codes = list(company.codes)
    if include_special:
        codes += list(company.special_codes)
    return [COMMISSION_TIERS[code] for code in codes if code in COMMISSION_TIERS]


def default_commission_code(company_id: str) -> Optional[str]:
    """Recommended commission tier for an insurer, if it declares one."""
    for tier in get_commission_codes_for_company(company_id):
        if tier.is_default:
            return tier.code
    return None


def get_company_from_code(code: Optional[str]) -> Optional[str]:
    """Insurer id encoded in the numeric prefix of a commission code ("11T4" -> "11")."""
    if not code:
        return None
    prefix = ""
    for char in code:
        if not char.isdigit():
            break
        prefix += char
    return prefix if prefix in COMPANIES else None


def get_company_id_from_name(name: Optional[str]) -> Optional[str]:
    """Map an insurer name as returned by the service to a catalog company id."""
    if not name:
        return None
    normalized = name.upper().strip()
    for alias, company_id in _COMPANY_NAME_ALIASES:
        if normalized == alias or alias in normalized:
            return company_id
    for company in COMPANIES.values():
        if company.name.upper() in normalized:
            return company.id
    return None
