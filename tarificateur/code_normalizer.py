"""
Free-text label -> Exade code normalization.

Upstream data (manual entry or document extraction) carries professions, loan
types and financing purposes as text. These helpers map them to the numeric codes
of the catalog so the request builder only ever sees codes.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Dict, Optional, Union

from .catalog import FINANCING_PURPOSES, LOAN_TYPES, MEMBERSHIP_TYPES, PROFESSIONAL_CATEGORIES

logger = logging.getLogger(__name__)

Label = Union[str, int, None]


CATEGORY_SYNONYMS: Dict[str, int] = {
    "salarie cadre": 1, "cadre": 1, "cadre superieur": 1, "cadre dirigeant": 1,
    "ingenieur": 1, "manager": 1, "directeur": 1,
    "salarie non cadre": 2, "salarie": 2, "employe": 2, "ouvrier": 2, "technicien": 2,
    "agent": 2, "vendeur": 2, "assistant": 2, "secretaire": 2, "operateur": 2,
    "profession liberale": 3, "liberal": 3, "avocat": 3, "notaire": 3,
    "expert comptable": 3, "architecte": 3, "consultant": 3,
    "chirurgien": 4,
    "chirurgien dentiste": 5, "dentiste": 5,
    "medecin specialiste": 6, "medecin": 6, "docteur": 6, "cardiologue": 6,
    "dermatologue": 6, "radiologue": 6, "psychiatre": 6, "ophtalmologue": 6,
    "veterinaire": 7,
    "artisan": 8, "plombier": 8, "electricien": 8, "menuisier": 8, "boulanger": 8,
    "patissier": 8, "coiffeur": 8,
    "commercant": 9, "gerant": 9, "chef d entreprise": 9, "entrepreneur": 9, "auto entrepreneur": 9,
    "retraite": 10, "pre retraite": 10, "pensionnaire": 10,
    "sans activite professionnelle": 11, "sans activite": 11, "chomeur": 11,
    "demandeur d emploi": 11, "etudiant": 11, "au foyer": 11, "homme au foyer": 11, "femme au foyer": 11,
}

LOAN_TYPE_SYNONYMS: Dict[str, int] = {
    "amortissable": 1, "pret amortissable": 1, "credit amortissable": 1, "pret immobilier": 1,
    "immobilier": 1, "pret habitat": 1,
    "in fine": 2, "pret in fine": 2,
    "relais": 3, "pret relais": 3, "credit relais": 3,
    "credit bail": 4, "leasing": 4,
    "loa": 5, "location avec option d achat": 5,
    "taux 0": 6, "ptz": 6, "pret taux zero": 6, "pret a taux zero": 6,
    "palier": 7, "pret a paliers": 7,
    "pret d honneur": 8, "pret honneur": 8,
    "restructuration": 9, "rachat de credit": 9, "rachat credit": 9, "regroupement de credits": 9,
    "amortissable professionnel": 10, "pret professionnel": 10, "credit professionnel": 10,
}

FINANCING_PURPOSE_SYNONYMS: Dict[str, int] = {
    "residence principale": 1, "achat residence principale": 1, "acquisition residence principale": 1,
    "rp": 1, "habitation principale": 1,
    "residence secondaire": 2, "achat residence secondaire": 2, "acquisition residence secondaire": 2, "rs": 2,
    "travaux": 3, "pret travaux": 3, "renovation": 3, "amenagement": 3,
    "investissement locatif": 4, "locatif": 4, "achat locatif": 4, "location": 4,
    "professionnel": 5, "pret professionnel": 5, "credit professionnel": 5, "entreprise": 5,
    "divers": 6, "objet divers": 6, "credit conso": 6, "consommation": 6, "pret personnel": 6,
    "construction": 7, "construction maison": 7, "faire construire": 7, "vefa": 7,
    "restructuration": 8, "rachat de credit": 8, "rachat": 8, "regroupement": 8,
}

NON_REAL_ESTATE_KEYWORDS = (
    "consommation", "personnel", "auto", "voiture", "moto",
    "travaux legers", "equipement", "mobilier", "voyage",
)


def normalize_string(value: Label) -> str:
    """Lowercase, strip accents and collapse everything but [a-z0-9] to single spaces."""
    if value is None:
        return ""
    text = unicodedata.normalize("NFD", str(value).lower())
    text = "".join(char for char in text if not unicodedata.combining(char))
    text = re.sub(r"[^a-z0-9]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def similarity_score(left: str, right: str) -> float:
    """Word-overlap similarity in [0, 1]; containment scores 0.9."""
    s1, s2 = normalize_string(left), normalize_string(right)
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    if s1 in s2 or s2 in s1:
        return 0.9
    words1, words2 = s1.split(" "), s2.split(" ")
    common = [word for word in words1 if word in words2]
    return (2 * len(common)) / (len(words1) + len(words2))


def _as_code(value: Label, valid) -> Optional[int]:
    try:
        code = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return code if code in valid else None


def _match(value: Label, synonyms: Dict[str, int], valid, threshold: float, kind: str) -> Optional[int]:
    if value is None or value == "":
        return None

    code = _as_code(value, valid)
    if code is not None:
        return code

    normalized = normalize_string(value)
    if normalized in synonyms:
        return synonyms[normalized]

    best_code, best_score = None, 0.0
    for key, candidate in synonyms.items():
        score = similarity_score(normalized, key)
        if score > threshold and score > best_score:
            best_code, best_score = candidate, score

    if best_code is not None:
        logger.info("%s %r -> code %s (score %.2f)", kind, value, best_code, best_score)
    return best_code


def normalize_professional_category(label: Label) -> Optional[int]:
    code = _match(label, CATEGORY_SYNONYMS, PROFESSIONAL_CATEGORIES, 0.6, "Professional category")
    if code is None and label:
        logger.warning("Unrecognized professional category: %r", label)
    return code


def normalize_loan_type(label: Label) -> int:
    code = _match(label, LOAN_TYPE_SYNONYMS, LOAN_TYPES, 0.6, "Loan type")
    if code is None:
        if label:
            logger.warning("Unrecognized loan type %r, defaulting to 1 (Amortissable)", label)
        return 1
    return code


def normalize_financing_purpose(label: Label) -> int:
    code = _match(label, FINANCING_PURPOSE_SYNONYMS, FINANCING_PURPOSES, 0.5, "Financing purpose")
    if code is None:
        if label:
            logger.warning("Unrecognized financing purpose %r, defaulting to 1 (Résidence principale)", label)
        return 1
    return code


def normalize_membership_type(label: Label) -> int:
    if label is None or label == "":
        return 0
    code = _as_code(label, MEMBERSHIP_TYPES)
    if code is not None:
        return code

    normalized = normalize_string(label)
    if "nouveau" in normalized or "new" in normalized:
        return 0
    if "resiliation banque" in normalized or "substitution banque" in normalized:
        return 3
    if any(word in normalized for word in ("resiliation delegation", "substitution", "delegation")):
        return 4
    return 0


def normalize_credit_category(label: Label) -> int:
    """0 for real-estate loans (the default), 1 for everything else."""
    if label is None or label == "":
        return 0
    code = _as_code(label, (0, 1))
    if code is not None:
        return code
    normalized = normalize_string(label)
    if any(re.search(rf"\b{re.escape(keyword)}\b", normalized) for keyword in NON_REAL_ESTATE_KEYWORDS):
        return 1
    return 0


def normalize_civility(label: Optional[str]) -> str:
    normalized = normalize_string(label)
    if not normalized:
        return "M"
    if "mademoiselle" in normalized or normalized == "mlle":
        return "Mlle"
    if "madame" in normalized or normalized == "mme":
        return "Mme"
    if "monsieur" in normalized or normalized in ("m", "mr"):
        return "M"
    return "M"
