"""Tests for free-text label normalization."""

import pytest

from tarificateur.code_normalizer import (
    normalize_civility,
    normalize_credit_category,
    normalize_financing_purpose,
    normalize_loan_type,
    normalize_membership_type,
    normalize_professional_category,
    normalize_string,
    similarity_score,
)


def test_normalize_string_strips_accents_and_punctuation():
    assert normalize_string("  Salarié-Cadre ") == "salarie cadre"
    assert normalize_string("Chef d'entreprise") == "chef d entreprise"
    assert normalize_string(None) == ""


def test_similarity_score():
    assert similarity_score("Cadre", "cadre") == 1.0
    assert similarity_score("cadre", "salarie cadre") == 0.9
    assert similarity_score("pret immobilier classique", "pret travaux") == pytest.approx(0.4)
    assert similarity_score("", "cadre") == 0.0


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Salarié cadre", 1),
        ("Ingénieur", 1),
        ("employé", 2),
        ("Médecin", 6),
        ("Chirurgien-dentiste", 5),
        ("retraité", 10),
        ("4", 4),
        (7, 7),
        ("Astronaute", None),
        (None, None),
    ],
)
def test_normalize_professional_category(label, expected):
    assert normalize_professional_category(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [("Prêt relais", 3), ("PTZ", 6), ("in fine", 2), ("rachat de crédit", 9), ("2", 2), ("inconnu", 1), (None, 1)],
)
def test_normalize_loan_type(label, expected):
    assert normalize_loan_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Résidence principale", 1),
        ("résidence secondaire", 2),
        ("Investissement locatif", 4),
        ("VEFA", 7),
        ("8", 8),
        ("quelque chose", 1),
        ("", 1),
    ],
)
def test_normalize_financing_purpose(label, expected):
    assert normalize_financing_purpose(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        (None, 0),
        ("Nouveau prêt", 0),
        ("Résiliation banque", 3),
        ("Substitution délégation", 4),
        ("3", 3),
        ("2", 0),
    ],
)
def test_normalize_membership_type(label, expected):
    assert normalize_membership_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        (None, 0),
        ("Immobilier", 0),
        ("Prêt immobilier", 0),
        ("Crédit consommation", 1),
        ("Prêt auto", 1),
        ("Achat mobilier", 1),
        ("1", 1),
    ],
)
def test_normalize_credit_category(label, expected):
    assert normalize_credit_category(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [("Monsieur", "M"), ("M.", "M"), ("Madame", "Mme"), ("mme", "Mme"), ("Mlle", "Mlle"), (None, "M"), ("Dr", "M")],
)
def test_normalize_civility(label, expected):
    assert normalize_civility(label) == expected
