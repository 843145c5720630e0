"""Tests for the Exade domain codes catalog."""

import pytest

from tarificateur import catalog


def test_defaults_cover_every_defaultable_code():
    assert catalog.default_for("professional_category") == 1
    assert catalog.default_for("loan_type") == 1
    assert catalog.default_for("membership_type") == 0
    assert catalog.default_for("financing_purpose") == 1
    assert catalog.default_for("billing_frequency") == catalog.BILLING_MONTHLY
    assert catalog.default_for("birth_country_id") == 118
    assert catalog.default_for("nationality_id") == 84
    assert catalog.default_for("deductible_days") == 90


def test_default_for_unknown_field_raises():
    with pytest.raises(KeyError):
        catalog.default_for("shoe_size")


def test_membership_types_are_sparse():
    assert set(catalog.MEMBERSHIP_TYPES) == {0, 3, 4}


@pytest.mark.parametrize(
    "resolver, code, expected",
    [
        (catalog.professional_category_label, 1, "Salarié cadre"),
        (catalog.professional_category_label, "8", "Artisan"),
        (catalog.professional_category_label, 99, "Non renseignée"),
        (catalog.loan_type_label, 3, "Relais"),
        (catalog.rate_type_label, 2, "Variable"),
        (catalog.financing_purpose_label, 4, "Investissement locatif"),
        (catalog.guarantee_plan_label, 2, "Décès / PTIA / ITT / IPT"),
        (catalog.guarantee_plan_label, None, "Non renseignée"),
        (catalog.membership_type_label, 3, "Résiliation Banque"),
        (catalog.membership_type_label, None, "Nouveau prêt"),
        (catalog.billing_frequency_label, 10, "Prime unique"),
        (catalog.loan_type_label, "abc", catalog.UNKNOWN_LABEL),
        (catalog.civility_label, "Mme", "Madame"),
        (catalog.civility_label, "Dr", catalog.UNKNOWN_LABEL),
    ],
)
def test_labels(resolver, code, expected):
    assert resolver(code) == expected


def test_commission_tier_label():
    assert catalog.commission_tier_label("1T4") == "GENERALI CI - Palier 4 (30%/10%)"
    assert catalog.commission_tier_label("2T2") == "SWISSLIFE - Palier 2 (40%/10%)"
    assert catalog.commission_tier_label("99T1") == catalog.UNKNOWN_LABEL
    assert catalog.commission_tier_label(None) == catalog.UNKNOWN_LABEL


def test_every_company_code_has_a_tier():
    for company in catalog.COMPANIES.values():
        for code in company.codes + company.special_codes:
            assert code in catalog.COMMISSION_TIERS, code


def test_bis_tier_follows_its_base_tier():
    codes = [tier.code for tier in catalog.get_commission_codes_for_company("1")]
    assert codes[:5] == ["1T1", "1T2", "1T3", "1T4", "1T4bis"]
    assert "1PU1" not in codes


def test_special_codes_are_opt_in():
    codes = [tier.code for tier in catalog.get_commission_codes_for_company("2", include_special=True)]
    assert codes[:6] == ["2T1", "2T2", "2T3", "2T4", "2T5", "2T6"]
    assert codes[6:] == ["2PR1", "2PR2", "2PR3", "2PU1", "2PU2", "2PU3"]


def test_unknown_company_has_no_codes():
    assert catalog.get_commission_codes_for_company("42") == []
    assert catalog.default_commission_code("42") is None


@pytest.mark.parametrize("company_id, expected", [("1", "1T4"), ("2", "2T2"), ("9", "9T4"), ("12", "12T4")])
def test_default_commission_code(company_id, expected):
    assert catalog.default_commission_code(company_id) == expected


@pytest.mark.parametrize(
    "code, expected",
    [("11T4", "11"), ("1T4", "1"), ("2PR1", "2"), ("8T4bis", "8"), ("99T1", None), ("", None), (None, None)],
)
def test_get_company_from_code(code, expected):
    assert catalog.get_company_from_code(code) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("GENERALI", "1"),
        ("Generali Vie", "1"),
        ("SwissLife", "2"),
        ("SWISS LIFE PREVOYANCE", "2"),
        ("MALAKOFF HUMANIS", "11"),
        ("CNP Assurances", "4"),
        ("Unknown Insurer", None),
        (None, None),
    ],
)
def test_get_company_id_from_name(name, expected):
    assert catalog.get_company_id_from_name(name) == expected
