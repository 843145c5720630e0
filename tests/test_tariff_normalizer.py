"""Tests for Exade simulation -> TariffQuote normalization."""

import pytest

from tarificateur.integrations.policy.errors import EmptyResultError, RemoteValidationError
from tarificateur.integrations.policy.response_wrappers import parse_inner_document
from tarificateur.integrations.policy.tariff_normalizer import (
    normalize_simulation,
    parse_flag,
    parse_minor,
)


def _normalize(document: str):
    return normalize_simulation(parse_inner_document(document))


def test_single_product_quote(single_product_simulation):
    quotes = _normalize(single_product_simulation)

    assert len(quotes) == 1
    quote = quotes[0]
    assert quote.product_id == "42"
    assert quote.simulation_id == "555"
    assert quote.insurer == "Insurer X"
    assert quote.product_name == "Product X"
    assert quote.product_type == "CRD"
    assert quote.monthly_cost == 35.0
    assert quote.total_cost == 8400.0
    assert quote.adhesion_fee == 15.0
    assert quote.broker_adhesion_fee == 200.0
    assert quote.fractionation_fee == 2.5
    assert quote.lemoine_compatible is True
    assert quote.capital_assured_rate == 0.175
    assert quote.errors is None
    assert quote.first_years_cost is None


def test_guarantee_lines_are_mapped(single_product_simulation):
    guarantees = {g.name: g for g in _normalize(single_product_simulation)[0].guarantees}

    assert set(guarantees) == {"Deces", "ITT"}
    assert guarantees["Deces"].monthly_cost == 15.0
    assert guarantees["Deces"].taxable is False
    assert guarantees["Deces"].outstanding_capital == 200000.0
    assert guarantees["ITT"].monthly_cost == 20.0
    assert guarantees["ITT"].taxable is True
    assert guarantees["ITT"].appreciation == "Standard"
    assert guarantees["ITT"].total_cost is None


def test_only_first_period_counts_towards_monthly_cost():
    document = """<simulation><assure><numero>1</numero><tarif>
      <id_tarif>7</id_tarif>
      <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>1000</cout></garantie_pret>
      <garantie_pret><nom>Deces</nom><periode>P2</periode><cout>9000</cout></garantie_pret>
      <garantie_pret><nom>ITT</nom><periode>P2</periode><cout>500</cout></garantie_pret>
    </tarif></assure></simulation>"""
    quote = _normalize(document)[0]

    assert quote.monthly_cost == 10.0
    assert [g.name for g in quote.guarantees] == ["Deces"]


def test_lines_without_period_label_form_the_first_period():
    document = """<simulation><assure><numero>1</numero><tarif>
      <id_tarif>7</id_tarif>
      <garantie_pret><nom>Deces</nom><cout>1200</cout></garantie_pret>
      <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>9900</cout></garantie_pret>
    </tarif></assure></simulation>"""
    assert _normalize(document)[0].monthly_cost == 12.0


def test_lifetime_costs_merge_with_period_lines_by_name():
    document = """<simulation><assure><numero>1</numero><tarif>
      <id_tarif>7</id_tarif>
      <pret><garantie_pret><nom>Deces</nom><periode>P1</periode><cout>1000</cout></garantie_pret></pret>
      <cout_total_garantie>
        <garantie><nom>Deces</nom><cout_total>240000</cout_total></garantie>
        <garantie><nom>PE</nom><cout_total>12000</cout_total></garantie>
      </cout_total_garantie>
    </tarif></assure></simulation>"""
    guarantees = {g.name: g for g in _normalize(document)[0].guarantees}

    assert guarantees["Deces"].monthly_cost == 10.0
    assert guarantees["Deces"].total_cost == 2400.0
    assert guarantees["PE"].monthly_cost is None
    assert guarantees["PE"].total_cost == 120.0


CO_INSURED_DOCUMENT = """<simulation>
  <id_simulation>77</id_simulation>
  <assure>
    <numero>2</numero>
    <tarif>
      <id_tarif>1</id_tarif>
      <cout_total_tarif>30000</cout_total_tarif>
      <frais_adhesion>500</frais_adhesion>
      <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>800</cout></garantie_pret>
      <listeErreurs><erreur><libelle>Questionnaire medical requis</libelle></erreur></listeErreurs>
    </tarif>
    <tarif>
      <id_tarif>99</id_tarif>
      <cout_total_tarif>100000</cout_total_tarif>
    </tarif>
  </assure>
  <assure>
    <numero>1</numero>
    <tarif>
      <id_tarif>1</id_tarif>
      <compagnie>GENERALI</compagnie>
      <cout_total_tarif>40000</cout_total_tarif>
      <frais_adhesion>1000</frais_adhesion>
      <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>1100</cout></garantie_pret>
    </tarif>
    <tarif>
      <id_tarif>2</id_tarif>
      <compagnie>CNP</compagnie>
      <cout_total_tarif>50000</cout_total_tarif>
    </tarif>
  </assure>
</simulation>"""


def test_co_insured_amounts_are_summed_per_product():
    quotes = {quote.product_id: quote for quote in _normalize(CO_INSURED_DOCUMENT)}

    assert set(quotes) == {"1", "2"}
    joint = quotes["1"]
    assert joint.insurer == "GENERALI"
    assert joint.total_cost == 700.0
    assert joint.adhesion_fee == 15.0
    assert joint.monthly_cost == 19.0
    assert joint.simulation_id == "77"
    assert joint.errors == ["Questionnaire medical requis"]
    assert quotes["2"].total_cost == 500.0
    assert quotes["2"].errors is None


def test_products_are_returned_in_principal_order():
    assert [quote.product_id for quote in _normalize(CO_INSURED_DOCUMENT)] == ["1", "2"]


def test_tarifs_wrapper_is_accepted():
    document = """<simulation><assure><numero>1</numero><tarifs>
      <tarif><id_tarif>3</id_tarif><cout_total_tarif>100</cout_total_tarif></tarif>
      <tarif><id_tarif>4</id_tarif><cout_total_tarif>200</cout_total_tarif></tarif>
    </tarifs></assure></simulation>"""
    assert [quote.total_cost for quote in _normalize(document)] == [1.0, 2.0]


def test_no_product_raises_empty_result():
    with pytest.raises(EmptyResultError):
        _normalize("<simulation><id_simulation>1</id_simulation><assure><numero>1</numero></assure></simulation>")


def test_no_product_with_errors_raises_remote_validation_error():
    document = """<simulation>
      <assure><numero>1</numero></assure>
      <listeErreurs><erreur><libelle>Age maximum depasse</libelle></erreur></listeErreurs>
    </simulation>"""
    with pytest.raises(RemoteValidationError) as exc_info:
        _normalize(document)
    assert exc_info.value.messages == ["Age maximum depasse"]


@pytest.mark.parametrize(
    "raw, expected",
    [("1500", 1500), ("1500.0", 1500), ("12,5", 13), ("", None), ("n/a", None)],
)
def test_parse_minor(raw, expected):
    assert parse_minor(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("O", True), ("oui", True), ("1", True), ("N", False), ("non", False), ("", None)],
)
def test_parse_flag(raw, expected):
    assert parse_flag(raw) is expected


def test_first_period_is_shared_by_every_insured_of_a_product():
    document = """<simulation>
      <assure><numero>1</numero><tarif>
        <id_tarif>1</id_tarif>
        <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>1000</cout></garantie_pret>
        <garantie_pret><nom>Deces</nom><periode>P2</periode><cout>1500</cout></garantie_pret>
      </tarif></assure>
      <assure><numero>2</numero><tarif>
        <id_tarif>1</id_tarif>
        <garantie_pret><nom>Deces</nom><periode>P2</periode><cout>700</cout></garantie_pret>
      </tarif></assure>
    </simulation>"""
    assert _normalize(document)[0].monthly_cost == 10.0


def test_repeated_tarif_for_one_insured_is_counted_once():
    document = """<simulation><assure><numero>1</numero>
      <tarif><id_tarif>1</id_tarif><cout_total_tarif>1000</cout_total_tarif>
        <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>300</cout></garantie_pret></tarif>
      <tarif><id_tarif>1</id_tarif><cout_total_tarif>1000</cout_total_tarif>
        <garantie_pret><nom>Deces</nom><periode>P1</periode><cout>300</cout></garantie_pret></tarif>
    </assure></simulation>"""
    quotes = _normalize(document)

    assert len(quotes) == 1
    assert quotes[0].total_cost == 10.0
    assert quotes[0].monthly_cost == 3.0
