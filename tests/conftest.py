"""Pytest fixtures for the Exade tariff client tests."""

import pytest

from tarificateur.integrations.contracts.tariff import (
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffRequest,
)
from tarificateur.settings import ExadeSettings


@pytest.fixture
def settings():
    return ExadeSettings(licence_key="LIC-TEST-KEY", partner_code="123456")


@pytest.fixture
def principal():
    return InsuredPerson(
        civility="M",
        last_name="GAMBE",
        first_name="Clovis",
        birth_date="1985-03-15",
        birth_place="Lyon",
        address="15 rue Test",
        postal_code="75001",
        city="Paris",
        phone="+33612345678",
        email="test@example.fr",
        smoker=False,
    )


@pytest.fixture
def spouse():
    return InsuredPerson(
        civility="Mme",
        last_name="GAMBE",
        first_name="Alice",
        birth_name="MARTIN",
        birth_date="19870704",
        smoker=True,
        professional_category=3,
    )


@pytest.fixture
def loan():
    return Loan(amount=200_000, rate=1.2, duration_months=240)


@pytest.fixture
def tariff_request(principal, loan):
    return TariffRequest(
        principal=principal,
        loan=loan,
        guarantee=GuaranteeSelection(plan=2, quota=100),
        effective_date="2026-11-01",
    )


@pytest.fixture
def soap_response():
    """Factory wrapping an inner Exade document in a SOAP response envelope."""

    def _build(inner: str, prefix: str = "soap", encoded: bool = False, response_prefix: str = "ns1") -> str:
        if encoded:
            payload = inner.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        else:
            payload = f"<![CDATA[{inner}]]>"
        response_tag = f"{response_prefix}:webservice_tarificateurResponse" if response_prefix else "webservice_tarificateurResponse"
        return (
            '<?xml version="1.0" encoding="utf-8"?>'
            f'<{prefix}:Envelope xmlns:{prefix}="http://schemas.xmlsoap.org/soap/envelope/"'
            ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"'
            ' xmlns:xsd="http://www.w3.org/2001/XMLSchema"'
            + (f' xmlns:{response_prefix}="http://www.4d.com/namespace/default"' if response_prefix else "")
            + ">"
            f"<{prefix}:Body>"
            f"<{response_tag}>"
            f'<webservice_tarificateurResult xsi:type="xsd:string">{payload}</webservice_tarificateurResult>'
            f"</{response_tag}>"
            f"</{prefix}:Body>"
            f"</{prefix}:Envelope>"
        )

    return _build


@pytest.fixture
def single_product_simulation():
    return """<simulation>
  <id_simulation>555</id_simulation>
  <assure>
    <numero>1</numero>
    <tarif>
      <id_tarif>42</id_tarif>
      <compagnie>Insurer X</compagnie>
      <nom>Product X</nom>
      <type_tarif>CRD</type_tarif>
      <cout_total_tarif>840000</cout_total_tarif>
      <frais_adhesion>1500</frais_adhesion>
      <frais_adhesion_apporteur>20000</frais_adhesion_apporteur>
      <frais_frac>250</frais_frac>
      <compatible_lemoine>O</compatible_lemoine>
      <taux_capital_assure_tarif>1750</taux_capital_assure_tarif>
      <pret>
        <id_pret>1</id_pret>
        <garantie_pret><nom>Deces</nom><taxe>N</taxe><periode>P1</periode><cout>1500</cout><crd>20000000</crd></garantie_pret>
        <garantie_pret><nom>ITT</nom><taxe>O</taxe><appreciation>Standard</appreciation><periode>P1</periode><cout>2000</cout></garantie_pret>
      </pret>
    </tarif>
  </assure>
</simulation>"""
