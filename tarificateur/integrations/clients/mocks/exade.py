"""
Exade tariff web service: MOCK client.

This is a mock implementation for local development while the server IP is not
whitelisted by Exade, and for tests. It never touches the network: every call
records the envelope and answers with a canned SOAP response (or the body given
to the constructor).
"""

import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_SIMULATION = """<simulation>
  <id_simulation>900001</id_simulation>
  <assure>
    <numero>1</numero>
    <tarif>
      <id_tarif>1</id_tarif>
      <compagnie>GENERALI</compagnie>
      <nom>ASSUREA PRET 7301 CI</nom>
      <type_tarif>CI</type_tarif>
      <cout_total_tarif>2292000</cout_total_tarif>
      <cout_premieres_annees_tarif>916800</cout_premieres_annees_tarif>
      <frais_adhesion>1500</frais_adhesion>
      <frais_adhesion_apporteur>0</frais_adhesion_apporteur>
      <frais_frac>0</frais_frac>
      <compatible_lemoine>O</compatible_lemoine>
      <taux_capital_assure_tarif>573</taux_capital_assure_tarif>
      <pret>
        <id_pret>1</id_pret>
        <garantie_pret><nom>Décès / PTIA</nom><taxe>N</taxe><periode>P1</periode><cout>5500</cout><crd>20000000</crd></garantie_pret>
        <garantie_pret><nom>ITT / IPT</nom><taxe>O</taxe><periode>P1</periode><cout>4050</cout><crd>20000000</crd></garantie_pret>
      </pret>
      <cout_total_garantie>
        <garantie><nom>Décès / PTIA</nom><cout_total>1320000</cout_total></garantie>
        <garantie><nom>ITT / IPT</nom><cout_total>972000</cout_total></garantie>
      </cout_total_garantie>
    </tarif>
    <tarif>
      <id_tarif>2</id_tarif>
      <compagnie>SWISSLIFE</compagnie>
      <nom>ASSUREA PREMIUM L1047</nom>
      <type_tarif>CRD</type_tarif>
      <cout_total_tarif>2455200</cout_total_tarif>
      <frais_adhesion>0</frais_adhesion>
      <frais_adhesion_apporteur>0</frais_adhesion_apporteur>
      <frais_frac>0</frais_frac>
      <compatible_lemoine>N</compatible_lemoine>
      <pret>
        <id_pret>1</id_pret>
        <garantie_pret><nom>Décès / PTIA</nom><periode>P1</periode><cout>6230</cout></garantie_pret>
        <garantie_pret><nom>ITT / IPT</nom><periode>P1</periode><cout>4000</cout></garantie_pret>
      </pret>
    </tarif>
  </assure>
</simulation>"""

MOCK_RESPONSE = f"""<?xml version="1.0" encoding="utf-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Body>
    <ns1:webservice_tarificateurResponse xmlns:ns1="http://www.4d.com/namespace/default">
      <webservice_tarificateurResult><![CDATA[{_MOCK_SIMULATION}]]></webservice_tarificateurResult>
    </ns1:webservice_tarificateurResponse>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class MockExadeClient:
    """
    Mock Exade client.

    Parameters
    ----------
    response_body : str, optional
        Raw SOAP response returned by every call. Defaults to a two-product answer.
    """

    def __init__(self, response_body: Optional[str] = None):
        self._response_body = response_body or MOCK_RESPONSE
        self.sent: List[Tuple[str, bool]] = []
        logger.info("[EXADE MOCK] Client initialised")

    async def send(self, envelope: str, persist: bool = False) -> str:
        self.sent.append((envelope, persist))
        logger.info("[EXADE MOCK] Tariff request received (persist=%s, %d bytes)", persist, len(envelope))
        return self._response_body
