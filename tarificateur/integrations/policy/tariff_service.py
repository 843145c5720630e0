"""
Tariff Service for the Exade web service.

Runs the whole pipeline for one call:
- request building (policy/request_builder.py)
- transport (clients/real_http or clients/mocks)
- response parsing (policy/response_wrappers.py)
- quote normalization (policy/tariff_normalizer.py)

Every failure surfaces as a TarificationError subclass; nothing is retried.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Protocol

from tarificateur.integrations.clients.mocks.exade import MockExadeClient
from tarificateur.integrations.clients.real_http.exade import ExadeHttpClient
from tarificateur.integrations.contracts.tariff import (
    BuiltRequest,
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffQuote,
    TariffRequest,
)
from tarificateur.settings import ExadeSettings

from .errors import EmptyResultError, TarificationError
from .request_builder import build_request
from .response_wrappers import parse_response
from .tariff_normalizer import normalize_simulation

logger = logging.getLogger(__name__)


class ExadeClient(Protocol):
    async def send(self, envelope: str, persist: bool = False) -> str:
        ...


# Minimal profile used to check that the licence and partner code are accepted
PROBE_REQUEST = TariffRequest(
    principal=InsuredPerson(
        civility="M",
        last_name="TEST",
        first_name="Connexion",
        birth_date="19850101",
        birth_place="Paris",
        address="1 rue test",
        postal_code="75001",
        city="Paris",
        phone="+33600000000",
        email="test@test.fr",
    ),
    loan=Loan(amount=150_000, rate=3.5, duration_months=240),
    guarantee=GuaranteeSelection(plan=2, quota=100),
)


class TariffService:
    def __init__(self, settings: ExadeSettings, client: Optional[ExadeClient] = None):
        self.settings = settings
        if client is None:
            client = MockExadeClient() if settings.use_mock else ExadeHttpClient(settings)
        self.client = client

    def build(self, request: TariffRequest, today: Optional[date] = None) -> BuiltRequest:
        return build_request(request, self.settings, today=today)

    async def fetch_quotes(self, request: TariffRequest) -> List[TariffQuote]:
        """
        Price a request against Exade.

        Raises:
            ValidationError, TransportError, RemoteFault, ProtocolError,
            RemoteValidationError, EmptyResultError
        """
        built = self.build(request)
        raw = await self.client.send(built.envelope, persist=built.persist)
        try:
            quotes = normalize_simulation(parse_response(raw))
        except TarificationError as exc:
            logger.warning("Exade tariff call failed: %s: %s", type(exc).__name__, exc)
            raise
        logger.info(f"Received {len(quotes)} Exade quote(s) (persist={built.persist})")
        return quotes

    async def check_connection(self) -> bool:
        """
        Send a probe simulation to verify the licence key and partner code.

        An empty but valid answer still proves the credentials work.
        """
        try:
            await self.fetch_quotes(PROBE_REQUEST)
        except EmptyResultError:
            logger.info("Exade connection OK (probe returned no product)")
        return True
