"""
Real Exade HTTP Client.

Purpose:
- POSTs a built SOAP envelope to the Exade 4DSOAP endpoint
- Returns the raw response body; parsing belongs to policy/response_wrappers.py

Endpoint selection:
- persist=False -> pricing endpoint (nothing recorded on the broker dashboard)
- persist=True  -> production endpoint (the simulation shows up remotely)

No retries are performed here.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from tarificateur.integrations.policy.errors import TransportError, TransportTimeoutError, excerpt
from tarificateur.settings import ExadeSettings

logger = logging.getLogger(__name__)


class ExadeHttpClient:
    def __init__(
        self,
        settings: ExadeSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self._http_client = http_client

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "text/xml;charset=utf-8",
            "SOAPAction": self.settings.soap_action,
        }

    async def send(self, envelope: str, persist: bool = False) -> str:
        url = self.settings.url_for(persist)
        body = envelope.encode("utf-8")
        logger.info(f"Sending Exade tariff request to {url} (persist={persist})")
        logger.debug("Exade request body: %d bytes", len(body))

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, content=body, headers=self.headers, timeout=self.settings.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self.settings.timeout_seconds) as client:
                    response = await client.post(url, content=body, headers=self.headers)
        except httpx.TimeoutException as exc:
            logger.error(f"Exade request to {url} timed out: {exc}")
            raise TransportTimeoutError(f"Exade request timed out after {self.settings.timeout_seconds}s") from exc
        except httpx.RequestError as exc:
            logger.error(f"Request error connecting to Exade: {exc}")
            raise TransportError(f"Could not reach Exade: {exc}") from exc

        text = response.text
        if not response.is_success:
            logger.error(f"HTTP error from Exade: {response.status_code} {excerpt(text)}")
            raise TransportError(
                f"Exade returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=text,
            )

        logger.debug("Exade response: status=%s, %d bytes", response.status_code, len(text))
        return text
