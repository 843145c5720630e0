"""
Exade web service configuration.

The tariff client never reads the environment itself: callers build an
ExadeSettings (directly or with load_settings) and hand it over.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Pricing endpoint: simulations are NOT visible on the broker dashboard
TARIFICATION_URL = "https://stage-product.exade.fr/4DSOAP"
# Production endpoint: simulations are recorded and visible on the broker dashboard
PRODUCTION_URL = "https://www.exade.fr/4DSOAP"

DEFAULT_PARTNER_CODE = "815178"
DEFAULT_SOAP_ACTION = "A_WebService#webservice_tarificateur"


class ConfigurationError(ValueError):
    pass


class ExadeSettings(BaseModel):
    """Connection settings for the Exade tariff web service."""

    licence_key: str
    partner_code: str = DEFAULT_PARTNER_CODE
    tarif_url: str = TARIFICATION_URL
    production_url: str = PRODUCTION_URL
    soap_action: str = DEFAULT_SOAP_ACTION
    timeout_seconds: float = Field(default=30.0, gt=0)
    use_mock: bool = False

    @field_validator("licence_key", "partner_code")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def url_for(self, persist: bool = False) -> str:
        """Production URL when the simulation must be recorded remotely, pricing URL otherwise."""
        return self.production_url if persist else self.tarif_url

    def redacted(self) -> Dict[str, Any]:
        return {
            "has_licence_key": bool(self.licence_key),
            "licence_key_length": len(self.licence_key),
            "partner_code": self.partner_code,
            "tarif_url": self.tarif_url,
            "production_url": self.production_url,
            "use_mock": self.use_mock,
        }


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings(env: Optional[Mapping[str, str]] = None) -> ExadeSettings:
    """
    Build ExadeSettings from EXADE_* variables.

    Args:
        env: Explicit mapping to read from. Defaults to os.environ after loading .env.

    Raises:
        ConfigurationError: If EXADE_LICENCE_KEY is missing or a value is invalid.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    values: Dict[str, Any] = {
        "licence_key": env.get("EXADE_LICENCE_KEY", ""),
        "partner_code": env.get("EXADE_PARTNER_CODE") or DEFAULT_PARTNER_CODE,
        "tarif_url": env.get("EXADE_TARIF_URL") or TARIFICATION_URL,
        "production_url": env.get("EXADE_PRODUCTION_URL") or PRODUCTION_URL,
        "soap_action": env.get("EXADE_SOAP_ACTION") or DEFAULT_SOAP_ACTION,
        "use_mock": _truthy(env.get("EXADE_USE_MOCK")),
    }
    if env.get("EXADE_TIMEOUT_SECONDS"):
        values["timeout_seconds"] = env["EXADE_TIMEOUT_SECONDS"]

    if not values["licence_key"] and not values["use_mock"]:
        raise ConfigurationError(
            "EXADE_LICENCE_KEY is not configured. Set EXADE_LICENCE_KEY in your .env file."
        )
    if not values["licence_key"]:
        values["licence_key"] = "mock"

    try:
        settings = ExadeSettings(**values)
    except ValidationError as exc:
        logger.error(f"Exade settings validation failed: {exc}")
        raise ConfigurationError(f"Invalid Exade settings: {exc}") from exc

    logger.debug("Loaded Exade settings: %s", settings.redacted())
    return settings
