"""Exade borrower-insurance tariff client."""

from .integrations import (
    CommissionOptions,
    GuaranteeCost,
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffQuote,
    TariffRequest,
    TariffService,
)
from .settings import ExadeSettings, load_settings

__all__ = [
    "CommissionOptions",
    "ExadeSettings",
    "GuaranteeCost",
    "GuaranteeSelection",
    "InsuredPerson",
    "Loan",
    "TariffQuote",
    "TariffRequest",
    "TariffService",
    "load_settings",
]
