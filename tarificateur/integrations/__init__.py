"""
Integrations layer.

Everything used to communicate with the Exade borrower-insurance tariff web
service lives here:
- contracts/  request and quote models
- policy/     request builder, response parser, normalizer, TariffService
- clients/    real HTTP client and development mock

Key rule:
- Application code MUST NOT call Exade directly; it goes through TariffService.
"""

from .contracts import (
    CommissionOptions,
    GuaranteeCost,
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffQuote,
    TariffRequest,
)
from .policy.tariff_service import TariffService

__all__ = [
    "CommissionOptions",
    "GuaranteeCost",
    "GuaranteeSelection",
    "InsuredPerson",
    "Loan",
    "TariffQuote",
    "TariffRequest",
    "TariffService",
]
