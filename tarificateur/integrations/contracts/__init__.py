"""
Contracts (data models).

Request/response shapes for the Exade tariff integration. Both the mock and the
real HTTP client, and every policy module, exchange these models instead of
ad-hoc dicts.
"""

from .tariff import (
    BuiltRequest,
    CommissionOptions,
    GuaranteeCost,
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffQuote,
    TariffRequest,
)

__all__ = [
    "BuiltRequest",
    "CommissionOptions",
    "GuaranteeCost",
    "GuaranteeSelection",
    "InsuredPerson",
    "Loan",
    "TariffQuote",
    "TariffRequest",
]
