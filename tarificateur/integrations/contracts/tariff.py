"""
Tariff contracts.

Request side: the insured person(s), the loan, the guarantee selection and the
optional commission parameters that make up one pricing call.
Response side: the normalized quote records handed back to the application.

Amounts are major units (euros) and rates are percentages on these models; the
request builder and the normalizer own the conversion to and from wire units.
Every optional code left to None is filled from catalog.CODE_DEFAULTS at build time.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DateLike = Union[date, str]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class InsuredPerson(_Frozen):
    civility: Optional[str] = None                     # M / Mme / Mlle
    last_name: str = ""
    first_name: str = ""
    birth_name: Optional[str] = None                   # defaults to last_name
    birth_date: Optional[DateLike] = None
    birth_place: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""
    smoker: bool = False
    professional_category: Optional[int] = None
    business_travel: Optional[int] = None              # 1: < 20 000 km/year, 2: above
    manual_work: Optional[int] = None                  # 0: none, 1: light, 2: heavy
    works_at_height: bool = False
    handles_hazardous_materials: bool = False
    birth_country_id: Optional[int] = None
    nationality_id: Optional[int] = None
    tax_residence_country_id: Optional[int] = None
    membership_type: Optional[int] = None
    deductible_days: Optional[int] = None
    politically_exposed: bool = False
    close_to_politically_exposed: bool = False
    lemoine_outstanding: int = 0


class Loan(_Frozen):
    amount: float = Field(ge=0)                        # major units
    rate: float = Field(ge=0)                          # nominal rate, percent
    duration_months: int = Field(gt=0)
    loan_type: Optional[int] = None
    rate_type: Optional[int] = None
    deferment_months: Optional[int] = None
    amortization_frequency: Optional[int] = None
    disbursement_date: Optional[DateLike] = None
    financing_purpose: Optional[int] = None
    membership_type: Optional[int] = None
    credit_category: Optional[int] = None              # 0: real estate, 1: other
    billing_frequency: Optional[int] = None            # 12: monthly, 10: single premium


class GuaranteeSelection(_Frozen):
    plan: int
    quota: float = Field(default=100, ge=0, le=100)


class CommissionOptions(_Frozen):
    """Each field is emitted on the wire only when set."""

    broker_fee: Optional[int] = Field(default=None, ge=0)  # minor units
    commission_code: Optional[str] = None              # e.g. "1T4"
    commission_type: Optional[str] = None


class TariffRequest(_Frozen):
    principal: Optional[InsuredPerson] = None
    co_insured: Optional[InsuredPerson] = None
    loan: Optional[Loan] = None
    guarantee: Optional[GuaranteeSelection] = None
    commission: Optional[CommissionOptions] = None
    simulation_id: Optional[str] = None                # prices one existing product only
    effective_date: Optional[DateLike] = None
    operation_type: Optional[int] = None
    persist_on_remote: bool = False


class GuaranteeCost(BaseModel):
    name: str
    taxable: Optional[bool] = None
    appreciation: Optional[str] = None
    monthly_cost: Optional[float] = None
    total_cost: Optional[float] = None
    outstanding_capital: Optional[float] = None


class TariffQuote(BaseModel):
    simulation_id: Optional[str] = None
    product_id: str
    insurer: str = ""
    product_name: str = ""
    product_type: str = ""
    monthly_cost: float = 0.0                          # approximate: first billing period only
    total_cost: float = 0.0
    first_years_cost: Optional[float] = None
    adhesion_fee: float = 0.0
    broker_adhesion_fee: float = 0.0
    fractionation_fee: float = 0.0
    guarantees: List[GuaranteeCost] = Field(default_factory=list)
    lemoine_compatible: bool = False
    errors: Optional[List[str]] = None
    capital_assured_rate: Optional[float] = None       # percent


class BuiltRequest(BaseModel):
    inner_xml: str
    envelope: str
    persist: bool = False
