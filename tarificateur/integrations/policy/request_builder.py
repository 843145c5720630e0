"""
Exade request builder.

Turns a TariffRequest into the inner <simulation> document expected by
webservice_tarificateur and wraps it, unescaped, in a CDATA section of the SOAP
envelope. Missing optional codes are replaced by catalog defaults; only a missing
principal, loan or guarantee selection is an error.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from tarificateur.catalog import default_for
from tarificateur.code_normalizer import normalize_civility
from tarificateur.integrations.contracts.tariff import (
    BuiltRequest,
    CommissionOptions,
    GuaranteeSelection,
    InsuredPerson,
    Loan,
    TariffRequest,
)
from tarificateur.settings import ExadeSettings

from .errors import ValidationError

logger = logging.getLogger(__name__)

Fields = List[Tuple[str, object]]

ENVELOPE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<soapenv:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
                  xmlns:xsd="http://www.w3.org/2001/XMLSchema"
                  xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/"
                  xmlns:def="http://www.4d.com/namespace/default">
  <soapenv:Header/>
  <soapenv:Body>
    <def:webservice_tarificateur soapenv:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
      <webservice_tarificateurRequest xsi:type="xsd:string"><![CDATA[{inner}]]></webservice_tarificateurRequest>
    </def:webservice_tarificateur>
  </soapenv:Body>
</soapenv:Envelope>"""


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

def format_date(value) -> str:
    """Render a date as YYYYMMDD; strings keep their digits only."""
    if value is None or value == "":
        return ""
    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    return re.sub(r"\D", "", str(value))


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def to_rate_units(percentage: float) -> int:
    return int(round(percentage * 100))


def split_quota(quota: float, with_co_insured: bool) -> Tuple[int, Optional[int]]:
    """Full quota for a lone principal, round(quota / 2) each otherwise."""
    if not with_co_insured:
        return int(round(quota)), None
    half = int(round(quota / 2))
    return half, half


def _or_default(value, field_name: str):
    return default_for(field_name) if value is None else value


def _flag(value: bool) -> str:
    return "O" if value else "N"


def _risk_flag(value: bool) -> int:
    # 1 = no, 2 = yes
    return 2 if value else 1


# ---------------------------------------------------------------------------
# XML rendering
# ---------------------------------------------------------------------------

def _element(tag: str, value: object) -> str:
    if value is None or value == "":
        return f"<{tag}/>"
    return f"<{tag}>{escape(str(value))}</{tag}>"


def _block(tag: str, fields: Fields, indent: str = "  ") -> str:
    inner = "\n".join(f"{indent}  {_element(name, value)}" for name, value in fields)
    return f"{indent}<{tag}>\n{inner}\n{indent}</{tag}>"


def _commission_fields(commission: Optional[CommissionOptions]) -> Fields:
    if commission is None:
        return []
    fields: Fields = []
    if commission.broker_fee is not None:
        fields.append(("frais_adhesion_apporteur", commission.broker_fee))
    if commission.commission_code is not None:
        fields.append(("commissionnement", commission.commission_code))
    if commission.commission_type is not None:
        fields.append(("type_commissionnement", commission.commission_type))
    return fields


def _insured_fields(person: InsuredPerson, number: int, loan: Loan) -> Fields:
    civility = normalize_civility(person.civility or default_for("civility"))
    membership = person.membership_type if person.membership_type is not None else loan.membership_type
    return [
        ("numero", number),
        ("statut", 1),
        ("type_adhesion", _or_default(membership, "membership_type")),
        ("sexe", "H" if civility == "M" else "F"),
        ("nom", person.last_name),
        ("nom_naissance", person.birth_name or person.last_name),
        ("prenom", person.first_name),
        ("adresse", person.address),
        ("ville", person.city),
        ("code_postal", person.postal_code),
        ("lieu_naissance", person.birth_place),
        ("velIdPaysNaissance", _or_default(person.birth_country_id, "birth_country_id")),
        ("idnationalite", _or_default(person.nationality_id, "nationality_id")),
        ("idPaysResidenceFiscale", _or_default(person.tax_residence_country_id, "tax_residence_country_id")),
        ("date_naissance", format_date(person.birth_date)),
        ("franchise", _or_default(person.deductible_days, "deductible_days")),
        ("fumeur", _flag(person.smoker)),
        ("deplacement_pro", _or_default(person.business_travel, "business_travel")),
        ("travaux_manuels", _or_default(person.manual_work, "manual_work")),
        ("travaux_hauteur", _risk_flag(person.works_at_height)),
        ("manip_produit_dangereux", _risk_flag(person.handles_hazardous_materials)),
        ("portable", person.phone),
        ("email", person.email),
        ("politique_expose", _flag(person.politically_exposed)),
        ("proche_politique_expose", _flag(person.close_to_politically_exposed)),
        ("encours_lemoine", person.lemoine_outstanding),
        ("categ_pro", _or_default(person.professional_category, "professional_category")),
    ]


def _loan_fields(loan: Loan, effective_date: str) -> Fields:
    return [
        ("id_pret", 1),
        ("numero", 1),
        ("type_pret", _or_default(loan.loan_type, "loan_type")),
        ("capital", to_minor_units(loan.amount)),
        ("taux", to_rate_units(loan.rate)),
        ("type_taux", _or_default(loan.rate_type, "rate_type")),
        ("duree", loan.duration_months),
        ("differe", _or_default(loan.deferment_months, "deferment_months")),
        ("amortissement", _or_default(loan.amortization_frequency, "amortization_frequency")),
        ("date_deblocage", format_date(loan.disbursement_date) or effective_date),
        ("palier", None),
    ]


def _guarantee_fields(guarantee: GuaranteeSelection, insured_number: int, quota: int) -> Fields:
    return [
        ("id_assure", insured_number),
        ("id_pret", 1),
        ("garantie", guarantee.plan),
        ("quotite", quota),
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_inner_xml(request: TariffRequest, settings: ExadeSettings, today: Optional[date] = None) -> str:
    """Render the inner Exade document for a tariff request."""
    if request.principal is None:
        raise ValidationError("Tariff request has no principal insured person.")
    if request.loan is None:
        raise ValidationError("Tariff request has no loan.")
    if request.guarantee is None:
        raise ValidationError("Tariff request has no guarantee selection.")

    loan = request.loan
    effective_date = format_date(request.effective_date) or format_date(today or date.today())

    header: Fields = [
        ("licence", settings.licence_key),
        ("code_courtier", settings.partner_code),
        ("type_operation", _or_default(request.operation_type, "operation_type")),
    ]
    if request.simulation_id:
        header.append(("id_tarif", request.simulation_id))

    lines = [_element(name, value) for name, value in header]
    lines.append("<retournerLesErreurs/>")

    simulation = [
        _element("date_effet", effective_date),
        _element("frac_assurance", _or_default(loan.billing_frequency, "billing_frequency")),
        _element("type_credit", _or_default(loan.credit_category, "credit_category")),
        _element("id_objetdufinancement", _or_default(loan.financing_purpose, "financing_purpose")),
    ]

    principal_fields = _insured_fields(request.principal, 1, loan) + _commission_fields(request.commission)
    simulation.append(_block("assure", principal_fields).strip())
    if request.co_insured is not None:
        simulation.append(_block("assure", _insured_fields(request.co_insured, 2, loan)).strip())

    simulation.append(_block("pret", _loan_fields(loan, effective_date)).strip())

    principal_quota, co_insured_quota = split_quota(request.guarantee.quota, request.co_insured is not None)
    simulation.append(_block("garantie_pret", _guarantee_fields(request.guarantee, 1, principal_quota)).strip())
    if co_insured_quota is not None:
        simulation.append(_block("garantie_pret", _guarantee_fields(request.guarantee, 2, co_insured_quota)).strip())

    lines.append("<simulation>\n  " + "\n  ".join(simulation) + "\n</simulation>")
    return "\n".join(lines)


def build_envelope(inner_xml: str) -> str:
    """Wrap the inner document in the SOAP envelope; CDATA keeps it verbatim."""
    if "]]>" in inner_xml:
        # a literal CDATA terminator must be split across two sections
        inner_xml = inner_xml.replace("]]>", "]]]]><![CDATA[>")
    return ENVELOPE_TEMPLATE.format(inner=inner_xml)


def build_request(request: TariffRequest, settings: ExadeSettings, today: Optional[date] = None) -> BuiltRequest:
    inner_xml = build_inner_xml(request, settings, today=today)
    logger.debug(
        "Built Exade request: co_insured=%s simulation_id=%s commission=%s",
        request.co_insured is not None,
        request.simulation_id,
        request.commission is not None,
    )
    return BuiltRequest(
        inner_xml=inner_xml,
        envelope=build_envelope(inner_xml),
        persist=request.persist_on_remote,
    )
