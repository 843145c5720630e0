"""
Exade simulation -> TariffQuote normalization.

The simulation node holds one <assure> per insured person, each with one <tarif>
per product. The principal's products define the output; co-insured entries are
joined on id_tarif. Amounts arrive in cents and rates in 1/10000.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from tarificateur.integrations.contracts.tariff import GuaranteeCost, TariffQuote

from .errors import EmptyResultError, RemoteValidationError
from .response_wrappers import ERROR_LIST_KEY, error_messages
from .xml_tree import Node, as_list, child_text

logger = logging.getLogger(__name__)

_TRUE_FLAGS = {"o", "oui", "y", "yes", "1", "true", "vrai"}


def parse_minor(value: str) -> Optional[int]:
    """Parse a minor-unit field ("1500", "1500.0"); None when empty or invalid."""
    if not value:
        return None
    try:
        return int(Decimal(value.replace(",", ".")).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        logger.warning("Ignoring non-numeric Exade amount %r", value)
        return None


def minor_to_major(value: Optional[int]) -> Optional[float]:
    return None if value is None else value / 100


def rate_to_percent(value: Optional[int]) -> Optional[float]:
    return None if value is None else value / 10000


def parse_flag(value: str) -> Optional[bool]:
    if not value:
        return None
    return value.strip().lower() in _TRUE_FLAGS


@dataclass
class _GuaranteeTotals:
    name: str
    taxable: Optional[bool] = None
    appreciation: Optional[str] = None
    monthly_minor: Optional[int] = None
    total_minor: Optional[int] = None
    outstanding_minor: Optional[int] = None

    def add_monthly(self, amount: Optional[int]) -> None:
        if amount is not None:
            self.monthly_minor = (self.monthly_minor or 0) + amount

    def add_total(self, amount: Optional[int]) -> None:
        if amount is not None:
            self.total_minor = (self.total_minor or 0) + amount

    def to_model(self) -> GuaranteeCost:
        return GuaranteeCost(
            name=self.name,
            taxable=self.taxable,
            appreciation=self.appreciation,
            monthly_cost=minor_to_major(self.monthly_minor),
            total_cost=minor_to_major(self.total_minor),
            outstanding_capital=minor_to_major(self.outstanding_minor),
        )


@dataclass
class _QuoteAccumulator:
    product_id: str
    principal: Dict[str, Any]
    # one entry per insured person, principal first
    entries: List[Dict[str, Any]] = field(default_factory=list)
    total_minor: int = 0
    adhesion_minor: int = 0
    guarantees: Dict[str, _GuaranteeTotals] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def guarantee(self, name: str) -> _GuaranteeTotals:
        if name not in self.guarantees:
            self.guarantees[name] = _GuaranteeTotals(name=name)
        return self.guarantees[name]


# ---------------------------------------------------------------------------
# Tree navigation
# ---------------------------------------------------------------------------

def _insured_entries(simulation: Dict[str, Any]) -> List[Dict[str, Any]]:
    """<assure> entries with the principal (numero 1, else the first) in front."""
    entries = [entry for entry in as_list(simulation.get("assure")) if isinstance(entry, dict)]
    for index, entry in enumerate(entries):
        if child_text(entry, "numero") == "1":
            return [entry] + entries[:index] + entries[index + 1:]
    return entries


def _tarifs(insured: Dict[str, Any]) -> List[Dict[str, Any]]:
    tarifs = insured.get("tarif")
    if tarifs is None and isinstance(insured.get("tarifs"), dict):
        tarifs = insured["tarifs"].get("tarif")
    return [tarif for tarif in as_list(tarifs) if isinstance(tarif, dict)]


def _period_lines(tarif: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Per-period guarantee lines, either directly under <tarif> or under <tarif><pret>."""
    lines = list(as_list(tarif.get("garantie_pret")))
    for loan in as_list(tarif.get("pret")):
        if isinstance(loan, dict):
            lines.extend(as_list(loan.get("garantie_pret")))
    return [line for line in lines if isinstance(line, dict)]


def _lifetime_lines(tarif: Dict[str, Any]) -> List[Dict[str, Any]]:
    lines: List[Node] = []
    for block in as_list(tarif.get("cout_total_garantie")):
        if isinstance(block, dict) and "garantie" in block:
            lines.extend(as_list(block["garantie"]))
        else:
            lines.append(block)
    return [line for line in lines if isinstance(line, dict)]


def _guarantee_name(line: Dict[str, Any]) -> str:
    for key in ("nom", "libelle", "garantie", "code"):
        value = child_text(line, key)
        if value:
            return value
    return ""


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _accumulate_periods(acc: _QuoteAccumulator) -> None:
    lines = [line for tarif in acc.entries for line in _period_lines(tarif)]
    if not lines:
        return
    # lexical minimum of the raw labels across every insured is the product's first billing period
    first_period = min(child_text(line, "periode") for line in lines)
    for line in lines:
        if child_text(line, "periode") != first_period:
            continue
        name = _guarantee_name(line)
        if not name:
            logger.warning("Skipping unnamed guarantee line for tarif %s", acc.product_id)
            continue
        totals = acc.guarantee(name)
        totals.add_monthly(parse_minor(child_text(line, "cout")))
        if totals.taxable is None:
            totals.taxable = parse_flag(child_text(line, "taxe"))
        if totals.appreciation is None:
            totals.appreciation = child_text(line, "appreciation") or None
        if totals.outstanding_minor is None:
            totals.outstanding_minor = parse_minor(child_text(line, "crd") or child_text(line, "capital"))


def _accumulate_lifetime(acc: _QuoteAccumulator, tarif: Dict[str, Any]) -> None:
    for line in _lifetime_lines(tarif):
        name = _guarantee_name(line)
        if not name:
            continue
        amount = parse_minor(child_text(line, "cout_total") or child_text(line, "cout"))
        acc.guarantee(name).add_total(amount)


def _accumulate(acc: _QuoteAccumulator) -> None:
    _accumulate_periods(acc)
    for tarif in acc.entries:
        acc.total_minor += parse_minor(child_text(tarif, "cout_total_tarif")) or 0
        acc.adhesion_minor += parse_minor(child_text(tarif, "frais_adhesion")) or 0
        _accumulate_lifetime(acc, tarif)
        for message in error_messages(tarif.get(ERROR_LIST_KEY)):
            if message not in acc.errors:
                acc.errors.append(message)


def _build_quote(acc: _QuoteAccumulator, simulation_id: Optional[str]) -> TariffQuote:
    tarif = acc.principal
    guarantees = [totals.to_model() for totals in acc.guarantees.values()]
    monthly_minor = sum(totals.monthly_minor or 0 for totals in acc.guarantees.values())
    rate = parse_minor(child_text(tarif, "taux_capital_assure_tarif"))

    return TariffQuote(
        simulation_id=child_text(tarif, "id_simulation") or simulation_id,
        product_id=acc.product_id,
        insurer=child_text(tarif, "compagnie"),
        product_name=child_text(tarif, "nom"),
        product_type=child_text(tarif, "type_tarif"),
        monthly_cost=monthly_minor / 100,
        total_cost=acc.total_minor / 100,
        first_years_cost=minor_to_major(parse_minor(child_text(tarif, "cout_premieres_annees_tarif"))),
        adhesion_fee=acc.adhesion_minor / 100,
        broker_adhesion_fee=(parse_minor(child_text(tarif, "frais_adhesion_apporteur")) or 0) / 100,
        fractionation_fee=(parse_minor(child_text(tarif, "frais_frac")) or 0) / 100,
        guarantees=guarantees,
        lemoine_compatible=bool(parse_flag(child_text(tarif, "compatible_lemoine"))),
        errors=acc.errors or None,
        capital_assured_rate=rate_to_percent(rate),
    )


def normalize_simulation(simulation: Dict[str, Any]) -> List[TariffQuote]:
    """
    Build one TariffQuote per product offered to the principal insured.

    Raises:
        RemoteValidationError: No product and the simulation carries an error list.
        EmptyResultError: No product at all.
    """
    simulation_id = child_text(simulation, "id_simulation") or None
    insured = _insured_entries(simulation)

    accumulators: Dict[str, _QuoteAccumulator] = {}
    if insured:
        for tarif in _tarifs(insured[0]):
            product_id = child_text(tarif, "id_tarif")
            if not product_id:
                logger.warning("Skipping Exade tarif without id_tarif")
                continue
            if product_id not in accumulators:
                accumulators[product_id] = _QuoteAccumulator(product_id=product_id, principal=tarif)

    for person in insured:
        joined = set()
        for tarif in _tarifs(person):
            product_id = child_text(tarif, "id_tarif")
            acc = accumulators.get(product_id)
            if acc is None:
                continue
            if product_id in joined:
                logger.warning("Ignoring repeated tarif %s for the same insured", product_id)
                continue
            joined.add(product_id)
            acc.entries.append(tarif)

    for acc in accumulators.values():
        _accumulate(acc)

    quotes = [_build_quote(acc, simulation_id) for acc in accumulators.values()]
    if not quotes:
        messages = error_messages(simulation.get(ERROR_LIST_KEY))
        if messages:
            raise RemoteValidationError(messages)
        raise EmptyResultError("Exade returned no priceable product for this profile.")

    logger.info("Normalized %d Exade quote(s) for simulation %s", len(quotes), simulation_id)
    return quotes
