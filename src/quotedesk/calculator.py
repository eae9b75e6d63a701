"""Calculator editing context.

The record being priced travels inside :class:`CalculatorInputs` as
``target_id`` instead of living in module state.  Pre-fill helpers return a
new context; they never touch the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from .config import Config
from .errors import ValidationError
from .lifecycle import RecordManager
from .models import CostLine, Financials, QuotePayload, Record
from .pricing import COST_CATEGORIES, calculate

FormValue = Union[str, float]

DEFAULT_DELIVERY_MODE = "Offline"
DEFAULT_PARTICIPANTS = "20"
DEFAULT_SESSIONS = "1"


def blank_cost_lines() -> List[CostLine]:
    return [CostLine(component=name, qty=1, unit_cost=0) for name in COST_CATEGORIES]


@dataclass
class CalculatorInputs:
    target_id: Optional[str] = None
    quote: QuotePayload = field(default_factory=lambda: QuotePayload(client_name=""))
    cost_lines: List[CostLine] = field(default_factory=blank_cost_lines)
    margin_percent: FormValue = 0
    tax1_label: str = ""
    tax1_percent: FormValue = 0
    tax2_label: str = ""
    tax2_percent: FormValue = 0

    @classmethod
    def blank(cls, config: Config) -> "CalculatorInputs":
        return cls(
            margin_percent=config.default_margin_percent,
            tax1_label=config.tax1_label,
            tax1_percent=config.tax1_percent,
            tax2_label=config.tax2_label,
            tax2_percent=config.tax2_percent,
        )

    def with_cost(self, index: int, qty: FormValue, unit_cost: FormValue) -> "CalculatorInputs":
        lines = list(self.cost_lines)
        lines[index] = replace(lines[index], qty=qty, unit_cost=unit_cost)
        return replace(self, cost_lines=lines)


def compute(inputs: CalculatorInputs) -> Financials:
    return calculate(
        inputs.cost_lines,
        inputs.margin_percent,
        (inputs.tax1_label, inputs.tax1_percent),
        (inputs.tax2_label, inputs.tax2_percent),
    )


def prefill_from_request(record: Record, current: CalculatorInputs) -> CalculatorInputs:
    """Load a request for pricing; every cost line restarts at qty 1, unit cost 0."""

    request = record.request
    if request is None:
        raise ValidationError("This record has no request to price.")
    training = request.training
    quote = replace(
        current.quote,
        client_name=request.client_name,
        company_name="",
        program_name=request.details.materials,
        delivery_mode=training.mode or DEFAULT_DELIVERY_MODE,
        training_date=training.start_date,
        participants=training.participants or DEFAULT_PARTICIPANTS,
        sessions=training.sessions or DEFAULT_SESSIONS,
    )
    return replace(current, target_id=record.id, quote=quote, cost_lines=blank_cost_lines())


def prefill_from_quote(record: Record, current: CalculatorInputs) -> CalculatorInputs:
    """Restore a saved quote for editing.

    Saved cost lines are matched to categories by position; categories past
    the end of the saved list keep their current values.
    """

    if record.quote is None:
        raise ValidationError("This record has no saved quote to edit.")
    lines = list(current.cost_lines)
    for index, saved in enumerate(record.cost_data[: len(lines)]):
        lines[index] = replace(lines[index], qty=saved.qty, unit_cost=saved.unit_cost)

    restored = replace(current, target_id=record.id, quote=replace(record.quote), cost_lines=lines)
    if record.financials is not None:
        restored = replace(
            restored,
            margin_percent=record.financials.margin_percent,
            tax1_percent=record.financials.tax1.percent,
            tax2_percent=record.financials.tax2.percent,
        )
    return restored


def save_quote(manager: RecordManager, inputs: CalculatorInputs) -> Record:
    """Persist the current pricing against ``inputs.target_id`` (or as a new quote)."""
    if not inputs.quote.client_name.strip():
        raise ValidationError("Please enter a Client Name.")
    if [line.component for line in inputs.cost_lines] != list(COST_CATEGORIES):
        raise ValidationError("Cost lines do not match the cost categories.")
    return manager.promote_or_create_quote(
        inputs.target_id,
        replace(inputs.quote),
        list(inputs.cost_lines),
        compute(inputs),
    )


__all__ = [
    "CalculatorInputs",
    "blank_cost_lines",
    "compute",
    "prefill_from_request",
    "prefill_from_quote",
    "save_quote",
]
