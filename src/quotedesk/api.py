from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from dotenv import load_dotenv

from .calculator import (
    CalculatorInputs,
    compute,
    prefill_from_quote,
    prefill_from_request,
    save_quote,
)
from .config import Config, load_config
from .csv_import import import_csv_file, ingest_csv
from .dashboard import DashboardRow, build_dashboard, make_summary_text
from .lifecycle import RecordManager
from .models import Financials, Record, RequestPayload
from .pricing import format_currency, line_total
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingDisplay:
    """Formatted calculator figures for the presentation layer."""

    line_totals: List[str]
    total_cost: str
    selling_price: str
    tax1: str
    tax2: str
    final_amount: str


@dataclass
class QuoteDesk:
    """Programmatic entry point mirroring the dashboard, intake form and calculator events."""

    config: Config
    manager: RecordManager
    calculator: CalculatorInputs = field(init=False)

    def __post_init__(self) -> None:
        self.calculator = CalculatorInputs.blank(self.config)

    def submit_request(self, form: Mapping[str, object]) -> Record:
        return self.manager.create_request(RequestPayload.from_form(form))

    def import_csv(self, text: str) -> int:
        return ingest_csv(text, self.manager)

    def import_csv_file(self, path: Path) -> int:
        return import_csv_file(path, self.manager)

    def start_pricing(self, record_id: str) -> CalculatorInputs:
        record = self.manager.get(record_id)
        self.calculator = prefill_from_request(record, self.calculator)
        logger.info("Loaded request for %s. Configure costs and save as quote.", record.display_client_name())
        return self.calculator

    def edit_quote(self, record_id: str) -> CalculatorInputs:
        self.calculator = prefill_from_quote(self.manager.get(record_id), self.calculator)
        return self.calculator

    def new_quote(self) -> CalculatorInputs:
        self.calculator = CalculatorInputs.blank(self.config)
        return self.calculator

    def update_calculator(self, inputs: CalculatorInputs) -> Financials:
        self.calculator = inputs
        return compute(inputs)

    def display(self) -> PricingDisplay:
        """Format the current calculator context; line totals and figures share one input."""
        inputs = self.calculator
        figures = compute(inputs)
        symbol = self.config.currency_symbol
        return PricingDisplay(
            line_totals=[format_currency(line_total(line), symbol) for line in inputs.cost_lines],
            total_cost=format_currency(figures.total_cost, symbol),
            selling_price=format_currency(figures.selling_price, symbol),
            tax1=format_currency(figures.tax1.amount, symbol),
            tax2=format_currency(figures.tax2.amount, symbol),
            final_amount=format_currency(figures.final_amount, symbol),
        )

    def save_quote(self) -> Record:
        record = save_quote(self.manager, self.calculator)
        self.calculator = CalculatorInputs.blank(self.config)
        return record

    def delete(self, record_id: str, confirm: Callable[[str], bool]) -> bool:
        return self.manager.delete_record(record_id, confirm)

    def dashboard(self) -> List[DashboardRow]:
        return build_dashboard(self.manager.records(), self.config.currency_symbol)

    def summary(self) -> str:
        return make_summary_text(self.manager.records(), self.config.currency_symbol)


def open_desk(config: Optional[Config] = None, overrides: object | None = None) -> QuoteDesk:
    """Build a :class:`QuoteDesk` from the environment (and ``.env``) unless ``config`` is given."""

    if config is None:
        load_dotenv()
        config = load_config(os.environ, overrides)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=config.logging_level, format="%(message)s")
    manager = RecordManager(RecordStore(config.store_path))
    return QuoteDesk(config=config, manager=manager)


__all__ = ["QuoteDesk", "PricingDisplay", "open_desk"]
