"""
Selling price and tax breakdown for a training quote.

All functions here are pure.  Numeric results keep full float precision;
rounding happens only in :func:`format_currency`, which is meant for display.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence, Tuple

from .models import CostLine, Financials, TaxLine

# Order drives how rows are listed and matched when a saved quote is reopened.
COST_CATEGORIES: Tuple[str, ...] = (
    "Trainer Fee",
    "Co-Trainer / Facilitator",
    "Training Materials",
    "Venue",
    "Meals & Refreshments",
    "Transport & Accommodation",
    "Certificates",
    "Other Costs",
)


def parse_number_or_default(value: object, default: float = 0.0) -> float:
    """
    Coerce a form value to ``float``, falling back to ``default``.

    Blank, non-numeric, NaN and infinite values all yield ``default``; this is
    the only place invalid numeric input is normalised.
    """

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _non_negative(value: object) -> float:
    return max(parse_number_or_default(value), 0.0)


def line_total(line: CostLine) -> float:
    return _non_negative(line.qty) * _non_negative(line.unit_cost)


def total_cost(lines: Iterable[CostLine]) -> float:
    return sum((line_total(line) for line in lines), 0.0)


def selling_price(cost: float, margin_percent: float) -> float:
    """Price that leaves ``margin_percent`` of revenue as margin; 0 at 100% or more."""
    margin = margin_percent / 100.0
    if margin >= 1:
        return 0.0
    return cost / (1 - margin)


def tax_amount(price: float, percent: float) -> float:
    return price * (percent / 100.0)


def calculate(
    lines: Sequence[CostLine],
    margin_percent: object,
    tax1: Tuple[str, object],
    tax2: Tuple[str, object],
) -> Financials:
    """
    Compute the full financial snapshot for a set of cost lines.

    Parameters
    ----------
    lines:
        Cost rows; quantity and unit cost may be raw form strings.
    margin_percent:
        Target margin as a percentage of the selling price.
    tax1, tax2:
        ``(label, percent)`` pairs.  Each tax applies to the selling price on
        its own; neither is compounded on the other.
    """

    cost = total_cost(lines)
    margin = parse_number_or_default(margin_percent)
    price = selling_price(cost, margin)

    label1, raw1 = tax1
    label2, raw2 = tax2
    pct1 = parse_number_or_default(raw1)
    pct2 = parse_number_or_default(raw2)
    first = TaxLine(label=str(label1 or ""), percent=pct1, amount=tax_amount(price, pct1))
    second = TaxLine(label=str(label2 or ""), percent=pct2, amount=tax_amount(price, pct2))

    return Financials(
        total_cost=cost,
        margin_percent=margin,
        selling_price=price,
        tax1=first,
        tax2=second,
        final_amount=price + first.amount + second.amount,
    )


def format_currency(amount: float, symbol: str = "Rp") -> str:
    """Format ``amount`` as ``Rp 4.440.000``: no decimals, dot thousands separator."""

    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    digits = f"{abs(int(rounded)):,}".replace(",", ".")
    return f"{sign}{symbol} {digits}"


__all__ = [
    "COST_CATEGORIES",
    "parse_number_or_default",
    "line_total",
    "total_cost",
    "selling_price",
    "tax_amount",
    "calculate",
    "format_currency",
]
