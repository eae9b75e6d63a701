"""Read-only dashboard view over the record collection, newest first."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import pandas as pd

from .models import Record, RecordStatus
from .pricing import format_currency

PLACEHOLDER = "-"

COLUMNS = [
    "ID",
    "CREATED_AT",
    "DATE",
    "CLIENT",
    "REQUESTER",
    "PROGRAM",
    "STATUS",
    "AMOUNT",
    "AMOUNT_DISPLAY",
    "ACTION",
]


@dataclass(frozen=True)
class DashboardRow:
    id: str
    created_at: str
    date: str
    client: str
    requester: str
    program: str
    status: str
    amount: float | None
    amount_display: str
    action: str


def _row(record: Record, currency_symbol: str) -> dict:
    quoted = record.is_quoted
    amount = None
    if quoted:
        amount = record.financials.final_amount if record.financials else 0.0
    requester = record.request.requester.name if record.request else ""
    return {
        "ID": record.id,
        "CREATED_AT": record.created_at,
        "CLIENT": record.display_client_name() or PLACEHOLDER,
        "REQUESTER": f"({requester})" if requester else "",
        "PROGRAM": record.display_program() or PLACEHOLDER,
        "STATUS": record.status.value,
        "AMOUNT": amount,
        "AMOUNT_DISPLAY": format_currency(amount, currency_symbol) if amount is not None else PLACEHOLDER,
        "ACTION": "Pricing" if record.status is RecordStatus.NEW else "Edit Pricing",
    }


def dashboard_frame(records: Sequence[Record], currency_symbol: str = "Rp") -> pd.DataFrame:
    """
    Build the dashboard table sorted by creation time, newest first.

    Records whose timestamp cannot be parsed sort last.  Ties keep collection
    order.
    """

    frame = pd.DataFrame([_row(record, currency_symbol) for record in records])
    if frame.empty:
        return pd.DataFrame(columns=COLUMNS)
    created = pd.to_datetime(frame["CREATED_AT"], errors="coerce", utc=True, format="ISO8601")
    frame["DATE"] = created.dt.strftime("%Y-%m-%d").fillna(PLACEHOLDER)
    frame["_CREATED"] = created
    frame = frame.sort_values("_CREATED", ascending=False, kind="stable", na_position="last")
    return frame.drop(columns="_CREATED").reset_index(drop=True)[COLUMNS]


def build_dashboard(records: Sequence[Record], currency_symbol: str = "Rp") -> List[DashboardRow]:
    frame = dashboard_frame(records, currency_symbol)
    rows: List[DashboardRow] = []
    for item in frame.to_dict("records"):
        amount = item["AMOUNT"]
        rows.append(
            DashboardRow(
                id=item["ID"],
                created_at=item["CREATED_AT"],
                date=item["DATE"],
                client=item["CLIENT"],
                requester=item["REQUESTER"],
                program=item["PROGRAM"],
                status=item["STATUS"],
                amount=None if amount is None or pd.isna(amount) else float(amount),
                amount_display=item["AMOUNT_DISPLAY"],
                action=item["ACTION"],
            )
        )
    return rows


def make_summary_text(records: Sequence[Record], currency_symbol: str = "Rp") -> str:
    frame = dashboard_frame(records, currency_symbol)
    if frame.empty:
        return "No requests or quotes yet.\n"
    quoted = frame.loc[frame["STATUS"] == RecordStatus.QUOTED.value]
    pending = len(frame) - len(quoted)
    total = float(pd.to_numeric(quoted["AMOUNT"], errors="coerce").fillna(0.0).sum())
    newest = frame.iloc[0]
    return (
        f"{len(frame)} record(s): {pending} awaiting pricing, {len(quoted)} quoted.\n"
        f"Total quoted value: {format_currency(total, currency_symbol)}.\n"
        f"Most recent: {newest['CLIENT']} ({newest['STATUS']}, {newest['DATE']}).\n"
    )


__all__ = ["DashboardRow", "dashboard_frame", "build_dashboard", "make_summary_text"]
