from __future__ import annotations

import pandas as pd
import pytest

from quotedesk.dashboard import build_dashboard, dashboard_frame, make_summary_text
from quotedesk.models import CostLine, QuotePayload, Record, RecordKind, RecordStatus, RequestPayload, Requester
from quotedesk.pricing import calculate


def _request(record_id: str, created_at: str, client: str = "Acme") -> Record:
    return Record(
        id=record_id,
        kind=RecordKind.REQUEST,
        status=RecordStatus.NEW,
        created_at=created_at,
        request=RequestPayload(client_name=client, requester=Requester(name="Jane")),
    )


def test_rows_sorted_newest_first() -> None:
    records = [
        _request("old", "2024-01-01T08:00:00.000+00:00"),
        _request("new", "2024-03-01T08:00:00.000Z"),
        _request("mid", "2024-02-01T08:00:00.000+07:00"),
    ]
    assert [row.id for row in build_dashboard(records)] == ["new", "mid", "old"]


def test_unparseable_timestamps_sort_last() -> None:
    records = [_request("bad", "not a date"), _request("ok", "2024-01-01T00:00:00+00:00")]
    rows = build_dashboard(records)
    assert [row.id for row in rows] == ["ok", "bad"]
    assert rows[1].date == "-"


def test_quote_name_wins_over_request_name(manager, request_factory) -> None:
    request = manager.create_request(request_factory("Request Name"))
    lines = [CostLine("Trainer Fee", 2, 1_000_000)]
    manager.promote_or_create_quote(
        request.id,
        QuotePayload(client_name="Quote Name", program_name="Negotiation"),
        lines,
        calculate(lines, 50, ("PPN", 11), ("PPh", 0)),
    )
    row = build_dashboard(manager.records())[0]
    assert row.client == "Quote Name"
    assert row.program == "Negotiation"
    assert row.requester == "(Jane)"
    assert row.status == "Quoted"
    assert row.amount == pytest.approx(4_440_000)
    assert row.amount_display == "Rp 4.440.000"
    assert row.action == "Edit Pricing"


def test_new_requests_show_placeholder_amount() -> None:
    row = build_dashboard([_request("r1", "2024-01-01T00:00:00+00:00")])[0]
    assert row.client == "Acme"
    assert row.program == "-"
    assert row.amount is None
    assert row.amount_display == "-"
    assert row.action == "Pricing"
    assert row.date == "2024-01-01"


def test_projection_does_not_mutate_records() -> None:
    records = [_request("b", "2024-01-01T00:00:00+00:00"), _request("a", "2024-02-01T00:00:00+00:00")]
    snapshot = [r.to_dict() for r in records]
    build_dashboard(records)
    assert [r.to_dict() for r in records] == snapshot


def test_empty_frame_has_columns() -> None:
    frame = dashboard_frame([])
    assert isinstance(frame, pd.DataFrame)
    assert frame.empty
    assert "CLIENT" in frame.columns
    assert build_dashboard([]) == []


def test_summary_text(manager, request_factory) -> None:
    assert make_summary_text([]) == "No requests or quotes yet.\n"
    manager.create_request(request_factory("Pending Co"))
    quoted = manager.create_request(request_factory("Quoted Co"))
    lines = [CostLine("Trainer Fee", 1, 1_000_000)]
    manager.promote_or_create_quote(
        quoted.id,
        QuotePayload(client_name="Quoted Co"),
        lines,
        calculate(lines, 0, ("PPN", 10), ("PPh", 0)),
    )
    text = make_summary_text(manager.records())
    assert "2 record(s): 1 awaiting pricing, 1 quoted." in text
    assert "Rp 1.100.000" in text
    assert "Most recent: Quoted Co" in text
