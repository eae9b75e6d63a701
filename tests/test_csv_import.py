from __future__ import annotations

import random
from datetime import datetime, timezone
from pathlib import Path

from quotedesk.csv_import import import_csv_file, ingest_csv, parse_requests, split_row
from quotedesk.lifecycle import RecordManager
from quotedesk.models import RecordKind, RecordStatus


def test_reference_scenario(manager: RecordManager) -> None:
    added = ingest_csv("Header\nAcme,Jane,Leadership,2024-01-10,30\n,\n", manager)
    assert added == 1
    records = manager.records()
    assert len(records) == 1
    request = records[0].request
    assert request is not None
    assert request.client_name == "Acme"
    assert request.requester.name == "Jane"
    assert request.details.materials == "Leadership"
    assert request.training.start_date == "2024-01-10"
    assert request.training.participants == "30"


def test_header_is_never_imported(manager: RecordManager) -> None:
    added = ingest_csv("Acme,Jane,Leadership,2024-01-10,30\nGlobex,Sam", manager)
    assert added == 1
    assert [r.request.client_name for r in manager.records()] == ["Globex"]


def test_short_rows_are_skipped_and_not_counted(manager: RecordManager) -> None:
    text = "client,requester\nA,1\nonly-one\n\nB,2\n  ,  \nC,3,,,\n"
    assert ingest_csv(text, manager) == 3
    assert len(manager.records()) == 3


def test_csv_rows_get_coarse_defaults() -> None:
    clock = lambda: datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)  # noqa: E731
    drafts = parse_requests("h\n,Bob", clock=clock, rng=random.Random(1))
    assert len(drafts) == 1
    record = drafts[0]
    assert record.kind is RecordKind.REQUEST
    assert record.status is RecordStatus.NEW
    request = record.request
    assert request.client_name == "Unknown Client"
    assert request.order_type == "B2B"
    assert request.request_date == "2024-03-01"
    assert request.training.participants == "20"
    assert request.training.sessions == "1"
    assert request.training.mode == "Offline"
    assert request.details.notes == "Imported via CSV"


def test_ids_unique_within_one_millisecond() -> None:
    frozen = datetime(2024, 3, 1, tzinfo=timezone.utc)
    text = "h\n" + "\n".join(f"Client {i},Req" for i in range(200))
    drafts = parse_requests(text, clock=lambda: frozen, rng=random.Random(3))
    ids = [d.id for d in drafts]
    assert len(ids) == 200
    assert len(set(ids)) == 200
    assert all(record_id.startswith("1709251200000") for record_id in ids)


def test_windows_line_endings(manager: RecordManager) -> None:
    assert ingest_csv("h\r\nAcme,Jane\r\nGlobex,Sam\r\n", manager) == 2
    assert {r.request.client_name for r in manager.records()} == {"Acme", "Globex"}


def test_quoted_commas_are_not_supported() -> None:
    drafts = parse_requests('h\n"Acme, Inc",Jane')
    assert drafts[0].request.client_name == '"Acme'
    assert drafts[0].request.requester.name == 'Inc"'


def test_import_appends_to_existing_collection(manager: RecordManager, request_factory) -> None:
    manager.create_request(request_factory("Existing"))
    assert ingest_csv("h\nA,1\nB,2", manager) == 2
    assert len(manager.records()) == 3


def test_import_csv_file_reads_utf8_with_bom(tmp_path: Path, manager: RecordManager) -> None:
    path = tmp_path / "requests.csv"
    path.write_text("\ufeffClient,Requester\nPT Maju,Dewi,Negotiation,2024-05-01,12\n", encoding="utf-8")
    assert import_csv_file(path, manager) == 1
    request = manager.records()[0].request
    assert request.client_name == "PT Maju"
    assert request.training.participants == "12"


def test_split_row_drops_trailing_blanks() -> None:
    assert split_row(" a , b ,, ") == ["a", "b"]
    assert split_row(",") == []
    assert split_row(",x") == ["", "x"]
