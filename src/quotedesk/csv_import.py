"""
Bulk intake of training requests from a plain comma-separated file.

The format is positional and deliberately naive: one row per line, columns
split on every comma, no quoting or escaping.  A field containing a comma
cannot be represented.  Expected columns::

    client name, requester name, materials/details, start date, participants

The first line is always a header and is never imported.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

from .lifecycle import Clock, RecordManager, suffixed_id, timestamp, utc_now
from .models import (
    Record,
    RecordKind,
    RecordStatus,
    RequestDetails,
    RequestPayload,
    Requester,
    TrainingParams,
)

LOGGER = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Unknown Client"
DEFAULT_ORDER_TYPE = "B2B"
DEFAULT_MODE = "Offline"
DEFAULT_PARTICIPANTS = "20"
DEFAULT_SESSIONS = "1"
IMPORTED_NOTE = "Imported via CSV"
MIN_COLUMNS = 2


def split_row(line: str) -> List[str]:
    """Split a line on commas, trim each cell, and drop trailing blank cells."""
    cells = [cell.strip() for cell in line.split(",")]
    while cells and not cells[-1]:
        cells.pop()
    return cells


def _cell(cells: List[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def parse_requests(
    text: str,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> List[Record]:
    """Turn CSV text into draft request records; short rows are skipped."""

    clock = clock or utc_now
    rng = rng or random.Random()
    drafts: List[Record] = []
    seen: set[str] = set()

    for index, line in enumerate(text.split("\n")):
        if index == 0:
            continue
        cells = split_row(line)
        if len(cells) < MIN_COLUMNS:
            LOGGER.debug("CSV row %d skipped: %d column(s)", index, len(cells))
            continue

        now = clock()
        record_id = suffixed_id(now, rng)
        while record_id in seen:
            record_id = suffixed_id(now, rng)
        seen.add(record_id)

        payload = RequestPayload(
            client_name=_cell(cells, 0) or UNKNOWN_CLIENT,
            order_type=DEFAULT_ORDER_TYPE,
            request_date=now.date().isoformat(),
            requester=Requester(name=_cell(cells, 1)),
            training=TrainingParams(
                participants=_cell(cells, 4) or DEFAULT_PARTICIPANTS,
                sessions=DEFAULT_SESSIONS,
                mode=DEFAULT_MODE,
                start_date=_cell(cells, 3),
            ),
            details=RequestDetails(materials=_cell(cells, 2), notes=IMPORTED_NOTE),
        )
        drafts.append(
            Record(
                id=record_id,
                kind=RecordKind.REQUEST,
                status=RecordStatus.NEW,
                created_at=timestamp(now),
                request=payload,
            )
        )
    return drafts


def ingest_csv(text: str, manager: RecordManager) -> int:
    """Import every acceptable row and return the number of requests added."""
    drafts = parse_requests(text, clock=manager.clock, rng=manager.rng)
    added = manager.add_requests(drafts)
    LOGGER.info("Imported %d request(s) from CSV", added)
    return added


def import_csv_file(path: Path, manager: RecordManager) -> int:
    """Read ``path`` (UTF-8, BOM tolerated) and ingest it."""
    with Path(path).open("r", encoding="utf-8-sig", newline="") as handle:
        text = handle.read()
    return ingest_csv(text, manager)


__all__ = ["parse_requests", "ingest_csv", "import_csv_file", "split_row"]
