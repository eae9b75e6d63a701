"""Create, promote and delete records against the persisted collection.

Every operation loads the full collection, changes it, and writes it back in
one save.  Nothing is cached between calls and there is no coordination
between concurrent writers.
"""
from __future__ import annotations

import logging
import random
import string
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Collection, Iterable, List, Optional, Sequence

from .errors import NotFoundError, ValidationError
from .models import (
    CostLine,
    Financials,
    QuotePayload,
    Record,
    RecordKind,
    RecordStatus,
    RequestPayload,
)
from .store import RecordStore

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 5


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(now: datetime) -> str:
    return now.isoformat(timespec="milliseconds")


def timestamp_id(now: datetime) -> str:
    """Millisecond epoch id, e.g. ``"1704873600000"``."""
    return str(int(now.timestamp() * 1000))


def suffixed_id(now: datetime, rng: random.Random) -> str:
    """Time-based id plus a short random suffix, unique within a batch."""
    suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{timestamp_id(now)}{suffix}"


def unique_id(now: datetime, rng: random.Random, taken: Collection[str], *, always_suffix: bool = False) -> str:
    candidate = suffixed_id(now, rng) if always_suffix else timestamp_id(now)
    while candidate in taken:
        candidate = suffixed_id(now, rng)
    return candidate


def _find(records: Sequence[Record], record_id: str) -> Optional[Record]:
    return next((record for record in records if record.id == record_id), None)


class RecordManager:
    """Upserts requests and quotes by identifier."""

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.clock = clock or utc_now
        self.rng = rng or random.Random()

    def records(self) -> List[Record]:
        return self.store.load()

    def get(self, record_id: str) -> Record:
        record = _find(self.store.load(), record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def create_request(self, payload: RequestPayload) -> Record:
        if not payload.client_name.strip():
            raise ValidationError("Client Name is required.")

        now = self.clock()
        if not payload.request_date:
            payload = replace(payload, request_date=now.date().isoformat())

        records = self.store.load()
        record = Record(
            id=unique_id(now, self.rng, {r.id for r in records}),
            kind=RecordKind.REQUEST,
            status=RecordStatus.NEW,
            created_at=timestamp(now),
            request=payload,
        )
        records.append(record)
        self.store.save(records)
        LOGGER.info("Created request %s for %s", record.id, payload.client_name)
        return record

    def add_requests(self, drafts: Iterable[Record]) -> int:
        """Append already-built request records in a single save; returns how many were added."""
        records = self.store.load()
        taken = {r.id for r in records}
        added = 0
        for draft in drafts:
            if draft.id in taken:
                draft = replace(draft, id=unique_id(self.clock(), self.rng, taken, always_suffix=True))
            taken.add(draft.id)
            records.append(draft)
            added += 1
        self.store.save(records)
        LOGGER.info("Added %d request(s) to the collection", added)
        return added

    def promote_or_create_quote(
        self,
        target_id: Optional[str],
        quote: QuotePayload,
        cost_data: Sequence[CostLine],
        financials: Financials,
    ) -> Record:
        """
        Attach pricing to ``target_id`` or create a new quote.

        An existing record is upgraded in place, keeping its id, creation time
        and request payload.  A ``target_id`` that no longer exists is
        recreated under the same id.  With no ``target_id`` a fresh quote is
        created.
        """

        now = self.clock()
        records = self.store.load()
        record = _find(records, target_id) if target_id else None

        if record is not None:
            LOGGER.info("Promoting %s to a quote", record.id)
        elif target_id:
            LOGGER.warning("Record %s no longer exists; recreating it as a new quote", target_id)
            record = Record(
                id=target_id,
                kind=RecordKind.QUOTE,
                status=RecordStatus.QUOTED,
                created_at=timestamp(now),
            )
            records.append(record)
        else:
            record = Record(
                id=unique_id(now, self.rng, {r.id for r in records}),
                kind=RecordKind.QUOTE,
                status=RecordStatus.QUOTED,
                created_at=timestamp(now),
            )
            records.append(record)
            LOGGER.info("Created standalone quote %s", record.id)

        record.attach_pricing(quote, list(cost_data), financials)
        self.store.save(records)
        return record

    def delete_record(self, record_id: str, confirm: Callable[[str], bool]) -> bool:
        """
        Remove ``record_id`` after ``confirm`` approves it.

        Returns ``True`` when a record was removed.  A declined confirmation
        writes nothing; an unknown id still rewrites the unchanged collection.
        """

        if not confirm(record_id):
            LOGGER.debug("Deletion of %s cancelled", record_id)
            return False
        records = self.store.load()
        remaining = [record for record in records if record.id != record_id]
        self.store.save(remaining)
        removed = len(remaining) != len(records)
        if removed:
            LOGGER.info("Deleted record %s", record_id)
        return removed


__all__ = [
    "RecordManager",
    "utc_now",
    "timestamp",
    "timestamp_id",
    "suffixed_id",
    "unique_id",
]
