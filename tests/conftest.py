from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from quotedesk.config import Config, load_config
from quotedesk.lifecycle import RecordManager
from quotedesk.models import RequestPayload, TrainingParams, RequestDetails, Requester
from quotedesk.store import RecordStore


class StepClock:
    """Deterministic clock that advances by ``step`` on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(milliseconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def clock() -> StepClock:
    return StepClock(datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "corporate_data.json"


@pytest.fixture
def store(store_path: Path) -> RecordStore:
    return RecordStore(store_path)


@pytest.fixture
def manager(store: RecordStore, clock: StepClock) -> RecordManager:
    return RecordManager(store, clock=clock, rng=random.Random(7))


@pytest.fixture
def config(store_path: Path) -> Config:
    return load_config({"QUOTEDESK_STORE_PATH": str(store_path)})


@pytest.fixture
def request_factory() -> Callable[..., RequestPayload]:
    def _create(client_name: str = "Acme", **overrides) -> RequestPayload:
        return RequestPayload(
            client_name=client_name,
            order_type=overrides.get("order_type", "B2B"),
            source=overrides.get("source", "Email"),
            request_date=overrides.get("request_date", "2024-01-09"),
            requester=Requester(name=overrides.get("requester", "Jane"), email="jane@acme.test"),
            training=TrainingParams(
                participants=overrides.get("participants", "25"),
                sessions=overrides.get("sessions", "2"),
                mode=overrides.get("mode", "Online"),
                start_date=overrides.get("start_date", "2024-02-01"),
            ),
            details=RequestDetails(materials=overrides.get("materials", "Leadership Essentials")),
        )

    return _create
