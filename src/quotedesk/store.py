"""JSON-file persistence for the whole record collection."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .errors import StorageUnavailableError
from .models import Record

LOGGER = logging.getLogger(__name__)


@dataclass
class RecordStore:
    """Loads and saves every record as one JSON document.

    ``save`` always replaces the stored collection.  It writes a sibling
    ``.tmp`` file and swaps it in, so a failed write leaves the previous
    document intact.  Unreadable JSON or bytes load as an empty collection;
    I/O failures raise :class:`StorageUnavailableError`.
    """

    path: Path

    def load(self) -> List[Record]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                content = f.read()
        except UnicodeDecodeError as exc:
            LOGGER.warning("Record store %s is not valid UTF-8 (%s); treating it as empty", self.path, exc)
            return []
        except OSError as exc:
            raise StorageUnavailableError(f"Unable to read records from {self.path}: {exc}") from exc

        if not content.strip():
            return []
        try:
            raw = json.loads(content)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Record store %s is corrupt (%s); treating it as empty", self.path, exc)
            return []
        if not isinstance(raw, list):
            LOGGER.warning("Record store %s does not hold a list; treating it as empty", self.path)
            return []

        records: List[Record] = []
        for position, entry in enumerate(raw):
            if not isinstance(entry, dict):
                LOGGER.warning("Skipping non-object entry %d in %s", position, self.path)
                continue
            try:
                records.append(Record.from_dict(entry))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                LOGGER.warning("Skipping unreadable entry %d in %s: %s", position, self.path, exc)
        return records

    def save(self, records: Sequence[Record]) -> None:
        data = [record.to_dict() for record in records]
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StorageUnavailableError(f"Unable to write records to {self.path}: {exc}") from exc
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        LOGGER.debug("Saved %d record(s) to %s", len(data), self.path)


__all__ = ["RecordStore"]
