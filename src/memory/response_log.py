"""Append-only log of (query, response) pairs shown in the panel."""

import itertools
import threading
from dataclasses import dataclass, field
from enum import Enum


class ResponseKind(Enum):
    TEXT = "text"
    # Reserved, no behavior yet
    IMAGE = "image"
    VOICE = "voice"


_order = itertools.count()


@dataclass(frozen=True)
class ResponseRecord:
    """One logged query and what came back for it."""
    original_query: str
    text_content: str
    kind: ResponseKind = ResponseKind.TEXT
    is_error: bool = False
    created_order: int = field(default_factory=lambda: next(_order))


class ResponseLog:
    """Ordered, unbounded record of responses.

    append() and clear() are the only mutations. snapshot() hands out an
    immutable tuple, so a snapshot held across a clear() keeps its contents.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: list[ResponseRecord] = []

    def append(self, record: ResponseRecord) -> None:
        if not isinstance(record, ResponseRecord):
            raise TypeError(f"expected ResponseRecord, got {type(record).__name__}")
        if not isinstance(record.original_query, str) or not isinstance(record.text_content, str):
            raise TypeError("ResponseRecord query and text must be strings")
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> tuple[ResponseRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def newest_first(self) -> list[ResponseRecord]:
        """Snapshot in display order."""
        return list(reversed(self.snapshot()))

    def clear(self) -> None:
        with self._lock:
            self._records = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
