"""Run identifier and synthetic id helpers."""

from __future__ import annotations

import threading
from datetime import datetime, timezone


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


class IdSequence:
    """Strictly increasing integers for documents that lack an upstream id.

    One instance is shared by every stage that needs fallback ids during a run;
    ``next`` is safe to call from several threads.
    """

    def __init__(self, start: int = 0) -> None:
        self.value = start
        self.lock = threading.Lock()

    def next(self) -> int:
        with self.lock:
            self.value += 1
            return self.value

    def __iter__(self) -> "IdSequence":
        return self

    def __next__(self) -> int:
        return self.next()
