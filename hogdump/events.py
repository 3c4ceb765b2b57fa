from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


# Per-entry outcomes
OUTCOME_WROTE = "wrote"
OUTCOME_SKIPPED = "skipped"
OUTCOME_ADDED = "added"
OUTCOME_LISTED = "listed"


@dataclass(frozen=True)
class EntryEvent:
    container: str
    name: str
    size: int
    outcome: str
    source_path: Optional[str] = None


EventCallback = Callable[[EntryEvent], None]


def emit(on_event: Optional[EventCallback], event: EntryEvent) -> None:
    if on_event is not None:
        on_event(event)
