from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .events import OUTCOME_LISTED, EntryEvent, EventCallback, emit
from .reader import HogReader


@dataclass
class InfoSummary:
    num_files: int = 0
    num_bytes: int = 0


def archive_info(path: str, *, signature: bool = True, on_event: Optional[EventCallback] = None) -> InfoSummary:
    """Count the records of a HOG file without extracting anything."""
    path = os.fspath(path)
    summary = InfoSummary()
    with HogReader(path, signature=signature) as reader:
        for entry in reader.records():
            summary.num_files += 1
            summary.num_bytes += entry.size
            emit(on_event, EntryEvent(container=path, name=entry.name, size=entry.size, outcome=OUTCOME_LISTED))
    return summary
