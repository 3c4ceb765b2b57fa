from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .constants import MAX_PAYLOAD_SIZE
from .errors import FileTooLarge, HogError, IoFailure
from .events import OUTCOME_ADDED, EntryEvent, EventCallback, emit
from .pathutil import stored_name
from .records import encode_name
from .writer import HogWriter


log = logging.getLogger(__name__)


@dataclass
class CreateSummary:
    files_added: int = 0
    bytes_added: int = 0


def _validate_inputs(inputs: List[str]) -> None:
    for fs_path in inputs:
        name = stored_name(fs_path)
        try:
            encode_name(name)
        except HogError as exc:
            exc.path = fs_path
            raise
        try:
            st = os.stat(fs_path)
        except OSError as exc:
            raise IoFailure("failed to open input file", exc, path=fs_path) from exc
        if st.st_size > MAX_PAYLOAD_SIZE:
            raise FileTooLarge(f"file of {st.st_size} bytes cannot be stored in a HOG file", path=fs_path)


def create_archive(
    out_path: str,
    inputs: Iterable[str],
    *,
    signature: bool = True,
    on_event: Optional[EventCallback] = None,
) -> CreateSummary:
    """Create a HOG file holding one record per input, in the order given.

    Every input is checked before anything is written; on any error nothing
    is left at out_path (an existing file there is left untouched).
    """
    out_path = os.fspath(out_path)
    inputs = [os.fspath(p) for p in inputs]
    _validate_inputs(inputs)
    summary = CreateSummary()
    with HogWriter(out_path, signature=signature) as writer:
        for fs_path in inputs:
            entry = writer.add_file(fs_path)
            summary.files_added += 1
            summary.bytes_added += entry.size
            emit(
                on_event,
                EntryEvent(
                    container=out_path,
                    name=entry.name,
                    size=entry.size,
                    outcome=OUTCOME_ADDED,
                    source_path=fs_path,
                ),
            )
        writer.finalize()
    log.debug("created %s: %d files, %d bytes", out_path, summary.files_added, summary.bytes_added)
    return summary
