from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Iterable, List, Optional, Tuple

from .errors import DestinationExists, HogError, IoFailure
from .events import OUTCOME_SKIPPED, OUTCOME_WROTE, EntryEvent, EventCallback, emit
from .reader import HogEntry, HogReader


log = logging.getLogger(__name__)


@dataclass
class ExtractSummary:
    files_processed: int = 0
    files_extracted: int = 0
    bytes_extracted: int = 0
    files_skipped: int = 0
    failures: List[Tuple[str, HogError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _open_destination(dst: str, overwrite: bool, name: str) -> BinaryIO:
    """Open an extraction target, creating or truncating it.

    With overwrite disabled an existing target raises DestinationExists.
    """
    try:
        if overwrite:
            return open(dst, "wb")
        return open(dst, "xb")
    except FileExistsError:
        raise DestinationExists("skipping (already exists)", path=dst, name=name)
    except OSError as exc:
        raise IoFailure("failed to open output file", exc, path=dst, name=name) from exc


def _extract_entry(reader: HogReader, entry: HogEntry, dst: str, overwrite: bool) -> int:
    out = _open_destination(dst, overwrite, entry.name)
    try:
        with out:
            return reader.copy_payload(entry, out)
    except (HogError, OSError) as exc:
        # Never leave a half-written file behind
        try:
            os.unlink(dst)
        except OSError:
            log.warning("could not remove partial file %s", dst)
        if isinstance(exc, OSError):
            raise IoFailure("failed to save file from HOG to disk", exc, path=reader.path, name=entry.name) from exc
        raise


def extract_archive(
    path: str,
    *,
    outdir: str = ".",
    overwrite: bool = False,
    signature: bool = True,
    on_event: Optional[EventCallback] = None,
    summary: Optional[ExtractSummary] = None,
) -> ExtractSummary:
    """Extract every record of one HOG file into outdir.

    outdir must already exist; records are written flat, one file per name.
    Counters accumulate into summary when given. Corruption or I/O failure
    raises after the records before it have been handled.
    """
    summary = summary if summary is not None else ExtractSummary()
    path = os.fspath(path)
    with HogReader(path, signature=signature) as reader:
        for entry in reader.records():
            summary.files_processed += 1
            dst = os.path.join(outdir, entry.name)
            try:
                written = _extract_entry(reader, entry, dst, overwrite)
            except DestinationExists:
                summary.files_skipped += 1
                emit(on_event, EntryEvent(container=path, name=entry.name, size=entry.size, outcome=OUTCOME_SKIPPED))
                continue
            summary.files_extracted += 1
            summary.bytes_extracted += written
            emit(on_event, EntryEvent(container=path, name=entry.name, size=written, outcome=OUTCOME_WROTE))
    return summary


def extract_archives(
    paths: Iterable[str],
    *,
    outdir: str = ".",
    overwrite: bool = False,
    signature: bool = True,
    on_event: Optional[EventCallback] = None,
    on_failure: Optional[Callable[[str, HogError], None]] = None,
) -> ExtractSummary:
    """Extract several HOG files in order into one combined summary.

    A failing container is recorded in summary.failures and processing moves
    on to the next one. on_failure, when given, is called with
    (path, error) as soon as a container fails.
    """
    summary = ExtractSummary()
    for path in paths:
        path = os.fspath(path)
        try:
            extract_archive(
                path,
                outdir=outdir,
                overwrite=overwrite,
                signature=signature,
                on_event=on_event,
                summary=summary,
            )
        except HogError as exc:
            log.debug("extraction of %s stopped: %s", path, exc)
            summary.failures.append((path, exc))
            if on_failure is not None:
                on_failure(path, exc)
    return summary
