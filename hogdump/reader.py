from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from .constants import HOG_SIGNATURE, RECORD_HEADER
from .errors import HogError, InvalidSignature, IoFailure, TruncatedPayload
from .records import copy_exact, read_header, read_payload


log = logging.getLogger(__name__)


@dataclass
class HogEntry:
    name: str
    size: int
    offset: Optional[int] = None  # payload offset within the container file
    payload: Optional[bytes] = None
    source_path: Optional[str] = None
    origin: Optional[str] = None


def iter_entries(f: BinaryIO, *, origin: Optional[str] = None) -> Iterator[HogEntry]:
    """Decode a bare record stream from f, one entry at a time.

    Each entry carries its payload bytes. A cut-off header or payload raises
    after every fully readable entry has been yielded.
    """
    while True:
        try:
            hdr = read_header(f)
            if hdr is None:
                return
            payload = read_payload(f, hdr)
        except HogError as exc:
            if exc.path is None:
                exc.path = origin
            raise
        yield HogEntry(name=hdr.name, size=hdr.size, payload=payload, origin=origin)


def decode_entries(data: bytes) -> Iterator[HogEntry]:
    return iter_entries(io.BytesIO(data))


class HogReader:
    """Linear reader over a HOG file on disk.

    Usage:
        with HogReader("descent.hog") as r:
            for entry in r.records():
                if entry.name.endswith(".txb"):
                    r.copy_payload(entry, out)

    Payloads are not read unless asked for; records() seeks past them.
    """

    def __init__(self, path: str, *, signature: bool = True):
        self.path = os.fspath(path)
        self.signature = signature
        self.f: Optional[BinaryIO] = None
        self.file_size = 0
        self.data_start = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        try:
            self.f = open(self.path, "rb")
        except OSError as exc:
            raise IoFailure("failed to open HOG file", exc, path=self.path) from exc
        try:
            self.file_size = os.fstat(self.f.fileno()).st_size
            self.data_start = 0
            # A zero-length file is an empty archive in either mode
            if self.signature and self.file_size > 0:
                sig = self.f.read(len(HOG_SIGNATURE))
                if sig != HOG_SIGNATURE:
                    raise InvalidSignature("file did not have correct HOG signature", path=self.path)
                self.data_start = len(HOG_SIGNATURE)
        except OSError as exc:
            self.close()
            raise IoFailure("reading HOG signature failed", exc, path=self.path) from exc
        except HogError:
            self.close()
            raise
        log.debug("opened %s (%d bytes, records at %d)", self.path, self.file_size, self.data_start)

    def close(self):
        if self.f is not None:
            self.f.close()
            self.f = None

    def records(self) -> Iterator[HogEntry]:
        """Yield every record header in archive order, starting from the first.

        A record whose declared size runs past the end of the file raises
        TruncatedPayload instead of being yielded.
        """
        if self.f is None:
            raise RuntimeError("HOG file not open")
        pos = self.data_start
        while True:
            try:
                self.f.seek(pos)
                hdr = read_header(self.f)
            except OSError as exc:
                raise IoFailure("reading HOG record header failed", exc, path=self.path) from exc
            except HogError as exc:
                exc.path = self.path
                raise
            if hdr is None:
                return
            offset = pos + RECORD_HEADER.size
            available = self.file_size - offset
            if hdr.size > available:
                raise TruncatedPayload(
                    f"unexpected end of file: expected {hdr.size} payload bytes, found {available}",
                    path=self.path,
                    name=hdr.name,
                )
            log.debug("%s: record %r at %d (%d bytes)", self.path, hdr.name, offset, hdr.size)
            yield HogEntry(name=hdr.name, size=hdr.size, offset=offset, origin=self.path)
            pos = offset + hdr.size

    def copy_payload(self, entry: HogEntry, out: BinaryIO) -> int:
        if self.f is None:
            raise RuntimeError("HOG file not open")
        if entry.offset is None:
            raise ValueError("entry has no payload offset")
        self.f.seek(entry.offset)
        try:
            return copy_exact(self.f, out, entry.size, name=entry.name)
        except HogError as exc:
            exc.path = self.path
            raise

    def read_payload(self, entry: HogEntry) -> bytes:
        buf = io.BytesIO()
        self.copy_payload(entry, buf)
        return buf.getvalue()
