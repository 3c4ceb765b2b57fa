from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from typing import BinaryIO, Iterable, List, Optional, Tuple

from .constants import HOG_SIGNATURE, MAX_PAYLOAD_SIZE
from .errors import FileTooLarge, HogError, IoFailure
from .pathutil import stored_name
from .reader import HogEntry
from .records import RecordHeader, copy_exact, write_record


log = logging.getLogger(__name__)


def _target_mode(path: str) -> int:
    """Permission bits the finished archive should carry.

    An existing target keeps its mode; a new one gets what open() would give.
    """
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_entries(f: BinaryIO, entries: Iterable[Tuple[str, bytes]]) -> int:
    """Write (name, payload) pairs to f as a bare record stream.

    Equal names are written as separate records. Returns the number of
    records written.
    """
    count = 0
    for name, payload in entries:
        if len(payload) > MAX_PAYLOAD_SIZE:
            raise FileTooLarge(f"payload of {len(payload)} bytes cannot be stored in a HOG file", name=name)
        write_record(f, name, payload)
        count += 1
    return count


def encode_entries(entries: Iterable[Tuple[str, bytes]]) -> bytes:
    buf = io.BytesIO()
    write_entries(buf, entries)
    return buf.getvalue()


class HogWriter:
    """Writer that only ever exposes complete HOG files.

    Records go to a temporary file beside out_path; finalize() renames it into
    place. Closing without finalize() discards everything written so far.
    """

    def __init__(self, out_path: str, *, signature: bool = True):
        self.out_path = os.fspath(out_path)
        self.signature = signature
        self.f: Optional[BinaryIO] = None
        self.temp_path: Optional[str] = None
        self.entries: List[HogEntry] = []
        self.finalized = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        out_dir = os.path.dirname(self.out_path) or "."
        try:
            fd, self.temp_path = tempfile.mkstemp(prefix=".hogdump-", suffix=".tmp", dir=out_dir)
        except OSError as exc:
            raise IoFailure("failed to open output HOG file", exc, path=self.out_path) from exc
        self.f = os.fdopen(fd, "wb")
        self.finalized = False
        log.debug("writing %s via %s", self.out_path, self.temp_path)
        if self.signature:
            try:
                self.f.write(HOG_SIGNATURE)
            except OSError as exc:
                self.close()
                raise IoFailure("writing HOG signature failed", exc, path=self.out_path) from exc

    def close(self):
        if self.f is not None:
            self.f.close()
            self.f = None
        if self.temp_path is not None and not self.finalized:
            try:
                os.unlink(self.temp_path)
            except FileNotFoundError:
                pass
            log.debug("discarded unfinished %s", self.temp_path)
        self.temp_path = None

    def add_file(self, fs_path: str) -> HogEntry:
        """Append fs_path as one record named after its final path segment."""
        if self.f is None:
            raise RuntimeError("HOG writer not open")
        fs_path = os.fspath(fs_path)
        name = stored_name(fs_path)
        try:
            with open(fs_path, "rb") as src:
                size = os.fstat(src.fileno()).st_size
                if size > MAX_PAYLOAD_SIZE:
                    raise FileTooLarge(f"file of {size} bytes cannot be stored in a HOG file", path=fs_path)
                hdr = RecordHeader(name=name, size=size)
                try:
                    self.f.write(hdr.pack())
                    copy_exact(src, self.f, size, name=name)
                except HogError as exc:
                    exc.path = fs_path
                    raise
        except OSError as exc:
            raise IoFailure("failed to append file to HOG", exc, path=fs_path) from exc
        entry = HogEntry(name=name, size=size, source_path=fs_path, origin=self.out_path)
        self.entries.append(entry)
        return entry

    def add_bytes(self, name: str, data: bytes) -> HogEntry:
        if self.f is None:
            raise RuntimeError("HOG writer not open")
        try:
            write_entries(self.f, [(name, data)])
        except OSError as exc:
            raise IoFailure("failed to append data to HOG", exc, path=self.out_path, name=name) from exc
        entry = HogEntry(name=name, size=len(data), origin=self.out_path)
        self.entries.append(entry)
        return entry

    def finalize(self):
        if self.f is None or self.temp_path is None:
            raise RuntimeError("HOG writer not open")
        try:
            self.f.flush()
            os.fsync(self.f.fileno())
            self.f.close()
            self.f = None
            os.chmod(self.temp_path, _target_mode(self.out_path))
            os.replace(self.temp_path, self.out_path)
        except OSError as exc:
            self.close()
            raise IoFailure("failed to finalize HOG file", exc, path=self.out_path) from exc
        self.finalized = True
        log.debug("finalized %s with %d records", self.out_path, len(self.entries))
