from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional

from .constants import COPY_BUFSIZE, NAME_FIELD_LEN, NAME_PAD, RECORD_HEADER
from .errors import InvalidFilename, NameTooLong, TruncatedHeader, TruncatedPayload
from .pathutil import is_safe_name


def encode_name(name: str) -> bytes:
    """Encode a stored name into the fixed 13-byte name field.

    Raises NameTooLong rather than truncating, and InvalidFilename for names
    that could not be extracted back as a flat file.
    """
    if not is_safe_name(name):
        raise InvalidFilename("name cannot be stored in a HOG file", name=name)
    raw = name.encode("utf-8")
    if len(raw) > NAME_FIELD_LEN:
        raise NameTooLong(
            f"name is {len(raw)} bytes; HOG names are limited to {NAME_FIELD_LEN} bytes",
            name=name,
        )
    return raw.ljust(NAME_FIELD_LEN, NAME_PAD)


def decode_name(field: bytes) -> str:
    raw = field.split(NAME_PAD, 1)[0]
    try:
        name = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidFilename(f"invalid filename {raw!r} in record header")
    if not is_safe_name(name):
        raise InvalidFilename(f"invalid filename {name!r} in record header")
    return name


@dataclass(frozen=True)
class RecordHeader:
    name: str
    size: int

    def pack(self) -> bytes:
        return RECORD_HEADER.pack(encode_name(self.name), self.size)

    @classmethod
    def unpack(cls, raw: bytes) -> "RecordHeader":
        if len(raw) != RECORD_HEADER.size:
            raise TruncatedHeader(f"record header is {len(raw)} bytes, expected {RECORD_HEADER.size}")
        field, size = RECORD_HEADER.unpack(raw)
        return cls(name=decode_name(field), size=size)


def _read_upto(f: BinaryIO, n: int) -> bytes:
    # Short reads are retried until n bytes or EOF
    buf = bytearray()
    while len(buf) < n:
        chunk = f.read(n - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def read_header(f: BinaryIO) -> Optional[RecordHeader]:
    """Read the next record header, or None at a clean end of stream."""
    raw = _read_upto(f, RECORD_HEADER.size)
    if not raw:
        return None
    if len(raw) != RECORD_HEADER.size:
        raise TruncatedHeader(
            f"unexpected end of file: record header cut off after {len(raw)} of {RECORD_HEADER.size} bytes"
        )
    return RecordHeader.unpack(raw)


def read_payload(f: BinaryIO, hdr: RecordHeader) -> bytes:
    data = _read_upto(f, hdr.size)
    if len(data) != hdr.size:
        raise TruncatedPayload(
            f"unexpected end of file: expected {hdr.size} payload bytes, found {len(data)}",
            name=hdr.name,
        )
    return data


def write_record(f: BinaryIO, name: str, payload: bytes) -> int:
    hdr = RecordHeader(name=name, size=len(payload))
    f.write(hdr.pack())
    f.write(payload)
    return hdr.size


def copy_exact(src: BinaryIO, dst: BinaryIO, n: int, *, name: Optional[str] = None) -> int:
    """Copy exactly n bytes from src to dst.

    Running out of source bytes first raises TruncatedPayload; whatever was
    copied up to that point has already been written to dst.
    """
    copied = 0
    while copied < n:
        chunk = src.read(min(COPY_BUFSIZE, n - copied))
        if not chunk:
            raise TruncatedPayload(f"unexpected end of file: expected {n} bytes, found {copied}", name=name)
        dst.write(chunk)
        copied += len(chunk)
    return copied
