from __future__ import annotations

import io
import unittest

from hogdump.constants import RECORD_HEADER
from hogdump.errors import InvalidFilename, NameTooLong, TruncatedHeader, TruncatedPayload
from hogdump.pathutil import is_safe_name, stored_name
from hogdump.records import RecordHeader, copy_exact, decode_name, encode_name, read_header


class _TrickleReader(io.RawIOBase):
    """Returns at most one byte per read() call."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, n=-1):
        return self._buf.read(1 if n != 0 else 0)


class HeaderCodecTests(unittest.TestCase):
    def test_layout_is_nul_padded_name_then_le_size(self):
        raw = RecordHeader(name="a.txt", size=5).pack()
        self.assertEqual(RECORD_HEADER.size, 17)
        self.assertEqual(raw, b"a.txt" + b"\x00" * 8 + b"\x05\x00\x00\x00")

    def test_unpack_inverts_pack(self):
        for hdr in (
            RecordHeader("a", 0),
            RecordHeader("DESCENT.PIG", 0xFFFFFFFF),
            RecordHeader("abcdefghi.txt", 1234),
        ):
            self.assertEqual(RecordHeader.unpack(hdr.pack()), hdr)

    def test_thirteen_byte_name_uses_whole_field(self):
        self.assertEqual(encode_name("abcdefghi.txt"), b"abcdefghi.txt")
        self.assertEqual(decode_name(b"abcdefghi.txt"), "abcdefghi.txt")

    def test_fourteen_byte_name_rejected(self):
        with self.assertRaises(NameTooLong) as ctx:
            encode_name("abcdefghij.txt")
        self.assertEqual(ctx.exception.name, "abcdefghij.txt")

    def test_multibyte_names_are_measured_in_bytes(self):
        # 7 characters, 14 bytes
        with self.assertRaises(NameTooLong):
            encode_name("\u00e9" * 7)
        self.assertEqual(decode_name(encode_name("\u00e9" * 6)), "\u00e9" * 6)

    def test_decode_stops_at_first_nul(self):
        self.assertEqual(decode_name(b"ab\x00cdefghijkl"), "ab")

    def test_unsafe_names_rejected_both_ways(self):
        for bad in ("", ".", "..", "a/b", "a\\b"):
            with self.assertRaises(InvalidFilename):
                encode_name(bad)
        with self.assertRaises(InvalidFilename):
            decode_name(b"../etc\x00\x00\x00\x00\x00\x00")
        with self.assertRaises(InvalidFilename):
            decode_name(b"\x00" * 13)
        with self.assertRaises(InvalidFilename):
            decode_name(b"\xff\xfe" + b"\x00" * 11)


class ReadHeaderTests(unittest.TestCase):
    def test_clean_eof_returns_none(self):
        self.assertIsNone(read_header(io.BytesIO(b"")))

    def test_partial_header_is_truncation(self):
        raw = RecordHeader("a.txt", 5).pack()
        for cut in range(1, len(raw)):
            with self.assertRaises(TruncatedHeader):
                read_header(io.BytesIO(raw[:cut]))

    def test_short_reads_are_retried(self):
        raw = RecordHeader("LEVEL01.RDL", 99).pack()
        self.assertEqual(read_header(_TrickleReader(raw)), RecordHeader("LEVEL01.RDL", 99))


class CopyExactTests(unittest.TestCase):
    def test_copies_exactly_n(self):
        out = io.BytesIO()
        src = io.BytesIO(b"0123456789")
        self.assertEqual(copy_exact(src, out, 4), 4)
        self.assertEqual(out.getvalue(), b"0123")
        self.assertEqual(src.read(), b"456789")

    def test_short_source_raises(self):
        with self.assertRaises(TruncatedPayload):
            copy_exact(io.BytesIO(b"abc"), io.BytesIO(), 4, name="x.bin")


class PathUtilTests(unittest.TestCase):
    def test_stored_name_is_final_segment(self):
        self.assertEqual(stored_name("x.bin"), "x.bin")
        self.assertEqual(stored_name("data/levels/x.bin"), "x.bin")
        self.assertEqual(stored_name("C:\\games\\descent\\x.bin"), "x.bin")

    def test_stored_name_without_base_name(self):
        for bad in ("", "/", "..", "dir/.."):
            with self.assertRaises(InvalidFilename):
                stored_name(bad)

    def test_is_safe_name(self):
        self.assertTrue(is_safe_name("GAME01.PCX"))
        self.assertFalse(is_safe_name("a\x00b"))


if __name__ == "__main__":
    unittest.main()
