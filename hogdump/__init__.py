"""
hogdump: read and write Descent HOG files.

A HOG file is the 3-byte signature "DHF" followed by a flat run of records:

- 17-byte header: NUL-padded 13-byte name, little-endian u32 payload size
- the payload, stored raw (no compression, no checksums, no padding)

The package provides:

- Shared header codec (hogdump.records) used by both directions
- Lazy linear reader (hogdump.reader) and atomic writer (hogdump.writer)
- Extraction with skip/overwrite policy (hogdump.extract), creation
  (hogdump.create) and listing (hogdump.info)
- The hogdump command line tool (hogdump.cli)

Bare record streams without the signature are handled by passing
signature=False (or --raw on the command line).
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "records",
    "reader",
    "writer",
    "extract",
    "create",
    "info",
]
