import struct


# Magic
HOG_SIGNATURE = b"DHF"  # 3 bytes, present only in signature mode

# Record header (fixed 17 bytes)
# struct: <13s I
#  - name[13]  NUL padded, no terminator when all 13 bytes are used
#  - size u32  payload length
RECORD_HEADER = struct.Struct("<13sI")

NAME_FIELD_LEN = 13
NAME_PAD = b"\x00"
MAX_PAYLOAD_SIZE = 0xFFFFFFFF

COPY_BUFSIZE = 64 * 1024
