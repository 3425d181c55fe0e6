"""
Wire Codec
Tagged, versioned binary framing for values that cross a trust boundary.

Layout:
    magic (4 bytes) || version (1 byte) || small header fields (2 bytes each)
    || N x [4-byte big-endian length || unsigned big-endian integer]

Decoding is strict: wrong magic, unknown version, truncation or trailing
bytes all fail. Range checks on the decoded values are left to the caller,
which knows what the fields mean.
"""

LENGTH_HEADER_SIZE = 4
SMALL_FIELD_SIZE = 2


class WireFormatError(ValueError):
    """Raised when a framed byte string cannot be decoded."""


def int_to_bytes(value: int) -> bytes:
    if value < 0:
        raise ValueError("only non-negative integers can be framed")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def encode(magic: bytes, version: int, header: list[int], fields: list[int]) -> bytes:
    """
    Frame a record.

    Args:
        magic: Fixed tag identifying the record type.
        version: Format version, 0-255.
        header: Small unsigned fields, each stored in 2 bytes.
        fields: Arbitrary-size unsigned integers, each length-prefixed.

    Returns:
        The encoded bytes.
    """
    out = bytearray(magic)
    out += version.to_bytes(1, "big")
    for value in header:
        out += value.to_bytes(SMALL_FIELD_SIZE, "big")
    for value in fields:
        raw = int_to_bytes(value)
        out += len(raw).to_bytes(LENGTH_HEADER_SIZE, "big")
        out += raw
    return bytes(out)


def decode(
    data: bytes, magic: bytes, version: int, header_count: int, field_count: int
) -> tuple[list[int], list[int]]:
    """
    Inverse of encode().

    Returns:
        (header values, field values).

    Raises:
        WireFormatError: On any structural problem.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise WireFormatError("expected bytes")
    data = bytes(data)

    if data[:len(magic)] != magic:
        raise WireFormatError("bad magic")
    pos = len(magic)

    if len(data) < pos + 1:
        raise WireFormatError("truncated before version")
    if data[pos] != version:
        raise WireFormatError(f"unsupported version {data[pos]}")
    pos += 1

    header = []
    for _ in range(header_count):
        if len(data) < pos + SMALL_FIELD_SIZE:
            raise WireFormatError("truncated header")
        header.append(int.from_bytes(data[pos:pos + SMALL_FIELD_SIZE], "big"))
        pos += SMALL_FIELD_SIZE

    fields = []
    for _ in range(field_count):
        if len(data) < pos + LENGTH_HEADER_SIZE:
            raise WireFormatError("truncated length header")
        length = int.from_bytes(data[pos:pos + LENGTH_HEADER_SIZE], "big")
        pos += LENGTH_HEADER_SIZE
        if length == 0 or len(data) < pos + length:
            raise WireFormatError("truncated field")
        fields.append(int.from_bytes(data[pos:pos + length], "big"))
        pos += length

    if pos != len(data):
        raise WireFormatError(f"{len(data) - pos} trailing bytes")

    return header, fields
