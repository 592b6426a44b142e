"""
EBU STL field primitives.

The GSI block stores every value as ASCII text (digits, hex, dates,
timecodes, code-page strings) while TTI blocks store little-endian binary
integers and one byte per timecode component. Both conventions live here,
side by side, and are never mixed.
"""

from datetime import date
from typing import Iterable, Optional

from ebustl_codec.errors import (
    DecodeFieldError,
    EncodeFieldError,
    ErrorKind,
    FieldWidthError,
)
from ebustl_codec.models import EBUSTLControlCode, TEXT_FIELD_SIZE, Timecode
from ebustl_codec.text_encoding import get_code_page_codec


SPACE = 0x20


def _check_width(b: bytes, allowed: Iterable[int], what: str) -> None:
    allowed = tuple(allowed)
    if len(b) not in allowed:
        raise FieldWidthError(
            f"{what} must be {' or '.join(str(w) for w in allowed)} bytes, got {len(b)}"
        )


def cut_pad(b: bytes, width: int, pad: int) -> bytes:
    """Truncate or right-pad b with the pad byte to exactly width bytes."""
    return b[:width].ljust(width, bytes([pad]))


# ------------------------------------------------------------------ #
# GSI: ASCII integers
# ------------------------------------------------------------------ #
def _parse_digits(b: bytes, empty: ErrorKind, invalid: ErrorKind) -> int:
    s = b.strip(b" ")
    if not s:
        raise DecodeFieldError(empty, raw=b)
    # bytes.isdigit() only accepts ASCII 0-9
    if not s.isdigit():
        raise DecodeFieldError(invalid, raw=b)
    return int(s)


def _format_digits(value: Optional[int], width: int) -> bytes:
    if value is None or value < 0:
        return b" " * width
    if width == 0:
        return b""
    digits = str(value).rjust(width, "0")
    # Values too wide keep their low-order digits
    return digits[len(digits) - width :].encode("ascii")


def decode_gsi_int(b: bytes) -> int:
    """
    Space-padded ASCII decimal.

    Raises DecodeFieldError with EMPTY_GSI_INT_VALUE when b is all spaces
    (there is no 0 fallback) and INVALID_GSI_INT_VALUE on a non-digit.
    parse_gsi records the error as a warning and leaves the field None
    (or INVALID for the CPN).
    """
    return _parse_digits(
        b, ErrorKind.EMPTY_GSI_INT_VALUE, ErrorKind.INVALID_GSI_INT_VALUE
    )


def encode_gsi_int(value: Optional[int], width: int) -> bytes:
    """
    Zero-padded decimal over width bytes. None or a negative value means
    "absent" and encodes as spaces.
    """
    return _format_digits(value, width)


def decode_gsi_byte(b: bytes) -> int:
    """Decimal value of a 1 or 2 byte field."""
    if len(b) > 2:
        raise FieldWidthError(f"GSI byte field must be at most 2 bytes, got {len(b)}")
    return _parse_digits(
        b, ErrorKind.EMPTY_GSI_BYTE_VALUE, ErrorKind.INVALID_GSI_BYTE_VALUE
    )


def encode_gsi_byte(value: Optional[int], width: int) -> bytes:
    if not 1 <= width <= 2:
        raise FieldWidthError(f"GSI byte field must be 1 or 2 bytes, got {width}")
    return _format_digits(value, width)


# ------------------------------------------------------------------ #
# GSI: hexadecimal
# ------------------------------------------------------------------ #
def decode_gsi_hex(b: bytes) -> int:
    _check_width(b, (2,), "GSI hex field")
    s = b.strip(b" ")
    if not s:
        raise DecodeFieldError(ErrorKind.EMPTY_GSI_HEX_VALUE, raw=b)
    if any(c not in b"0123456789ABCDEFabcdef" for c in s):
        raise DecodeFieldError(ErrorKind.INVALID_GSI_HEX_VALUE, raw=b)
    return int(s, 16)


def encode_gsi_hex(value: Optional[int]) -> bytes:
    if value is None or value < 0:
        return b"  "
    return f"{value & 0xFF:02X}".encode("ascii")


# ------------------------------------------------------------------ #
# GSI: dates (YYMMDD)
# ------------------------------------------------------------------ #
# "000101" is what an absent date encodes to
ABSENT_GSI_DATE = b"000101"


def decode_gsi_date(b: bytes) -> Optional[date]:
    """
    Parse a YYMMDD date (year + 2000). Returns None for the absent date.
    """
    _check_width(b, (6,), "GSI date field")
    parts = []
    for chunk in (b[0:2], b[2:4], b[4:6]):
        try:
            parts.append(decode_gsi_int(chunk))
        except DecodeFieldError as e:
            kind = (
                ErrorKind.EMPTY_GSI_DATE_VALUE
                if e.kind == ErrorKind.EMPTY_GSI_INT_VALUE
                else ErrorKind.INVALID_GSI_DATE_VALUE
            )
            raise DecodeFieldError(kind, raw=b) from e
    yy, mm, dd = parts
    if (yy, mm, dd) == (0, 1, 1):
        return None
    try:
        return date(2000 + yy, mm, dd)
    except ValueError as e:
        raise DecodeFieldError(ErrorKind.INVALID_GSI_DATE_VALUE, raw=b) from e


def encode_gsi_date(value: Optional[date]) -> bytes:
    if value is None:
        return ABSENT_GSI_DATE
    return (
        encode_gsi_int(value.year - 2000, 2)
        + encode_gsi_int(value.month, 2)
        + encode_gsi_int(value.day, 2)
    )


# ------------------------------------------------------------------ #
# GSI: timecodes (HHMMSSFF)
# ------------------------------------------------------------------ #
def decode_gsi_timecode(b: bytes) -> Timecode:
    _check_width(b, (8,), "GSI timecode field")
    parts = []
    failures = []
    for chunk in (b[0:2], b[2:4], b[4:6], b[6:8]):
        try:
            parts.append(decode_gsi_int(chunk))
        except DecodeFieldError as e:
            failures.append(e)
    if failures:
        # A blank component wins over a malformed one
        if any(e.kind == ErrorKind.EMPTY_GSI_INT_VALUE for e in failures):
            raise DecodeFieldError(ErrorKind.EMPTY_GSI_TIMECODE_VALUE, raw=b)
        raise DecodeFieldError(ErrorKind.INVALID_GSI_TIMECODE_VALUE, raw=b)
    return Timecode(*parts)


def encode_gsi_timecode(tc: Optional[Timecode]) -> bytes:
    if tc is None:
        return b" " * 8
    return (
        encode_gsi_int(tc.hours, 2)
        + encode_gsi_int(tc.minutes, 2)
        + encode_gsi_int(tc.seconds, 2)
        + encode_gsi_int(tc.frames, 2)
    )


# ------------------------------------------------------------------ #
# GSI: code-page strings
# ------------------------------------------------------------------ #
def decode_gsi_string(b: bytes, cpn: Optional[int]) -> str:
    codec = get_code_page_codec(cpn)
    if codec is None:
        raise DecodeFieldError(ErrorKind.UNSUPPORTED_CODE_PAGE, raw=b)
    try:
        return codec.decode(b.rstrip(b" "))
    except UnicodeDecodeError as e:
        raise DecodeFieldError(ErrorKind.INVALID_GSI_STRING_VALUE, raw=b) from e


def encode_gsi_string(value: str, width: int, cpn: Optional[int]) -> bytes:
    codec = get_code_page_codec(cpn)
    if codec is None:
        raise EncodeFieldError(ErrorKind.UNSUPPORTED_CODE_PAGE, value=value)
    try:
        encoded = codec.encode(value or "")
    except UnicodeEncodeError as e:
        raise EncodeFieldError(ErrorKind.INVALID_GSI_STRING_VALUE, value=value) from e
    return cut_pad(encoded, width, SPACE)


# ------------------------------------------------------------------ #
# TTI: binary integers (little-endian)
# ------------------------------------------------------------------ #
def decode_tti_int(b: bytes) -> int:
    if not 1 <= len(b) <= 8:
        raise FieldWidthError(f"TTI int field must be 1 to 8 bytes, got {len(b)}")
    return int.from_bytes(b, "little")


def encode_tti_int(value: Optional[int], width: int) -> bytes:
    """Unsigned little-endian over width bytes; None or negative is zero."""
    if not 1 <= width <= 8:
        raise FieldWidthError(f"TTI int field must be 1 to 8 bytes, got {width}")
    if value is None or value < 0:
        return bytes(width)
    return (value & ((1 << (8 * width)) - 1)).to_bytes(width, "little")


def decode_tti_byte(b: bytes) -> int:
    _check_width(b, (1,), "TTI byte field")
    return b[0]


def encode_tti_byte(value: Optional[int]) -> bytes:
    return encode_tti_int(value, 1)


# ------------------------------------------------------------------ #
# TTI: timecodes (one byte per component)
# ------------------------------------------------------------------ #
def decode_tti_timecode(b: bytes) -> Timecode:
    _check_width(b, (4,), "TTI timecode field")
    return Timecode(b[0], b[1], b[2], b[3])


def encode_tti_timecode(tc: Optional[Timecode]) -> bytes:
    if tc is None:
        return bytes(4)
    return b"".join(
        encode_tti_byte(v) for v in (tc.hours, tc.minutes, tc.seconds, tc.frames)
    )


# ------------------------------------------------------------------ #
# TTI: Text Field
# ------------------------------------------------------------------ #
def decode_tti_text(b: bytes) -> bytes:
    """Raw Text Field bytes with the trailing unused space removed."""
    _check_width(b, (TEXT_FIELD_SIZE,), "TTI text field")
    return b.rstrip(bytes([EBUSTLControlCode.UNUSED_SPACE]))


def encode_tti_text(tf: bytes) -> bytes:
    return cut_pad(tf, TEXT_FIELD_SIZE, EBUSTLControlCode.UNUSED_SPACE)
