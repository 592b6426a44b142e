"""
Field validators shared by the GSI, TTI and file validation passes.

Each validator returns None when the value is acceptable, or a
ValidationError carrying the given kind and severity. collect() then
decides what happens to it: warnings accumulate, fatal errors raise.
"""

from datetime import date
from typing import Any, Collection, List, Optional

from ebustl_codec.errors import ErrorKind, ValidationError
from ebustl_codec.models import Timecode


def validate_range(
    value: Optional[int], low: int, high: int, kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    """Inclusive range check; an absent value is out of range."""
    if value is None or not low <= value <= high:
        return ValidationError(kind, value=value, fatal=fatal)
    return None


def validate_not_in_range(
    value: Optional[int], low: int, high: int, kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    if value is not None and low <= value <= high:
        return ValidationError(kind, value=value, fatal=fatal)
    return None


def validate_list(
    value: Any, allowed: Collection[Any], kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    if value not in allowed:
        return ValidationError(kind, value=value, fatal=fatal)
    return None


def validate_non_empty_string(
    value: Optional[str], kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    if not value or not value.strip():
        return ValidationError(kind, value=value, fatal=fatal)
    return None


def validate_date(
    value: Optional[date], kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    if value is None:
        return ValidationError(kind, value=value, fatal=fatal)
    return None


def validate_date_order(
    before: Optional[date], after: Optional[date], kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    """before must not be later than after; skipped if either is absent."""
    if before is not None and after is not None and before > after:
        return ValidationError(kind, value=f"{before} > {after}", fatal=fatal)
    return None


def validate_timecode(
    tc: Optional[Timecode], framerate: int, kind: ErrorKind, fatal: bool = False
) -> Optional[ValidationError]:
    if tc is None:
        return ValidationError(kind, value=tc, fatal=fatal)
    reason = tc.validate(framerate)
    if reason is not None:
        return ValidationError(kind, value=f"{tc} ({reason})", fatal=fatal)
    return None


def validate_timecode_order(
    before: Optional[Timecode],
    after: Optional[Timecode],
    framerate: int,
    kind: ErrorKind,
    fatal: bool = False,
) -> Optional[ValidationError]:
    """before <= after, compared in frames."""
    if before is None or after is None:
        return None
    if before.to_frames(framerate) > after.to_frames(framerate):
        return ValidationError(kind, value=f"{before} > {after}", fatal=fatal)
    return None


def validate_timecode_order_strict(
    before: Optional[Timecode],
    after: Optional[Timecode],
    framerate: int,
    kind: ErrorKind,
    fatal: bool = False,
) -> Optional[ValidationError]:
    """before < after, compared in frames."""
    if before is None or after is None:
        return None
    if before.to_frames(framerate) >= after.to_frames(framerate):
        return ValidationError(kind, value=f"{before} >= {after}", fatal=fatal)
    return None


def collect(
    warns: List[ValidationError],
    error: Optional[ValidationError],
    field: Any,
    block: Optional[int] = None,
) -> None:
    """
    Tag error with its location, then append it to warns or raise it when
    it is fatal. A fatal error is never added to warns; it carries a copy
    of them in its warnings attribute instead.
    """
    if error is None:
        return
    error.field = field
    error.block = block
    if error.fatal:
        error.warnings = list(warns)
        raise error
    warns.append(error)
