import pytest
from datetime import date
from ebustl_codec.errors import ErrorKind, ValidationError
from ebustl_codec.models import GSIField, TTIField, Timecode
from ebustl_codec.validation.validators import (
    collect,
    validate_date,
    validate_date_order,
    validate_list,
    validate_non_empty_string,
    validate_not_in_range,
    validate_range,
    validate_timecode,
    validate_timecode_order,
    validate_timecode_order_strict,
)

KIND = ErrorKind.UNSUPPORTED_RN


# =============================================================================
# Tests for value validators
# =============================================================================


class TestValidateRange:
    """Tests for validate_range()."""

    def test_bounds_inclusive(self):
        """Should accept both bounds."""
        assert validate_range(0, 0, 99, KIND) is None
        assert validate_range(99, 0, 99, KIND) is None

    def test_out_of_range(self):
        """Should report the offending value."""
        error = validate_range(100, 0, 99, KIND)
        assert error.kind == KIND
        assert error.value == 100
        assert not error.fatal

    def test_absent_value(self):
        """Should treat None as out of range."""
        assert validate_range(None, 0, 99, KIND) is not None

    def test_fatal_flag(self):
        """Should carry the requested severity."""
        assert validate_range(-1, 0, 99, KIND, fatal=True).fatal


class TestValidateNotInRange:
    """Tests for validate_not_in_range()."""

    def test_inside_rejected(self):
        """Should reject a value inside the range."""
        assert validate_not_in_range(0xF5, 0xF0, 0xFD, KIND) is not None

    def test_outside_accepted(self):
        """Should accept values outside the range and None."""
        assert validate_not_in_range(0xFE, 0xF0, 0xFD, KIND) is None
        assert validate_not_in_range(None, 0xF0, 0xFD, KIND) is None


class TestValidateList:
    """Tests for validate_list()."""

    def test_member(self):
        """Should accept an allowed value."""
        assert validate_list("b", ("a", "b"), KIND) is None

    def test_non_member(self):
        """Should reject any other value."""
        assert validate_list("c", ("a", "b"), KIND).value == "c"


class TestValidateNonEmptyString:
    """Tests for validate_non_empty_string()."""

    def test_text(self):
        """Should accept non-blank text."""
        assert validate_non_empty_string("x", KIND) is None

    def test_blank(self):
        """Should reject empty, blank and None."""
        assert validate_non_empty_string("", KIND) is not None
        assert validate_non_empty_string("   ", KIND) is not None
        assert validate_non_empty_string(None, KIND) is not None


class TestValidateDate:
    """Tests for validate_date() / validate_date_order()."""

    def test_present(self):
        """Should accept a date."""
        assert validate_date(date(2023, 1, 1), KIND) is None

    def test_absent(self):
        """Should reject None."""
        assert validate_date(None, KIND) is not None

    def test_order(self):
        """Should accept equal dates and reject a later first date."""
        assert validate_date_order(date(2023, 1, 1), date(2023, 1, 1), KIND) is None
        assert validate_date_order(date(2023, 1, 2), date(2023, 1, 1), KIND) is not None

    def test_order_skipped_when_absent(self):
        """Should not compare when a date is missing."""
        assert validate_date_order(None, date(2023, 1, 1), KIND) is None


class TestValidateTimecode:
    """Tests for timecode validators."""

    def test_valid(self):
        """Should accept an in-range timecode."""
        assert validate_timecode(Timecode(10, 0, 0, 24), 25, KIND) is None

    def test_invalid_frames(self):
        """Should reject frames beyond the frame-rate."""
        error = validate_timecode(Timecode(10, 0, 0, 25), 25, KIND)
        assert "frames" in str(error.value)

    def test_absent(self):
        """Should reject None."""
        assert validate_timecode(None, 25, KIND) is not None

    def test_order(self):
        """Should accept equal timecodes in non-strict mode only."""
        tc = Timecode(10, 0, 0, 0)
        assert validate_timecode_order(tc, tc, 25, KIND) is None
        assert validate_timecode_order_strict(tc, tc, 25, KIND) is not None

    def test_order_compares_frames(self):
        """Should compare positions, not components."""
        before = Timecode(0, 0, 0, 30)
        after = Timecode(0, 0, 1, 0)
        assert validate_timecode_order(before, after, 25, KIND) is not None
        assert validate_timecode_order(before, after, 30, KIND) is None


# =============================================================================
# Tests for collect
# =============================================================================


class TestCollect:
    """Tests for collect()."""

    def test_none_ignored(self):
        """Should do nothing without an error."""
        warns = []
        collect(warns, None, GSIField.RN)
        assert warns == []

    def test_warning_appended_and_tagged(self):
        """Should tag the warning with field and block."""
        warns = []
        collect(warns, ValidationError(KIND, value=3), TTIField.VP, 4)
        assert len(warns) == 1
        assert warns[0].field == TTIField.VP
        assert warns[0].block == 4
        assert str(warns[0]) == "TTI block 4 VP: unsupported RN (value: 3)"

    def test_fatal_raised(self):
        """Should raise a fatal error instead of appending it."""
        warns = []
        with pytest.raises(ValidationError) as exc_info:
            collect(warns, ValidationError(KIND, fatal=True), GSIField.DFC)
        assert warns == []
        assert exc_info.value.field == GSIField.DFC
        assert str(exc_info.value).startswith("fatal: DFC:")

    def test_fatal_keeps_earlier_warnings(self):
        """Should attach the warnings gathered so far to a fatal error."""
        warns = []
        collect(warns, ValidationError(KIND, value=1), GSIField.RN)
        with pytest.raises(ValidationError) as exc_info:
            collect(warns, ValidationError(KIND, fatal=True), GSIField.DFC)
        assert exc_info.value.warnings == warns
        assert exc_info.value.warnings is not warns
