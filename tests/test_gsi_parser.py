import pytest
from datetime import date
from ebustl_codec.errors import ErrorKind, StructuralError
from ebustl_codec.models import (
    CharacterCodeTable,
    CodePageNumber,
    DisplayStandardCode,
    GSIField,
    LanguageCode,
    TimeCodeStatus,
    Timecode,
)
from ebustl_codec.STLReader.parsers.gsi_parser import decode_language_code, parse_gsi
from helpers_for_testing import make_gsi_block


# =============================================================================
# Tests for decode_language_code
# =============================================================================


class TestDecodeLanguageCode:
    """Tests for EBU language code decoding."""

    def test_decode_english_code(self):
        """Should decode 0x09 as English (en)."""
        assert decode_language_code(b"09") == "en"

    def test_decode_french_code(self):
        """Should decode 0x0F as French (fr)."""
        assert decode_language_code(b"0F") == "fr"

    def test_decode_lowercase_hex(self):
        """Should handle lowercase hex values."""
        assert decode_language_code(b"0f") == "fr"

    def test_decode_upper_range(self):
        """Should decode codes of the 0x45-0x7F range."""
        assert decode_language_code(b"56") == "ru"

    def test_decode_unknown_code_returns_empty(self):
        """Should return empty string for unknown code 0x00."""
        assert decode_language_code(b"00") == ""

    def test_decode_unassigned_code_returns_none(self):
        """Should return None for a code outside the table."""
        assert decode_language_code(b"30") is None

    def test_decode_empty_bytes_returns_none(self):
        """Should return None for empty bytes."""
        assert decode_language_code(b"") is None

    def test_decode_whitespace_only_returns_none(self):
        """Should return None for whitespace-only bytes."""
        assert decode_language_code(b"  ") is None

    def test_decode_invalid_hex_returns_none(self):
        """Should return None for invalid hex string."""
        assert decode_language_code(b"ZZ") is None


# =============================================================================
# Tests for parse_gsi
# =============================================================================


class TestParseGsi:
    """Tests for GSI block parsing."""

    def test_parse_valid_block_has_no_warnings(self):
        """Should decode a well-formed block without warnings."""
        _, warns = parse_gsi(make_gsi_block())
        assert warns == []

    def test_parse_coded_fields(self):
        """Should decode the coded fields into enum members."""
        gsi, _ = parse_gsi(make_gsi_block())
        assert gsi.code_page_number is CodePageNumber.MULTILINGUAL
        assert gsi.disk_format_code == "STL25.01"
        assert gsi.display_standard_code is DisplayStandardCode.LEVEL1_TELETEXT
        assert gsi.character_code_table is CharacterCodeTable.LATIN
        assert gsi.language_code is LanguageCode.ENGLISH
        assert gsi.time_code_status is TimeCodeStatus.INTENDED_FOR_USE
        assert gsi.framerate == 25

    def test_parse_strings_are_trimmed(self):
        """Should strip trailing spaces from string fields."""
        gsi, _ = parse_gsi(make_gsi_block())
        assert gsi.original_program_title == "Test Title"
        assert gsi.translator_contact_details == "jane@example.com"
        assert gsi.country_of_origin == "FRA"

    def test_parse_string_with_code_page(self):
        """Should decode string fields with the declared code page."""
        gsi, _ = parse_gsi(make_gsi_block(cpn=b"850", title=b"Caf\x82"))
        assert gsi.original_program_title == "Caf\u00e9"

    def test_parse_numbers_and_dates(self):
        """Should decode numeric, date and timecode fields."""
        gsi, _ = parse_gsi(make_gsi_block())
        assert gsi.creation_date == date(2023, 1, 15)
        assert gsi.revision_date == date(2023, 1, 16)
        assert gsi.revision_number == 1
        assert gsi.total_tti_blocks == 1
        assert gsi.total_subtitle_groups == 1
        assert gsi.max_characters_per_row == 40
        assert gsi.max_rows == 23
        assert gsi.time_code_start_of_program == Timecode(10, 0, 0, 0)
        assert gsi.time_code_first_in_cue == Timecode(10, 0, 0, 0)
        assert gsi.total_disks == 1
        assert gsi.disk_sequence_number == 1

    def test_parse_user_defined_area(self):
        """Should keep the UDA bytes verbatim."""
        gsi, _ = parse_gsi(make_gsi_block(uda=b"custom data"))
        assert len(gsi.user_defined_area) == 576
        assert gsi.user_defined_area.startswith(b"custom data ")

    def test_parse_blank_dsc(self):
        """Should treat a blank DSC as undefined without warning."""
        gsi, warns = parse_gsi(make_gsi_block(dsc=b" "))
        assert gsi.display_standard_code is DisplayStandardCode.BLANK
        assert warns == []

    def test_parse_absent_date(self):
        """Should decode 000101 as an absent date."""
        gsi, warns = parse_gsi(make_gsi_block(revision_date=b"000101"))
        assert gsi.revision_date is None
        assert warns == []

    def test_parse_unlisted_code_kept(self):
        """Should keep an unlisted CCT value as a plain int."""
        gsi, warns = parse_gsi(make_gsi_block(cct=b"09"))
        assert gsi.character_code_table == 9
        assert warns == []

    def test_parse_invalid_field_tagged(self):
        """Should tag a decode failure with its field and keep the default."""
        gsi, warns = parse_gsi(make_gsi_block(tns=b"12a45"))
        assert gsi.total_subtitles is None
        assert len(warns) == 1
        assert warns[0].field == GSIField.TNS
        assert warns[0].kind == ErrorKind.INVALID_GSI_INT_VALUE

    def test_parse_blank_int_is_absent(self):
        """Should leave a blank integer field None rather than 0."""
        gsi, warns = parse_gsi(make_gsi_block(revision_number=b""))
        assert gsi.revision_number is None
        assert [(w.field, w.kind) for w in warns] == [
            (GSIField.RN, ErrorKind.EMPTY_GSI_INT_VALUE)
        ]

    def test_parse_empty_timecode(self):
        """Should report a blank TCF as empty."""
        gsi, warns = parse_gsi(make_gsi_block(tcf=b""))
        assert gsi.time_code_first_in_cue is None
        assert [(w.field, w.kind) for w in warns] == [
            (GSIField.TCF, ErrorKind.EMPTY_GSI_TIMECODE_VALUE)
        ]

    def test_parse_unsupported_code_page(self):
        """Should warn for every string field when the code page is unknown."""
        gsi, warns = parse_gsi(make_gsi_block(cpn=b"999"))
        assert gsi.code_page_number == 999
        assert gsi.disk_format_code == ""
        fields = {w.field for w in warns}
        assert GSIField.DFC in fields
        assert GSIField.OPT in fields
        assert GSIField.ECD in fields
        assert all(w.kind == ErrorKind.UNSUPPORTED_CODE_PAGE for w in warns)

    def test_parse_wrong_size_raises(self):
        """Should reject a buffer that is not 1024 bytes."""
        with pytest.raises(StructuralError) as exc_info:
            parse_gsi(make_gsi_block()[:1000])
        assert exc_info.value.kind == ErrorKind.SHORT_GSI_BLOCK
