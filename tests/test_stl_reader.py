import warnings

import pytest
from ebustl_codec.errors import (
    ErrorKind,
    STLValidationWarning,
    StructuralError,
    ValidationError,
)
from ebustl_codec.models import CharacterCodeTable, Timecode
from ebustl_codec.STLReader.STLReader import STLReader

from helpers_for_testing import make_gsi_block, make_stl_file, make_tti_block


# =============================================================================
# Tests for STLReader - Initialization
# =============================================================================


class TestSTLReaderInit:
    """Tests for STLReader initialization."""

    def test_init_state(self):
        """A fresh reader should expose no data."""
        reader = STLReader()

        assert reader.file is None
        assert reader.gsi is None
        assert reader.tti is None
        assert reader.framerate is None
        assert reader.language is None
        assert reader.warnings == []


# =============================================================================
# Tests for STLReader - read() method
# =============================================================================


class TestSTLReaderRead:
    """Tests for STLReader.read() method."""

    def test_read_returns_file(self):
        """read() should return the decoded file and keep it."""
        reader = STLReader()

        stl_file = reader.read(make_stl_file())

        assert reader.file is stl_file
        assert reader.gsi is stl_file.gsi
        assert reader.tti is stl_file.tti

    def test_read_valid_file_has_no_warnings(self):
        """A valid file should produce no warnings."""
        reader = STLReader()

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            reader.read(make_stl_file())

        assert reader.warnings == []

    def test_read_framerate(self):
        """framerate should follow the DFC."""
        reader = STLReader()
        reader.read(make_stl_file(gsi=make_gsi_block(dfc=b"STL30.01")))

        assert reader.framerate == 30

    def test_read_language(self):
        """language should be the ISO 639 code of the LC field."""
        reader = STLReader()
        reader.read(make_stl_file(gsi=make_gsi_block(language_code=b"0F")))

        assert reader.language == "fr"

    def test_read_unknown_language(self):
        """language should be None for code 00."""
        reader = STLReader()
        reader.read(make_stl_file(gsi=make_gsi_block(language_code=b"00")))

        assert reader.language is None

    def test_read_text(self):
        """TTI text should decode with the GSI character code table."""
        reader = STLReader()
        stl_file = reader.read(
            make_stl_file(tti_blocks=[make_tti_block(text=b"Gar\xcbcon")])
        )

        assert stl_file.tti[0].text(stl_file.gsi.character_code_table) == "Gar\u00e7on"
        assert stl_file.gsi.character_code_table is CharacterCodeTable.LATIN

    def test_read_stream(self, tmp_path):
        """read() should accept an open binary file."""
        path = tmp_path / "sample.stl"
        path.write_bytes(make_stl_file())
        reader = STLReader()

        with open(path, "rb") as f:
            stl_file = reader.read(f)

        assert stl_file.tti[0].time_code_in == Timecode(10, 0, 0, 0)


# =============================================================================
# Tests for STLReader - Warnings
# =============================================================================


class TestSTLReaderWarnings:
    """Tests for warning collection and emission."""

    def test_warnings_emitted(self):
        """Non-fatal violations should be emitted as STLValidationWarning."""
        reader = STLReader()
        data = make_stl_file(gsi=make_gsi_block(tns=b"00002"))

        with pytest.warns(STLValidationWarning, match="subtitle count mismatch"):
            reader.read(data)

        assert [w.kind for w in reader.warnings] == [ErrorKind.SUBTITLE_COUNT_MISMATCH]

    def test_decode_warnings_kept(self):
        """GSI decode warnings should come before validation warnings."""
        reader = STLReader(emit_warnings=False)
        reader.read(make_stl_file(gsi=make_gsi_block(creation_date=b"231315")))

        kinds = [w.kind for w in reader.warnings]
        assert kinds == [ErrorKind.INVALID_GSI_DATE_VALUE, ErrorKind.EMPTY_CD]

    def test_warnings_not_emitted_when_disabled(self):
        """emit_warnings=False should keep warnings silent."""
        reader = STLReader(emit_warnings=False)
        data = make_stl_file(gsi=make_gsi_block(tnb=b"00009"))

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            reader.read(data)

        assert [w.kind for w in reader.warnings] == [ErrorKind.TTI_BLOCKS_COUNT_MISMATCH]

    def test_warnings_property_is_a_copy(self):
        """Mutating the returned list should not affect the reader."""
        reader = STLReader(emit_warnings=False)
        reader.read(make_stl_file(gsi=make_gsi_block(tnb=b"00009")))

        reader.warnings.clear()

        assert len(reader.warnings) == 1


# =============================================================================
# Tests for STLReader - Errors
# =============================================================================


class TestSTLReaderErrors:
    """Tests for fatal errors."""

    def test_fatal_violation_raises(self):
        """A fatal rule violation should raise ValidationError."""
        reader = STLReader()
        data = make_stl_file(gsi=make_gsi_block(tcf=b"10000100"))

        with pytest.raises(ValidationError) as exc_info:
            reader.read(data)

        assert exc_info.value.fatal
        assert exc_info.value.kind == ErrorKind.TCF_FIRST_TCI_MISMATCH
        assert reader.file is None

    def test_fatal_violation_keeps_warnings(self):
        """Warnings found before a fatal violation should stay readable."""
        reader = STLReader(emit_warnings=False)
        data = make_stl_file(
            gsi=make_gsi_block(title=b"", creation_date=b"231315", tcf=b"10000100")
        )

        with pytest.raises(ValidationError):
            reader.read(data)

        assert [w.kind for w in reader.warnings] == [
            ErrorKind.INVALID_GSI_DATE_VALUE,
            ErrorKind.EMPTY_OPT,
            ErrorKind.EMPTY_CD,
        ]
        assert reader.file is None

    def test_fatal_violation_emits_warnings(self):
        """Warnings found before a fatal violation should still be emitted."""
        data = make_stl_file(gsi=make_gsi_block(title=b"", tcf=b"10000100"))

        with pytest.warns(STLValidationWarning, match="empty OPT"):
            with pytest.raises(ValidationError):
                STLReader().read(data)

    def test_no_tti_blocks_raises(self):
        """A file without TTI blocks should be rejected when validating."""
        with pytest.raises(StructuralError) as exc_info:
            STLReader().read(make_stl_file(tti_blocks=[]))

        assert exc_info.value.kind == ErrorKind.NO_TTI_BLOCKS

    def test_validation_disabled(self):
        """validate=False should only decode."""
        reader = STLReader(validate=False)
        stl_file = reader.read(make_stl_file(tti_blocks=[]))

        assert stl_file.tti == []
        assert reader.warnings == []

    def test_previous_result_cleared(self):
        """A failed read should not keep the previous file."""
        reader = STLReader()
        reader.read(make_stl_file())

        with pytest.raises(StructuralError):
            reader.read(b"too short")

        assert reader.file is None
        assert reader.warnings == []
