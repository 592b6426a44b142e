"""
EBU STL Errors - Exception hierarchy and error kinds.

Contains:
- ErrorKind enum with the human-readable message of every failure
- FieldError family for decode, encode and validation failures on one field
- StructuralError for whole-block / whole-file problems
- STLValidationWarning category used to surface non-fatal problems
"""

from enum import Enum
from typing import Any, List, Optional


# =============================================================================
# Error Kinds
# =============================================================================


class ErrorKind(Enum):
    """Every failure the codec and validator can report."""

    # Field decoding / encoding
    EMPTY_GSI_INT_VALUE = "empty GSI int value"
    INVALID_GSI_INT_VALUE = "invalid GSI int value"
    EMPTY_GSI_BYTE_VALUE = "empty GSI byte value"
    INVALID_GSI_BYTE_VALUE = "invalid GSI byte value"
    EMPTY_GSI_HEX_VALUE = "empty GSI hex value"
    INVALID_GSI_HEX_VALUE = "invalid GSI hex value"
    EMPTY_GSI_DATE_VALUE = "empty GSI date value"
    INVALID_GSI_DATE_VALUE = "invalid GSI date value"
    EMPTY_GSI_TIMECODE_VALUE = "empty GSI timecode value"
    INVALID_GSI_TIMECODE_VALUE = "invalid GSI timecode value"
    INVALID_GSI_STRING_VALUE = "invalid GSI string value"
    INVALID_TTI_STRING_VALUE = "invalid TTI string value"
    UNSUPPORTED_CODE_PAGE = "unsupported code page"
    UNSUPPORTED_CHARACTER_CODE_TABLE = "unsupported character code table"

    # Structure
    SHORT_GSI_BLOCK = "GSI block must be 1024 bytes"
    SHORT_TTI_BLOCK = "TTI block must be 128 bytes"
    NO_TTI_BLOCKS = "no TTI blocks"
    UNSUPPORTED_FRAMERATE = "unsupported framerate"

    # GSI validation
    UNSUPPORTED_CPN = "unsupported CPN"
    UNSUPPORTED_DFC = "unsupported DFC"
    UNSUPPORTED_DSC = "unsupported DSC"
    UNSUPPORTED_CCT = "unsupported CCT"
    UNSUPPORTED_LC = "unsupported LC"
    EMPTY_OPT = "empty OPT"
    EMPTY_OET = "empty OET"
    EMPTY_TPT = "empty TPT"
    EMPTY_TET = "empty TET"
    EMPTY_TN = "empty TN"
    EMPTY_TCD = "empty TCD"
    EMPTY_SLR = "empty SLR"
    EMPTY_CD = "empty CD"
    EMPTY_RD = "empty RD"
    INVALID_CD_RD_ORDER = "CD after RD"
    UNSUPPORTED_RN = "unsupported RN"
    UNSUPPORTED_TNB = "unsupported TNB"
    UNSUPPORTED_TNS = "unsupported TNS"
    UNSUPPORTED_TNG = "unsupported TNG"
    UNSUPPORTED_MNC = "unsupported MNC"
    UNSUPPORTED_MNR = "unsupported MNR"
    UNSUPPORTED_MNR_TELETEXT = "unsupported MNR for teletext"
    UNSUPPORTED_TCS = "unsupported TCS"
    EMPTY_TCP = "empty TCP"
    INVALID_TCP = "invalid TCP"
    EMPTY_TCF = "empty TCF"
    INVALID_TCF = "invalid TCF"
    INVALID_TCP_TCF_ORDER = "TCP after TCF"
    UNSUPPORTED_TND = "unsupported TND"
    UNSUPPORTED_DSN = "unsupported DSN"
    EMPTY_CO = "empty CO"
    EMPTY_PUB = "empty PUB"
    EMPTY_EN = "empty EN"
    EMPTY_ECD = "empty ECD"

    # TTI validation
    UNSUPPORTED_SGN = "unsupported SGN"
    UNSUPPORTED_SN = "unsupported SN"
    UNSUPPORTED_EBN = "unsupported EBN"
    LAST_EBN_NOT_TERMINATED_BY_SPACE = "last EBN not terminated by unused space"
    UNSUPPORTED_CS = "unsupported CS"
    INVALID_TCI = "invalid TCI"
    INVALID_TCO = "invalid TCO"
    INVALID_TCI_TCO_ORDER = "TCI not before TCO"
    UNSUPPORTED_VP_TELETEXT = "unsupported VP for teletext"
    UNSUPPORTED_VP_OPEN_SUBTITLING = "unsupported VP for open subtitling"
    UNSUPPORTED_VP_DSC = "unsupported VP for undefined DSC"
    UNSUPPORTED_JC = "unsupported JC"
    UNSUPPORTED_CF = "unsupported CF"

    # File validation
    TTI_BLOCKS_COUNT_MISMATCH = "TTI blocks count mismatch"
    TCF_FIRST_TCI_MISMATCH = "TCF does not match first TCI"
    SUBTITLE_COUNT_MISMATCH = "subtitle count mismatch"
    GROUP_COUNT_MISMATCH = "subtitle group count mismatch"
    EBN_NOT_CONSECUTIVE = "EBN not consecutive"
    SN_NOT_CONSECUTIVE = "SN not consecutive"
    SGN_NOT_CONSECUTIVE = "SGN not consecutive"
    NON_CLOSING_EBN_FOR_LAST_SUBTITLE = "EBN of last subtitle block is not closing"
    NO_FIRST_SUBTITLE_IN_NEW_GROUP = "new group does not start with SN 0"
    CS_NOT_NONE_OR_FIRST = "CS not none or first"
    CS_NOT_INTERMEDIATE_OR_LAST = "CS not intermediate or last"
    CS_NOT_NONE_OR_LAST = "CS not none or last"


# =============================================================================
# Exceptions
# =============================================================================


class STLError(ValueError):
    """Base class for every data error raised by the codec.

    When raised by validation, warnings holds the non-fatal violations
    found before it.
    """

    def __init__(self, *args: Any):
        super().__init__(*args)
        self.warnings: List["STLError"] = []


class FieldWidthError(ValueError):
    """A primitive was called with a buffer or width it does not accept.

    This is a programming error, not a data error, so it does not derive
    from STLError.
    """


class FieldError(STLError):
    """A failure tied to one GSI or TTI field."""

    def __init__(
        self,
        kind: ErrorKind,
        field: Optional[Any] = None,
        block: Optional[int] = None,
    ):
        self.kind = kind
        self.field = field
        self.block = block
        super().__init__(kind.value)

    def _location(self) -> str:
        parts = []
        if self.block is not None:
            parts.append(f"TTI block {self.block}")
        if self.field is not None:
            parts.append(str(getattr(self.field, "value", self.field)))
        return " ".join(parts)

    def _detail(self) -> str:
        return ""

    def __str__(self) -> str:
        location = self._location()
        message = f"{location}: {self.kind.value}" if location else self.kind.value
        detail = self._detail()
        return f"{message} ({detail})" if detail else message


class DecodeFieldError(FieldError):
    """The bytes of a field could not be parsed."""

    def __init__(self, kind: ErrorKind, raw: bytes = b"", **kwargs: Any):
        self.raw = raw
        super().__init__(kind, **kwargs)

    def _detail(self) -> str:
        return f"input: {self.raw!r}"


class EncodeFieldError(FieldError):
    """A field value cannot be represented on the wire."""

    def __init__(self, kind: ErrorKind, value: Any = None, **kwargs: Any):
        self.value = value
        super().__init__(kind, **kwargs)

    def _detail(self) -> str:
        return f"value: {self.value!r}"


class ValidationError(FieldError):
    """A business rule of EBU Tech 3264 is violated."""

    def __init__(
        self, kind: ErrorKind, value: Any = None, fatal: bool = False, **kwargs: Any
    ):
        self.value = value
        self.fatal = fatal
        super().__init__(kind, **kwargs)

    def _detail(self) -> str:
        return f"value: {self.value}"

    def __str__(self) -> str:
        message = super().__str__()
        return f"fatal: {message}" if self.fatal else message


class StructuralError(STLError):
    """The file cannot be interpreted at all."""

    def __init__(self, kind: ErrorKind, block: Optional[int] = None, detail: str = ""):
        self.kind = kind
        self.block = block
        self.detail = detail
        super().__init__(kind.value)

    def __str__(self) -> str:
        message = self.kind.value
        if self.block is not None:
            message = f"TTI block {self.block}: {message}"
        if self.detail:
            message = f"{message} ({self.detail})"
        return message


# =============================================================================
# Warning Category
# =============================================================================


class STLValidationWarning(UserWarning):
    """Emitted for non-fatal problems found while reading an STL file."""
