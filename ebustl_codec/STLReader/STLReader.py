"""
STLReader - EBU STL (.stl) binary reader.

Supports EBU TECH 3264-E (EBU STL file) format.

The reader decodes:
- GSI block (first 1024 bytes) into a GSIBlock with every field
- TTI blocks (128 bytes each) into TTIBlock records, text kept as raw bytes

and, unless told otherwise, validates the result against EBU Tech 3264.
Non-fatal problems are kept in `warnings` and re-emitted through the
`warnings` module as STLValidationWarning:

    reader = STLReader()
    stl_file = reader.read(raw)
    for tti in stl_file.tti:
        print(tti.time_code_in, tti.text(stl_file.gsi.character_code_table))
"""

import warnings
from typing import BinaryIO, List, Optional, Union

import structlog

from ebustl_codec.errors import STLError, STLValidationWarning
from ebustl_codec.models import EBU_LANGUAGE_CODES, GSIBlock, STLFile, TTIBlock
from ebustl_codec.validation.file_validation import validate_stl_file

from .decoder import decode_stl_file

logger = structlog.get_logger()


class STLReader:
    """
    EBU STL binary reader with optional validation.
    """

    def __init__(self, validate: bool = True, emit_warnings: bool = True):
        """
        Args:
            validate: Run the EBU Tech 3264 validation after decoding.
            emit_warnings: Re-emit every collected warning as an
                           STLValidationWarning.
        """
        self._validate = validate
        self._emit_warnings = emit_warnings
        self._file: Optional[STLFile] = None
        self._warnings: List[STLError] = []

    # --------------------------------------------------------------------- #
    # Properties
    # --------------------------------------------------------------------- #
    @property
    def file(self) -> Optional[STLFile]:
        return self._file

    @property
    def gsi(self) -> Optional[GSIBlock]:
        return self._file.gsi if self._file else None

    @property
    def tti(self) -> Optional[List[TTIBlock]]:
        return self._file.tti if self._file else None

    @property
    def framerate(self) -> Optional[int]:
        return self._file.gsi.framerate if self._file else None

    @property
    def language(self) -> Optional[str]:
        """ISO 639 code of the GSI Language Code, None if unknown."""
        if not self._file:
            return None
        return EBU_LANGUAGE_CODES.get(self._file.gsi.language_code) or None

    @property
    def warnings(self) -> List[STLError]:
        """Decode and validation warnings of the last read()."""
        return list(self._warnings)

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def read(self, source: Union[bytes, bytearray, BinaryIO]) -> STLFile:
        """
        Decode (and validate) an STL file.

        Raises:
            StructuralError: truncated blocks, no TTI blocks, unusable
                             frame-rate.
            ValidationError: the first fatal rule violation.

        When validation raises, `warnings` still holds (and emits) every
        warning found before the fatal error, but `file` stays None.
        """
        self._file = None
        self._warnings = []

        stl_file, decode_warns = decode_stl_file(source)
        collected: List[STLError] = list(decode_warns)

        if self._validate:
            try:
                collected.extend(validate_stl_file(stl_file))
            except STLError as e:
                logger.warning(
                    "stl_file_rejected", error=str(e), warnings=len(e.warnings)
                )
                self._keep_warnings(collected + e.warnings)
                raise

        self._file = stl_file
        self._keep_warnings(collected)
        return stl_file

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #
    def _keep_warnings(self, collected: List[STLError]) -> None:
        self._warnings = collected
        if self._emit_warnings:
            for warning in collected:
                warnings.warn(str(warning), STLValidationWarning, stacklevel=3)
