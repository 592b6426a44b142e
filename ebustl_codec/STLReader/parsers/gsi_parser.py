from typing import Any, Callable, List, Optional, Tuple

import structlog

from ebustl_codec.errors import DecodeFieldError, ErrorKind, StructuralError
from ebustl_codec.models import (
    EBU_LANGUAGE_CODES,
    GSI_BLOCK_SIZE,
    CharacterCodeTable,
    CodePageNumber,
    DisplayStandardCode,
    GSIBlock,
    GSIField,
    LanguageCode,
    TimeCodeStatus,
    coerce_enum,
)
from ebustl_codec.stl_helpers import (
    decode_gsi_byte,
    decode_gsi_date,
    decode_gsi_hex,
    decode_gsi_int,
    decode_gsi_string,
    decode_gsi_timecode,
)

logger = structlog.get_logger()


def decode_language_code(lc_raw: bytes) -> Optional[str]:
    """
    Decode EBU language code from 2-byte field.
    The field contains a hex value as ASCII (e.g., "09" for English).
    """
    try:
        return EBU_LANGUAGE_CODES.get(decode_gsi_hex(lc_raw))
    except (DecodeFieldError, ValueError):
        return None


# ------------------------------------------------------------------ #
# General Subtitle Information (GSI) parsing
# ------------------------------------------------------------------ #
def parse_gsi(gsi: bytes) -> Tuple[GSIBlock, List[DecodeFieldError]]:
    """
    Decode every field of the 1024-byte GSI block.

    A field that cannot be decoded keeps its "absent" default and the
    failure is returned as a warning tagged with the field; decoding
    carries on with the next field.

    Raises:
        StructuralError: when the buffer is not exactly 1024 bytes.
    """
    if len(gsi) != GSI_BLOCK_SIZE:
        raise StructuralError(
            ErrorKind.SHORT_GSI_BLOCK, detail=f"got {len(gsi)} bytes"
        )

    block = GSIBlock()
    warns: List[DecodeFieldError] = []

    def _decode(field: GSIField, default: Any, fn: Callable, *args: Any) -> Any:
        try:
            return fn(*args)
        except DecodeFieldError as e:
            e.field = field
            warns.append(e)
            return default

    def _string(field: GSIField, raw: bytes) -> str:
        return _decode(field, "", decode_gsi_string, raw, block.code_page_number)

    # Code Page Number (CPN) - 3 bytes; needed by every string field below
    block.code_page_number = coerce_enum(
        CodePageNumber,
        _decode(GSIField.CPN, CodePageNumber.INVALID, decode_gsi_int, gsi[0:3]),
    )

    # Disk Format Code (DFC) - 8 bytes, e.g. "STL25.01"
    block.disk_format_code = _string(GSIField.DFC, gsi[3:11])

    # Display Standard Code (DSC) - 1 byte; a blank byte means undefined
    if gsi[11:12] == b" ":
        block.display_standard_code = DisplayStandardCode.BLANK
    else:
        block.display_standard_code = coerce_enum(
            DisplayStandardCode,
            _decode(
                GSIField.DSC, DisplayStandardCode.BLANK, decode_gsi_byte, gsi[11:12]
            ),
        )

    # Character Code Table (CCT) - 2 bytes
    block.character_code_table = coerce_enum(
        CharacterCodeTable,
        _decode(
            GSIField.CCT, CharacterCodeTable.INVALID, decode_gsi_byte, gsi[12:14]
        ),
    )

    # Language Code (LC) - 2 hex digits
    block.language_code = coerce_enum(
        LanguageCode,
        _decode(GSIField.LC, LanguageCode.INVALID, decode_gsi_hex, gsi[14:16]),
    )

    # Titles and translator details - 32 bytes each
    block.original_program_title = _string(GSIField.OPT, gsi[16:48])
    block.original_episode_title = _string(GSIField.OET, gsi[48:80])
    block.translated_program_title = _string(GSIField.TPT, gsi[80:112])
    block.translated_episode_title = _string(GSIField.TET, gsi[112:144])
    block.translator_name = _string(GSIField.TN, gsi[144:176])
    block.translator_contact_details = _string(GSIField.TCD, gsi[176:208])

    # Subtitle List Reference Code (SLR) - 16 bytes
    block.subtitle_list_reference_code = _string(GSIField.SLR, gsi[208:224])

    # Creation / Revision Date (CD / RD) - YYMMDD
    block.creation_date = _decode(GSIField.CD, None, decode_gsi_date, gsi[224:230])
    block.revision_date = _decode(GSIField.RD, None, decode_gsi_date, gsi[230:236])

    # Revision Number (RN) - 2 bytes
    block.revision_number = _decode(GSIField.RN, None, decode_gsi_int, gsi[236:238])

    # Totals (TNB 5, TNS 5, TNG 3 bytes)
    block.total_tti_blocks = _decode(GSIField.TNB, None, decode_gsi_int, gsi[238:243])
    block.total_subtitles = _decode(GSIField.TNS, None, decode_gsi_int, gsi[243:248])
    block.total_subtitle_groups = _decode(
        GSIField.TNG, None, decode_gsi_int, gsi[248:251]
    )

    # Maximum Number of Displayable Characters / Rows (MNC / MNR) - 2 bytes
    block.max_characters_per_row = _decode(
        GSIField.MNC, None, decode_gsi_int, gsi[251:253]
    )
    block.max_rows = _decode(GSIField.MNR, None, decode_gsi_int, gsi[253:255])

    # Time Code Status (TCS) - 1 byte
    block.time_code_status = coerce_enum(
        TimeCodeStatus,
        _decode(GSIField.TCS, TimeCodeStatus.INVALID, decode_gsi_byte, gsi[255:256]),
    )

    # Time Code: Start-of-Programme / First In-Cue (TCP / TCF) - HHMMSSFF
    block.time_code_start_of_program = _decode(
        GSIField.TCP, None, decode_gsi_timecode, gsi[256:264]
    )
    block.time_code_first_in_cue = _decode(
        GSIField.TCF, None, decode_gsi_timecode, gsi[264:272]
    )

    # Total Number of Disks / Disk Sequence Number (TND / DSN) - 1 byte each
    block.total_disks = _decode(GSIField.TND, None, decode_gsi_byte, gsi[272:273])
    block.disk_sequence_number = _decode(
        GSIField.DSN, None, decode_gsi_byte, gsi[273:274]
    )

    # Country of Origin (CO) - 3 bytes
    block.country_of_origin = _string(GSIField.CO, gsi[274:277])

    # Publisher, Editor's Name / Contact Details - 32 bytes each
    block.publisher = _string(GSIField.PUB, gsi[277:309])
    block.editor_name = _string(GSIField.EN, gsi[309:341])
    block.editor_contact_details = _string(GSIField.ECD, gsi[341:373])

    # Bytes 373-447 are spare; User-Defined Area (UDA) is kept verbatim
    block.user_defined_area = bytes(gsi[448:1024])

    logger.debug(
        "gsi_block_decoded",
        disk_format_code=block.disk_format_code,
        framerate=block.framerate,
        warnings=len(warns),
    )
    return block, warns
