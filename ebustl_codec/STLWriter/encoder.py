from typing import BinaryIO

import structlog

from ebustl_codec.errors import EncodeFieldError
from ebustl_codec.models import (
    GSI_BLOCK_SIZE,
    TTI_BLOCK_SIZE,
    USER_DEFINED_AREA_SIZE,
    DisplayStandardCode,
    GSIBlock,
    GSIField,
    STLFile,
    TTIBlock,
)
from ebustl_codec.stl_helpers import (
    SPACE,
    cut_pad,
    encode_gsi_byte,
    encode_gsi_date,
    encode_gsi_hex,
    encode_gsi_int,
    encode_gsi_string,
    encode_gsi_timecode,
    encode_tti_byte,
    encode_tti_int,
    encode_tti_text,
    encode_tti_timecode,
)

logger = structlog.get_logger()

# Enum sentinels meaning "not set" are written as blanks in the GSI block
_INVALID = 0xFF


def _gsi_code(value, width: int) -> bytes:
    if value is None or value == _INVALID or value < 0:
        return b" " * width
    return encode_gsi_byte(value, width)


def encode_gsi_block(gsi: GSIBlock) -> bytes:
    """
    Create the GSI block (1024 bytes).

    Raises:
        EncodeFieldError: on the first text field that cannot be written
                          with the block's code page.
    """
    cpn = gsi.code_page_number
    block = bytearray(GSI_BLOCK_SIZE)

    def _string(field: GSIField, value: str, width: int) -> bytes:
        try:
            return encode_gsi_string(value, width, cpn)
        except EncodeFieldError as e:
            e.field = field
            raise

    # Code Page Number (CPN) - 3 bytes
    block[0:3] = encode_gsi_int(cpn, 3)

    # Disk Format Code (DFC) - 8 bytes
    block[3:11] = _string(GSIField.DFC, gsi.disk_format_code, 8)

    # Display Standard Code (DSC) - 1 byte, blank when undefined
    if gsi.display_standard_code == DisplayStandardCode.BLANK:
        block[11:12] = b" "
    else:
        block[11:12] = _gsi_code(gsi.display_standard_code, 1)

    # Character Code Table (CCT) - 2 bytes
    block[12:14] = _gsi_code(gsi.character_code_table, 2)

    # Language Code (LC) - 2 bytes, hexadecimal
    lc = gsi.language_code
    block[14:16] = encode_gsi_hex(None if lc == _INVALID else lc)

    # Original Program Title (OPT) - 32 bytes
    block[16:48] = _string(GSIField.OPT, gsi.original_program_title, 32)

    # Original Episode Title (OET) - 32 bytes
    block[48:80] = _string(GSIField.OET, gsi.original_episode_title, 32)

    # Translated Program Title (TPT) - 32 bytes
    block[80:112] = _string(GSIField.TPT, gsi.translated_program_title, 32)

    # Translated Episode Title (TET) - 32 bytes
    block[112:144] = _string(GSIField.TET, gsi.translated_episode_title, 32)

    # Translator's Name (TN) - 32 bytes
    block[144:176] = _string(GSIField.TN, gsi.translator_name, 32)

    # Translator's Contact Details (TCD) - 32 bytes
    block[176:208] = _string(GSIField.TCD, gsi.translator_contact_details, 32)

    # Subtitle List Reference Code (SLR) - 16 bytes
    block[208:224] = _string(GSIField.SLR, gsi.subtitle_list_reference_code, 16)

    # Creation Date (CD) - 6 bytes
    block[224:230] = encode_gsi_date(gsi.creation_date)

    # Revision Date (RD) - 6 bytes
    block[230:236] = encode_gsi_date(gsi.revision_date)

    # Revision Number (RN) - 2 bytes
    block[236:238] = encode_gsi_int(gsi.revision_number, 2)

    # Total Number of TTI Blocks (TNB) - 5 bytes
    block[238:243] = encode_gsi_int(gsi.total_tti_blocks, 5)

    # Total Number of Subtitles (TNS) - 5 bytes
    block[243:248] = encode_gsi_int(gsi.total_subtitles, 5)

    # Total Number of Subtitle Groups (TNG) - 3 bytes
    block[248:251] = encode_gsi_int(gsi.total_subtitle_groups, 3)

    # Maximum Number of Displayable Characters (MNC) - 2 bytes
    block[251:253] = encode_gsi_int(gsi.max_characters_per_row, 2)

    # Maximum Number of Displayable Rows (MNR) - 2 bytes
    block[253:255] = encode_gsi_int(gsi.max_rows, 2)

    # Time Code Status (TCS) - 1 byte
    block[255:256] = _gsi_code(gsi.time_code_status, 1)

    # Time Code: Start of Programme (TCP) - 8 bytes
    block[256:264] = encode_gsi_timecode(gsi.time_code_start_of_program)

    # Time Code: First In-Cue (TCF) - 8 bytes
    block[264:272] = encode_gsi_timecode(gsi.time_code_first_in_cue)

    # Total Number of Disks (TND) - 1 byte
    block[272:273] = encode_gsi_byte(gsi.total_disks, 1)

    # Disk Sequence Number (DSN) - 1 byte
    block[273:274] = encode_gsi_byte(gsi.disk_sequence_number, 1)

    # Country of Origin (CO) - 3 bytes
    block[274:277] = _string(GSIField.CO, gsi.country_of_origin, 3)

    # Publisher (PUB) - 32 bytes
    block[277:309] = _string(GSIField.PUB, gsi.publisher, 32)

    # Editor's Name (EN) - 32 bytes
    block[309:341] = _string(GSIField.EN, gsi.editor_name, 32)

    # Editor's Contact Details (ECD) - 32 bytes
    block[341:373] = _string(GSIField.ECD, gsi.editor_contact_details, 32)

    # Spare Bytes - 75 bytes
    block[373:448] = b" " * 75

    # User-Defined Area (UDA) - 576 bytes
    block[448:1024] = cut_pad(gsi.user_defined_area, USER_DEFINED_AREA_SIZE, SPACE)

    return bytes(block)


def encode_tti_block(tti: TTIBlock) -> bytes:
    """Create a single TTI block (128 bytes)."""
    block = bytearray(TTI_BLOCK_SIZE)

    # Subtitle Group Number (SGN) - 1 byte
    block[0:1] = encode_tti_byte(tti.subtitle_group_number)

    # Subtitle Number (SN) - 2 bytes, little-endian
    block[1:3] = encode_tti_int(tti.subtitle_number, 2)

    # Extension Block Number (EBN) - 1 byte
    block[3:4] = encode_tti_byte(tti.extension_block_number)

    # Cumulative Status (CS) - 1 byte
    block[4:5] = encode_tti_byte(tti.cumulative_status)

    # Time Code In / Out (TCI / TCO) - 4 bytes each
    block[5:9] = encode_tti_timecode(tti.time_code_in)
    block[9:13] = encode_tti_timecode(tti.time_code_out)

    # Vertical Position (VP), Justification Code (JC), Comment Flag (CF)
    block[13:14] = encode_tti_byte(tti.vertical_position)
    block[14:15] = encode_tti_byte(tti.justification_code)
    block[15:16] = encode_tti_byte(tti.comment_flag)

    # Text Field (TF) - 112 bytes, padded with unused space
    block[16:128] = encode_tti_text(tti.text_field)

    return bytes(block)


def encode_stl_file(stl_file: STLFile, sink: BinaryIO) -> None:
    """
    Write the GSI block followed by every TTI block in order.

    The GSI block is encoded before anything is written, so a text field
    error leaves the sink untouched.
    """
    sink.write(encode_gsi_block(stl_file.gsi))
    for tti in stl_file.tti:
        sink.write(encode_tti_block(tti))

    logger.debug("stl_file_encoded", tti_blocks=len(stl_file.tti))
