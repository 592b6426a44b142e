from typing import BinaryIO, List

import structlog

from ebustl_codec.errors import ErrorKind, StructuralError
from ebustl_codec.models import (
    TTI_BLOCK_SIZE,
    CommentFlag,
    CumulativeStatus,
    EBUSTLControlCode,
    JustificationCode,
    TTIBlock,
    coerce_enum,
)
from ebustl_codec.stl_helpers import (
    decode_tti_byte,
    decode_tti_int,
    decode_tti_text,
    decode_tti_timecode,
)

logger = structlog.get_logger()


# ------------------------------------------------------------------ #
# TTI parsing
# ------------------------------------------------------------------ #
def parse_tti(tti: bytes) -> TTIBlock:
    """
    Decode one 128-byte TTI block.

    Every field is binary, so decoding cannot fail once the size is right.
    """
    if len(tti) != TTI_BLOCK_SIZE:
        raise StructuralError(
            ErrorKind.SHORT_TTI_BLOCK, detail=f"got {len(tti)} bytes"
        )

    # TTI layout (128 bytes):
    #  0:      SGN  (Subtitle Group Number)
    #  1-2:    SN   (Subtitle Number, little-endian)
    #  3:      EBN  (Extension Block Number)
    #  4:      CS   (Cumulative Status)
    #  5-8:    TCI  (In-cue  HH:MM:SS:FF, 1 byte per field)
    #  9-12:   TCO  (Out-cue HH:MM:SS:FF, 1 byte per field)
    #  13:     VP   (Vertical Position)
    #  14:     JC   (Justification Code)
    #  15:     CF   (Comment Flag)
    #  16-127: TF   (Text Field, 112 bytes)
    return TTIBlock(
        subtitle_group_number=decode_tti_byte(tti[0:1]),
        subtitle_number=decode_tti_int(tti[1:3]),
        extension_block_number=decode_tti_byte(tti[3:4]),
        cumulative_status=coerce_enum(CumulativeStatus, decode_tti_byte(tti[4:5])),
        time_code_in=decode_tti_timecode(tti[5:9]),
        time_code_out=decode_tti_timecode(tti[9:13]),
        vertical_position=decode_tti_byte(tti[13:14]),
        justification_code=coerce_enum(JustificationCode, decode_tti_byte(tti[14:15])),
        comment_flag=coerce_enum(CommentFlag, decode_tti_byte(tti[15:16])),
        text_field=decode_tti_text(tti[16:128]),
        terminated_by_unused_space=tti[127] == EBUSTLControlCode.UNUSED_SPACE,
    )


def parse_tti_blocks(buffer: BinaryIO) -> List[TTIBlock]:
    """
    Parse all 128-byte TTI blocks from the given buffer until end of data.

    Raises:
        StructuralError: when the data ends in the middle of a block.
    """
    blocks: List[TTIBlock] = []

    while True:
        tti = buffer.read(TTI_BLOCK_SIZE)
        if not tti:
            break
        if len(tti) < TTI_BLOCK_SIZE:
            raise StructuralError(
                ErrorKind.SHORT_TTI_BLOCK,
                block=len(blocks),
                detail=f"got {len(tti)} bytes",
            )
        blocks.append(parse_tti(tti))

    logger.debug("tti_blocks_decoded", count=len(blocks))
    return blocks
