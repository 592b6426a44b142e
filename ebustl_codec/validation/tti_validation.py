from typing import List, Optional

from ebustl_codec.errors import ErrorKind, StructuralError, ValidationError
from ebustl_codec.models import (
    EBN_LAST,
    EBN_RESERVED_FIRST,
    EBN_RESERVED_LAST,
    CommentFlag,
    CumulativeStatus,
    DisplayStandardCode,
    JustificationCode,
    TTIBlock,
    TTIField,
)
from ebustl_codec.validation.validators import (
    collect,
    validate_list,
    validate_not_in_range,
    validate_range,
    validate_timecode,
    validate_timecode_order_strict,
)


VALID_CUMULATIVE_STATUSES = (
    CumulativeStatus.NONE,
    CumulativeStatus.FIRST,
    CumulativeStatus.INTERMEDIATE,
    CumulativeStatus.LAST,
)
VALID_JUSTIFICATION_CODES = (
    JustificationCode.UNCHANGED,
    JustificationCode.LEFT,
    JustificationCode.CENTERED,
    JustificationCode.RIGHT,
)
VALID_COMMENT_FLAGS = (CommentFlag.SUBTITLE_DATA, CommentFlag.TRANSLATOR_COMMENTS)

TELETEXT_DISPLAY_STANDARDS = (
    DisplayStandardCode.LEVEL1_TELETEXT,
    DisplayStandardCode.LEVEL2_TELETEXT,
)


def validate_tti(
    tti: TTIBlock,
    framerate: int,
    dsc: Optional[int],
    mnr: Optional[int],
    block: Optional[int] = None,
) -> List[ValidationError]:
    """
    Check one TTI block in isolation.

    Args:
        tti: the block to check
        framerate: frame-rate from the GSI Disk Format Code
        dsc: GSI Display Standard Code, selects the Vertical Position range
        mnr: GSI Maximum Number of Rows, upper bound for open subtitling
        block: index of the block in the file, attached to every error

    Returns the non-fatal violations. Fatal violations are raised.
    """
    if framerate == 0:
        raise StructuralError(ErrorKind.UNSUPPORTED_FRAMERATE, block=block)

    warns: List[ValidationError] = []

    collect(
        warns,
        validate_range(
            tti.subtitle_group_number, 0, 0xFF, ErrorKind.UNSUPPORTED_SGN, fatal=True
        ),
        TTIField.SGN,
        block,
    )
    collect(
        warns,
        validate_range(
            tti.subtitle_number, 0, 0xFFFF, ErrorKind.UNSUPPORTED_SN, fatal=True
        ),
        TTIField.SN,
        block,
    )

    # The last block of a subtitle must end with unused space
    if tti.extension_block_number == EBN_LAST and not tti.terminated_by_unused_space:
        collect(
            warns,
            ValidationError(
                ErrorKind.LAST_EBN_NOT_TERMINATED_BY_SPACE,
                value=tti.extension_block_number,
            ),
            TTIField.EBN,
            block,
        )
    collect(
        warns,
        validate_not_in_range(
            tti.extension_block_number,
            EBN_RESERVED_FIRST,
            EBN_RESERVED_LAST,
            ErrorKind.UNSUPPORTED_EBN,
        ),
        TTIField.EBN,
        block,
    )

    collect(
        warns,
        validate_list(
            tti.cumulative_status, VALID_CUMULATIVE_STATUSES, ErrorKind.UNSUPPORTED_CS
        ),
        TTIField.CS,
        block,
    )

    collect(
        warns,
        validate_timecode(tti.time_code_in, framerate, ErrorKind.INVALID_TCI, fatal=True),
        TTIField.TCI,
        block,
    )
    collect(
        warns,
        validate_timecode(
            tti.time_code_out, framerate, ErrorKind.INVALID_TCO, fatal=True
        ),
        TTIField.TCO,
        block,
    )
    collect(
        warns,
        validate_timecode_order_strict(
            tti.time_code_in,
            tti.time_code_out,
            framerate,
            ErrorKind.INVALID_TCI_TCO_ORDER,
            fatal=True,
        ),
        TTIField.TCO,
        block,
    )

    if dsc in TELETEXT_DISPLAY_STANDARDS:
        vp_error = validate_range(
            tti.vertical_position, 1, 23, ErrorKind.UNSUPPORTED_VP_TELETEXT
        )
    elif dsc == DisplayStandardCode.OPEN_SUBTITLING:
        vp_error = validate_range(
            tti.vertical_position,
            0,
            mnr if mnr is not None else 99,
            ErrorKind.UNSUPPORTED_VP_OPEN_SUBTITLING,
        )
    else:
        # Blank or unlisted DSC: VP cannot be range-checked, only warn
        vp_error = ValidationError(ErrorKind.UNSUPPORTED_VP_DSC, value=dsc)
    collect(warns, vp_error, TTIField.VP, block)

    collect(
        warns,
        validate_list(
            tti.justification_code, VALID_JUSTIFICATION_CODES, ErrorKind.UNSUPPORTED_JC
        ),
        TTIField.JC,
        block,
    )
    collect(
        warns,
        validate_list(tti.comment_flag, VALID_COMMENT_FLAGS, ErrorKind.UNSUPPORTED_CF),
        TTIField.CF,
        block,
    )

    return warns
