from dataclasses import dataclass
from typing import List, Sequence, Tuple

import structlog

from ebustl_codec.errors import ErrorKind, STLError, StructuralError, ValidationError
from ebustl_codec.models import (
    EBN_LAST,
    CumulativeStatus,
    GSIField,
    STLFile,
    TTIBlock,
    TTIField,
)
from ebustl_codec.validation.gsi_validation import validate_gsi
from ebustl_codec.validation.tti_validation import validate_tti

logger = structlog.get_logger()


# Cumulative Status allowed after the previous subtitle's status
CS_TRANSITIONS = {
    CumulativeStatus.NONE: (
        (CumulativeStatus.NONE, CumulativeStatus.FIRST),
        ErrorKind.CS_NOT_NONE_OR_FIRST,
    ),
    CumulativeStatus.FIRST: (
        (CumulativeStatus.INTERMEDIATE, CumulativeStatus.LAST),
        ErrorKind.CS_NOT_INTERMEDIATE_OR_LAST,
    ),
    CumulativeStatus.INTERMEDIATE: (
        (CumulativeStatus.INTERMEDIATE, CumulativeStatus.LAST),
        ErrorKind.CS_NOT_INTERMEDIATE_OR_LAST,
    ),
    CumulativeStatus.LAST: (
        (CumulativeStatus.NONE, CumulativeStatus.LAST),
        ErrorKind.CS_NOT_NONE_OR_LAST,
    ),
}


@dataclass
class _ScanState:
    last_sn: int
    last_sgn: int
    last_ebn: int = EBN_LAST
    last_cs: int = CumulativeStatus.NONE
    subtitles: int = 0
    groups: int = 1


def count_subtitles_and_groups(tti_blocks: Sequence[TTIBlock]) -> Tuple[int, int]:
    """
    Number of distinct subtitles and subtitle groups in block order.

    A block starts a new subtitle when its (SGN, SN) pair differs from the
    previous block's, and a new group when its SGN differs.
    """
    subtitles = 0
    groups = 0
    last = None
    for tti in tti_blocks:
        key = (tti.subtitle_group_number, tti.subtitle_number)
        if key != last:
            subtitles += 1
        if last is None or key[0] != last[0]:
            groups += 1
        last = key
    return subtitles, groups


def _check_new_subtitle(
    tti: TTIBlock, state: _ScanState, i: int, warns: List[ValidationError]
) -> None:
    if tti.subtitle_number != state.last_sn + 1:
        warns.append(
            ValidationError(
                ErrorKind.SN_NOT_CONSECUTIVE,
                value=tti.subtitle_number,
                field=TTIField.SN,
                block=i,
            )
        )
    if state.last_ebn != EBN_LAST:
        warns.append(
            ValidationError(
                ErrorKind.NON_CLOSING_EBN_FOR_LAST_SUBTITLE,
                value=state.last_ebn,
                field=TTIField.EBN,
                block=i,
            )
        )
    transition = CS_TRANSITIONS.get(state.last_cs)
    if transition is not None:
        allowed, kind = transition
        if tti.cumulative_status not in allowed:
            warns.append(
                ValidationError(
                    kind, value=tti.cumulative_status, field=TTIField.CS, block=i
                )
            )


def _check_new_group(
    tti: TTIBlock, state: _ScanState, i: int, warns: List[ValidationError]
) -> None:
    if tti.subtitle_group_number != state.last_sgn + 1:
        warns.append(
            ValidationError(
                ErrorKind.SGN_NOT_CONSECUTIVE,
                value=tti.subtitle_group_number,
                field=TTIField.SGN,
                block=i,
            )
        )
    if tti.subtitle_number != 0:
        warns.append(
            ValidationError(
                ErrorKind.NO_FIRST_SUBTITLE_IN_NEW_GROUP,
                value=tti.subtitle_number,
                field=TTIField.SN,
                block=i,
            )
        )
    if state.last_ebn != EBN_LAST:
        warns.append(
            ValidationError(
                ErrorKind.NON_CLOSING_EBN_FOR_LAST_SUBTITLE,
                value=state.last_ebn,
                field=TTIField.EBN,
                block=i,
            )
        )
    if tti.cumulative_status not in (CumulativeStatus.NONE, CumulativeStatus.LAST):
        warns.append(
            ValidationError(
                ErrorKind.CS_NOT_NONE_OR_LAST,
                value=tti.cumulative_status,
                field=TTIField.CS,
                block=i,
            )
        )


def validate_stl_file(stl_file: STLFile) -> List[ValidationError]:
    """
    Validate a whole file: the GSI block, every TTI block and the
    numbering of subtitles, extension blocks and groups across blocks.

    The records are not modified, so calling this twice yields the same
    warnings.

    Returns:
        The non-fatal violations, in the order they were found.

    Raises:
        ValidationError: on the first fatal violation.
        StructuralError: when the file has no TTI blocks or no usable
            frame-rate.

        Either error keeps the warnings found before it in its
        warnings attribute.
    """
    warns: List[ValidationError] = []
    try:
        _scan_file(stl_file, warns)
    except STLError as e:
        e.warnings = warns + e.warnings
        raise
    return warns


def _scan_file(stl_file: STLFile, warns: List[ValidationError]) -> None:
    gsi = stl_file.gsi
    warns.extend(validate_gsi(gsi))

    if not stl_file.tti:
        raise StructuralError(ErrorKind.NO_TTI_BLOCKS)

    first = stl_file.tti[0]
    if gsi.time_code_first_in_cue != first.time_code_in:
        raise ValidationError(
            ErrorKind.TCF_FIRST_TCI_MISMATCH,
            value=f"{gsi.time_code_first_in_cue} != {first.time_code_in}",
            fatal=True,
            field=GSIField.TCF,
        )

    framerate = gsi.framerate
    state = _ScanState(last_sn=-1, last_sgn=first.subtitle_group_number)

    for i, tti in enumerate(stl_file.tti):
        warns.extend(
            validate_tti(
                tti, framerate, gsi.display_standard_code, gsi.max_rows, block=i
            )
        )

        same_group = tti.subtitle_group_number == state.last_sgn
        if same_group and tti.subtitle_number == state.last_sn:
            # Extension block of the current subtitle, which must still be open
            ebn = tti.extension_block_number
            if state.last_ebn == EBN_LAST or (
                ebn != EBN_LAST and ebn != state.last_ebn + 1
            ):
                warns.append(
                    ValidationError(
                        ErrorKind.EBN_NOT_CONSECUTIVE,
                        value=ebn,
                        field=TTIField.EBN,
                        block=i,
                    )
                )
        else:
            state.subtitles += 1
            if same_group:
                _check_new_subtitle(tti, state, i, warns)
            else:
                _check_new_group(tti, state, i, warns)
                state.groups += 1

        state.last_sn = tti.subtitle_number
        state.last_sgn = tti.subtitle_group_number
        state.last_ebn = tti.extension_block_number
        state.last_cs = tti.cumulative_status

    if gsi.total_tti_blocks != len(stl_file.tti):
        warns.append(
            ValidationError(
                ErrorKind.TTI_BLOCKS_COUNT_MISMATCH,
                value=f"{gsi.total_tti_blocks} != {len(stl_file.tti)}",
                field=GSIField.TNB,
            )
        )
    if gsi.total_subtitles != state.subtitles:
        warns.append(
            ValidationError(
                ErrorKind.SUBTITLE_COUNT_MISMATCH,
                value=f"{gsi.total_subtitles} != {state.subtitles}",
                field=GSIField.TNS,
            )
        )
    if gsi.total_subtitle_groups != state.groups:
        warns.append(
            ValidationError(
                ErrorKind.GROUP_COUNT_MISMATCH,
                value=f"{gsi.total_subtitle_groups} != {state.groups}",
                field=GSIField.TNG,
            )
        )

    logger.debug(
        "stl_file_validated",
        tti_blocks=len(stl_file.tti),
        subtitles=state.subtitles,
        groups=state.groups,
        warnings=len(warns),
    )
