from typing import List

from ebustl_codec.errors import ErrorKind, ValidationError
from ebustl_codec.models import (
    CharacterCodeTable,
    CodePageNumber,
    DiskFormatCode,
    DisplayStandardCode,
    GSIBlock,
    GSIField,
    LanguageCode,
    TimeCodeStatus,
)
from ebustl_codec.validation.validators import (
    collect,
    validate_date,
    validate_date_order,
    validate_list,
    validate_non_empty_string,
    validate_range,
    validate_timecode,
    validate_timecode_order,
)


VALID_CODE_PAGE_NUMBERS = (
    CodePageNumber.UNITED_STATES,
    CodePageNumber.MULTILINGUAL,
    CodePageNumber.PORTUGAL,
    CodePageNumber.CANADIAN_FRENCH,
    CodePageNumber.NORDIC,
)
VALID_DISK_FORMAT_CODES = (DiskFormatCode.STL25_01, DiskFormatCode.STL30_01)
VALID_DISPLAY_STANDARD_CODES = tuple(DisplayStandardCode)
VALID_CHARACTER_CODE_TABLES = tuple(
    cct for cct in CharacterCodeTable if cct != CharacterCodeTable.INVALID
)
VALID_LANGUAGE_CODES = tuple(lc for lc in LanguageCode if lc != LanguageCode.INVALID)
VALID_TIME_CODE_STATUSES = (
    TimeCodeStatus.NOT_INTENDED_FOR_USE,
    TimeCodeStatus.INTENDED_FOR_USE,
)


def validate_gsi(gsi: GSIBlock) -> List[ValidationError]:
    """
    Check a decoded GSI block against EBU Tech 3264.

    Returns the non-fatal violations in field order. An unsupported Disk
    Format Code is fatal: without a frame-rate no timecode can be checked,
    so the ValidationError is raised and the remaining fields are skipped.
    """
    warns: List[ValidationError] = []

    collect(
        warns,
        validate_list(
            gsi.code_page_number, VALID_CODE_PAGE_NUMBERS, ErrorKind.UNSUPPORTED_CPN
        ),
        GSIField.CPN,
    )
    collect(
        warns,
        validate_list(
            gsi.disk_format_code,
            VALID_DISK_FORMAT_CODES,
            ErrorKind.UNSUPPORTED_DFC,
            fatal=True,
        ),
        GSIField.DFC,
    )
    framerate = gsi.framerate

    collect(
        warns,
        validate_list(
            gsi.display_standard_code,
            VALID_DISPLAY_STANDARD_CODES,
            ErrorKind.UNSUPPORTED_DSC,
        ),
        GSIField.DSC,
    )
    collect(
        warns,
        validate_list(
            gsi.character_code_table,
            VALID_CHARACTER_CODE_TABLES,
            ErrorKind.UNSUPPORTED_CCT,
        ),
        GSIField.CCT,
    )
    collect(
        warns,
        validate_list(gsi.language_code, VALID_LANGUAGE_CODES, ErrorKind.UNSUPPORTED_LC),
        GSIField.LC,
    )

    # Descriptive text fields
    for field, value, kind in (
        (GSIField.OPT, gsi.original_program_title, ErrorKind.EMPTY_OPT),
        (GSIField.OET, gsi.original_episode_title, ErrorKind.EMPTY_OET),
        (GSIField.TPT, gsi.translated_program_title, ErrorKind.EMPTY_TPT),
        (GSIField.TET, gsi.translated_episode_title, ErrorKind.EMPTY_TET),
        (GSIField.TN, gsi.translator_name, ErrorKind.EMPTY_TN),
        (GSIField.TCD, gsi.translator_contact_details, ErrorKind.EMPTY_TCD),
        (GSIField.SLR, gsi.subtitle_list_reference_code, ErrorKind.EMPTY_SLR),
    ):
        collect(warns, validate_non_empty_string(value, kind), field)

    # Dates
    collect(warns, validate_date(gsi.creation_date, ErrorKind.EMPTY_CD), GSIField.CD)
    collect(warns, validate_date(gsi.revision_date, ErrorKind.EMPTY_RD), GSIField.RD)
    collect(
        warns,
        validate_date_order(
            gsi.creation_date, gsi.revision_date, ErrorKind.INVALID_CD_RD_ORDER
        ),
        GSIField.RD,
    )

    # Counters
    collect(
        warns,
        validate_range(gsi.revision_number, 0, 99, ErrorKind.UNSUPPORTED_RN),
        GSIField.RN,
    )
    collect(
        warns,
        validate_range(gsi.total_tti_blocks, 0, 99999, ErrorKind.UNSUPPORTED_TNB),
        GSIField.TNB,
    )
    collect(
        warns,
        validate_range(gsi.total_subtitles, 0, 99999, ErrorKind.UNSUPPORTED_TNS),
        GSIField.TNS,
    )
    collect(
        warns,
        validate_range(gsi.total_subtitle_groups, 0, 999, ErrorKind.UNSUPPORTED_TNG),
        GSIField.TNG,
    )
    collect(
        warns,
        validate_range(gsi.max_characters_per_row, 0, 99, ErrorKind.UNSUPPORTED_MNC),
        GSIField.MNC,
    )
    if gsi.is_teletext:
        mnr_error = validate_range(
            gsi.max_rows, 0, 23, ErrorKind.UNSUPPORTED_MNR_TELETEXT
        )
    else:
        mnr_error = validate_range(gsi.max_rows, 0, 99, ErrorKind.UNSUPPORTED_MNR)
    collect(warns, mnr_error, GSIField.MNR)

    # Timecodes
    collect(
        warns,
        validate_list(
            gsi.time_code_status, VALID_TIME_CODE_STATUSES, ErrorKind.UNSUPPORTED_TCS
        ),
        GSIField.TCS,
    )
    for field, tc, empty, invalid in (
        (
            GSIField.TCP,
            gsi.time_code_start_of_program,
            ErrorKind.EMPTY_TCP,
            ErrorKind.INVALID_TCP,
        ),
        (
            GSIField.TCF,
            gsi.time_code_first_in_cue,
            ErrorKind.EMPTY_TCF,
            ErrorKind.INVALID_TCF,
        ),
    ):
        kind = empty if tc is None else invalid
        collect(warns, validate_timecode(tc, framerate, kind), field)
    collect(
        warns,
        validate_timecode_order(
            gsi.time_code_start_of_program,
            gsi.time_code_first_in_cue,
            framerate,
            ErrorKind.INVALID_TCP_TCF_ORDER,
        ),
        GSIField.TCF,
    )

    # Disks
    collect(
        warns,
        validate_range(gsi.total_disks, 1, 9, ErrorKind.UNSUPPORTED_TND),
        GSIField.TND,
    )
    collect(
        warns,
        validate_range(
            gsi.disk_sequence_number,
            1,
            gsi.total_disks if gsi.total_disks is not None else 9,
            ErrorKind.UNSUPPORTED_DSN,
        ),
        GSIField.DSN,
    )

    # Origin and editor
    for field, value, kind in (
        (GSIField.CO, gsi.country_of_origin, ErrorKind.EMPTY_CO),
        (GSIField.PUB, gsi.publisher, ErrorKind.EMPTY_PUB),
        (GSIField.EN, gsi.editor_name, ErrorKind.EMPTY_EN),
        (GSIField.ECD, gsi.editor_contact_details, ErrorKind.EMPTY_ECD),
    ):
        collect(warns, validate_non_empty_string(value, kind), field)

    return warns
