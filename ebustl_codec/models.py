"""
EBU STL Models - Data structures and type definitions.

Contains:
- Enums for every coded GSI and TTI field
- Enums for the text field control codes
- Field identifiers used to tag errors
- Timecode, GSIBlock, TTIBlock and STLFile dataclasses
"""

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Type, Union

from ebustl_codec.errors import DecodeFieldError, EncodeFieldError
from ebustl_codec.text_encoding import decode_tti_text_field, encode_tti_text_field


GSI_BLOCK_SIZE = 1024
TTI_BLOCK_SIZE = 128
TEXT_FIELD_SIZE = 112
USER_DEFINED_AREA_SIZE = 576

# Extension Block Number markers
EBN_LAST = 0xFF
EBN_USER_DATA = 0xFE
EBN_RESERVED_FIRST = 0xF0
EBN_RESERVED_LAST = 0xFD


# =============================================================================
# Text Field Control Codes
# =============================================================================


class TeletextControlCode(IntEnum):
    """Teletext spacing attributes usable inside the Text Field (0x00-0x1F)"""

    ALPHA_BLACK = 0x00
    ALPHA_RED = 0x01
    ALPHA_GREEN = 0x02
    ALPHA_YELLOW = 0x03
    ALPHA_BLUE = 0x04
    ALPHA_MAGENTA = 0x05
    ALPHA_CYAN = 0x06
    ALPHA_WHITE = 0x07
    FLASH = 0x08
    STEADY = 0x09
    END_BOX = 0x0A
    START_BOX = 0x0B
    NORMAL_HEIGHT = 0x0C
    DOUBLE_HEIGHT = 0x0D
    DOUBLE_WIDTH = 0x0E
    DOUBLE_SIZE = 0x0F
    MOSAIC_BLACK = 0x10
    MOSAIC_RED = 0x11
    MOSAIC_GREEN = 0x12
    MOSAIC_YELLOW = 0x13
    MOSAIC_BLUE = 0x14
    MOSAIC_MAGENTA = 0x15
    MOSAIC_CYAN = 0x16
    MOSAIC_WHITE = 0x17
    CONCEAL = 0x18
    CONTIGUOUS_MOSAIC = 0x19
    SEPARATED_MOSAIC = 0x1A
    ESC = 0x1B
    BLACK_BACKGROUND = 0x1C
    NEW_BACKGROUND = 0x1D
    HOLD_MOSAIC = 0x1E
    RELEASE_MOSAIC = 0x1F


class EBUSTLControlCode(IntEnum):
    """EBU STL Text Field control codes (0x80-0x8F)"""

    ITALIC_ON = 0x80
    ITALIC_OFF = 0x81
    UNDERLINE_ON = 0x82
    UNDERLINE_OFF = 0x83
    BOXING_ON = 0x84
    BOXING_OFF = 0x85
    NEWLINE = 0x8A
    UNUSED_SPACE = 0x8F


# =============================================================================
# GSI Coded Fields
# =============================================================================


class CodePageNumber(IntEnum):
    """Code page of the GSI block text fields (CPN)"""

    INVALID = -1
    UNITED_STATES = 437
    MULTILINGUAL = 850
    PORTUGAL = 860
    CANADIAN_FRENCH = 863
    NORDIC = 865


class DiskFormatCode:
    """Disk Format Codes (DFC) carrying the frame-rate"""

    STL25_01 = "STL25.01"
    STL30_01 = "STL30.01"


class DisplayStandardCode(IntEnum):
    """Display Standard Code (DSC); a blank byte means undefined"""

    BLANK = 0xFF
    OPEN_SUBTITLING = 0x00
    LEVEL1_TELETEXT = 0x01
    LEVEL2_TELETEXT = 0x02


class CharacterCodeTable(IntEnum):
    """Character Code Table (CCT) of the TTI Text Field"""

    INVALID = 0xFF
    LATIN = 0x00
    LATIN_CYRILLIC = 0x01
    LATIN_ARABIC = 0x02
    LATIN_GREEK = 0x03
    LATIN_HEBREW = 0x04


class LanguageCode(IntEnum):
    """Language Code (LC), EBU Tech 3264 Appendix 3"""

    INVALID = 0xFF
    UNKNOWN = 0x00
    ALBANIAN = 0x01
    BRETON = 0x02
    CATALAN = 0x03
    CROATIAN = 0x04
    WELSH = 0x05
    CZECH = 0x06
    DANISH = 0x07
    GERMAN = 0x08
    ENGLISH = 0x09
    SPANISH = 0x0A
    ESPERANTO = 0x0B
    ESTONIAN = 0x0C
    BASQUE = 0x0D
    FAROESE = 0x0E
    FRENCH = 0x0F
    FRISIAN = 0x10
    IRISH = 0x11
    GAELIC = 0x12
    GALICIAN = 0x13
    ICELANDIC = 0x14
    ITALIAN = 0x15
    LAPPISH = 0x16
    LATIN = 0x17
    LATVIAN = 0x18
    LUXEMBOURGIAN = 0x19
    LITHUANIAN = 0x1A
    HUNGARIAN = 0x1B
    MALTESE = 0x1C
    DUTCH = 0x1D
    NORWEGIAN = 0x1E
    OCCITAN = 0x1F
    POLISH = 0x20
    PORTUGESE = 0x21
    ROMANIAN = 0x22
    ROMANSH = 0x23
    SERBIAN = 0x24
    SLOVAK = 0x25
    SLOVENIAN = 0x26
    FINNISH = 0x27
    SWEDISH = 0x28
    TURKISH = 0x29
    FLEMISH = 0x2A
    WALLON = 0x2B
    ZULU = 0x45
    VIETNAMESE = 0x46
    UZBEK = 0x47
    URDU = 0x48
    UKRAINIAN = 0x49
    THAI = 0x4A
    TELUGU = 0x4B
    TATAR = 0x4C
    TAMIL = 0x4D
    TADZHIK = 0x4E
    SWAHILI = 0x4F
    SRANAN_TONGO = 0x50
    SOMALI = 0x51
    SINHALESE = 0x52
    SHONA = 0x53
    SERBO_CROAT = 0x54
    RUTHENIAN = 0x55
    RUSSIAN = 0x56
    QUECHUA = 0x57
    PUSHTU = 0x58
    PUNJABI = 0x59
    PERSIAN = 0x5A
    PAPAMIENTO = 0x5B
    ORIYA = 0x5C
    NEPALI = 0x5D
    NDEBELE = 0x5E
    MARATHI = 0x5F
    MOLDAVIAN = 0x60
    MALAYSIAN = 0x61
    MALAGASAY = 0x62
    MACEDONIAN = 0x63
    LAOTIAN = 0x64
    KOREAN = 0x65
    KHMER = 0x66
    KAZAKH = 0x67
    KANNADA = 0x68
    JAPANESE = 0x69
    INDONESIAN = 0x6A
    HINDI = 0x6B
    HEBREW = 0x6C
    HAUSA = 0x6D
    GURANI = 0x6E
    GUJURATI = 0x6F
    GREEK = 0x70
    GEORGIAN = 0x71
    FULANI = 0x72
    DARI = 0x73
    CHURASH = 0x74
    CHINESE = 0x75
    BURMESE = 0x76
    BULGARIAN = 0x77
    BENGALI = 0x78
    BIELORUSSIAN = 0x79
    BAMBORA = 0x7A
    AZERBAIJANI = 0x7B
    ASSAMESE = 0x7C
    ARMENIAN = 0x7D
    ARABIC = 0x7E
    AMHARIC = 0x7F


# EBU Tech 3264 Language Code -> ISO 639 code
EBU_LANGUAGE_CODES: Dict[int, str] = {
    LanguageCode.UNKNOWN: "",
    LanguageCode.ALBANIAN: "sq",
    LanguageCode.BRETON: "br",
    LanguageCode.CATALAN: "ca",
    LanguageCode.CROATIAN: "hr",
    LanguageCode.WELSH: "cy",
    LanguageCode.CZECH: "cs",
    LanguageCode.DANISH: "da",
    LanguageCode.GERMAN: "de",
    LanguageCode.ENGLISH: "en",
    LanguageCode.SPANISH: "es",
    LanguageCode.ESPERANTO: "eo",
    LanguageCode.ESTONIAN: "et",
    LanguageCode.BASQUE: "eu",
    LanguageCode.FAROESE: "fo",
    LanguageCode.FRENCH: "fr",
    LanguageCode.FRISIAN: "fy",
    LanguageCode.IRISH: "ga",
    LanguageCode.GAELIC: "gd",
    LanguageCode.GALICIAN: "gl",
    LanguageCode.ICELANDIC: "is",
    LanguageCode.ITALIAN: "it",
    LanguageCode.LAPPISH: "se",
    LanguageCode.LATIN: "la",
    LanguageCode.LATVIAN: "lv",
    LanguageCode.LUXEMBOURGIAN: "lb",
    LanguageCode.LITHUANIAN: "lt",
    LanguageCode.HUNGARIAN: "hu",
    LanguageCode.MALTESE: "mt",
    LanguageCode.DUTCH: "nl",
    LanguageCode.NORWEGIAN: "no",
    LanguageCode.OCCITAN: "oc",
    LanguageCode.POLISH: "pl",
    LanguageCode.PORTUGESE: "pt",
    LanguageCode.ROMANIAN: "ro",
    LanguageCode.ROMANSH: "rm",
    LanguageCode.SERBIAN: "sr",
    LanguageCode.SLOVAK: "sk",
    LanguageCode.SLOVENIAN: "sl",
    LanguageCode.FINNISH: "fi",
    LanguageCode.SWEDISH: "sv",
    LanguageCode.TURKISH: "tr",
    LanguageCode.FLEMISH: "nl-BE",
    LanguageCode.WALLON: "wa",
    LanguageCode.ZULU: "zu",
    LanguageCode.VIETNAMESE: "vi",
    LanguageCode.UZBEK: "uz",
    LanguageCode.URDU: "ur",
    LanguageCode.UKRAINIAN: "uk",
    LanguageCode.THAI: "th",
    LanguageCode.TELUGU: "te",
    LanguageCode.TATAR: "tt",
    LanguageCode.TAMIL: "ta",
    LanguageCode.TADZHIK: "tg",
    LanguageCode.SWAHILI: "sw",
    LanguageCode.SRANAN_TONGO: "srn",
    LanguageCode.SOMALI: "so",
    LanguageCode.SINHALESE: "si",
    LanguageCode.SHONA: "sn",
    LanguageCode.SERBO_CROAT: "sh",
    LanguageCode.RUTHENIAN: "rue",
    LanguageCode.RUSSIAN: "ru",
    LanguageCode.QUECHUA: "qu",
    LanguageCode.PUSHTU: "ps",
    LanguageCode.PUNJABI: "pa",
    LanguageCode.PERSIAN: "fa",
    LanguageCode.PAPAMIENTO: "pap",
    LanguageCode.ORIYA: "or",
    LanguageCode.NEPALI: "ne",
    LanguageCode.NDEBELE: "nd",
    LanguageCode.MARATHI: "mr",
    LanguageCode.MOLDAVIAN: "mo",
    LanguageCode.MALAYSIAN: "ms",
    LanguageCode.MALAGASAY: "mg",
    LanguageCode.MACEDONIAN: "mk",
    LanguageCode.LAOTIAN: "lo",
    LanguageCode.KOREAN: "ko",
    LanguageCode.KHMER: "km",
    LanguageCode.KAZAKH: "kk",
    LanguageCode.KANNADA: "kn",
    LanguageCode.JAPANESE: "ja",
    LanguageCode.INDONESIAN: "id",
    LanguageCode.HINDI: "hi",
    LanguageCode.HEBREW: "he",
    LanguageCode.HAUSA: "ha",
    LanguageCode.GURANI: "gn",
    LanguageCode.GUJURATI: "gu",
    LanguageCode.GREEK: "el",
    LanguageCode.GEORGIAN: "ka",
    LanguageCode.FULANI: "ff",
    LanguageCode.DARI: "prs",
    LanguageCode.CHURASH: "cv",
    LanguageCode.CHINESE: "zh",
    LanguageCode.BURMESE: "my",
    LanguageCode.BULGARIAN: "bg",
    LanguageCode.BENGALI: "bn",
    LanguageCode.BIELORUSSIAN: "be",
    LanguageCode.BAMBORA: "bm",
    LanguageCode.AZERBAIJANI: "az",
    LanguageCode.ASSAMESE: "as",
    LanguageCode.ARMENIAN: "hy",
    LanguageCode.ARABIC: "ar",
    LanguageCode.AMHARIC: "am",
}


class TimeCodeStatus(IntEnum):
    """Time Code Status (TCS)"""

    INVALID = 0xFF
    NOT_INTENDED_FOR_USE = 0x00
    INTENDED_FOR_USE = 0x01


# =============================================================================
# TTI Coded Fields
# =============================================================================


class CumulativeStatus(IntEnum):
    """Cumulative Status (CS)"""

    INVALID = 0xFF
    NONE = 0x00
    FIRST = 0x01
    INTERMEDIATE = 0x02
    LAST = 0x03


class JustificationCode(IntEnum):
    """Justification Code (JC)"""

    INVALID = 0xFF
    UNCHANGED = 0x00
    LEFT = 0x01
    CENTERED = 0x02
    RIGHT = 0x03


class CommentFlag(IntEnum):
    """Comment Flag (CF)"""

    INVALID = 0xFF
    SUBTITLE_DATA = 0x00
    TRANSLATOR_COMMENTS = 0x01


# Human readable names, keyed per enum since members of different enums
# share integer values.
ENUM_NAMES: Dict[Type[IntEnum], Dict[int, str]] = {
    CodePageNumber: {
        CodePageNumber.INVALID: "<invalid>",
        CodePageNumber.UNITED_STATES: "United States",
        CodePageNumber.MULTILINGUAL: "Multilingual",
        CodePageNumber.PORTUGAL: "Portugal",
        CodePageNumber.CANADIAN_FRENCH: "Canadian/French",
        CodePageNumber.NORDIC: "Nordic",
    },
    DisplayStandardCode: {
        DisplayStandardCode.BLANK: "Blank",
        DisplayStandardCode.OPEN_SUBTITLING: "Open Subtitling",
        DisplayStandardCode.LEVEL1_TELETEXT: "Level-1 Teletext",
        DisplayStandardCode.LEVEL2_TELETEXT: "Level-2 Teletext",
    },
    CharacterCodeTable: {
        CharacterCodeTable.INVALID: "<invalid>",
        CharacterCodeTable.LATIN: "Latin",
        CharacterCodeTable.LATIN_CYRILLIC: "Latin/Cyrillic",
        CharacterCodeTable.LATIN_ARABIC: "Latin/Arabic",
        CharacterCodeTable.LATIN_GREEK: "Latin/Greek",
        CharacterCodeTable.LATIN_HEBREW: "Latin/Hebrew",
    },
    TimeCodeStatus: {
        TimeCodeStatus.INVALID: "<invalid>",
        TimeCodeStatus.NOT_INTENDED_FOR_USE: "Not intended for use",
        TimeCodeStatus.INTENDED_FOR_USE: "Intended for use",
    },
    CumulativeStatus: {
        CumulativeStatus.INVALID: "<invalid>",
        CumulativeStatus.NONE: "None",
        CumulativeStatus.FIRST: "First",
        CumulativeStatus.INTERMEDIATE: "Intermediate",
        CumulativeStatus.LAST: "Last",
    },
    JustificationCode: {
        JustificationCode.INVALID: "<invalid>",
        JustificationCode.UNCHANGED: "Unchanged presentation",
        JustificationCode.LEFT: "Left-justified text",
        JustificationCode.CENTERED: "Centered text",
        JustificationCode.RIGHT: "Right-justified text",
    },
    CommentFlag: {
        CommentFlag.INVALID: "<invalid>",
        CommentFlag.SUBTITLE_DATA: "Subtitle data",
        CommentFlag.TRANSLATOR_COMMENTS: "Translator's comments",
    },
}


def coerce_enum(enum_cls: Type[IntEnum], value: Optional[int]) -> Optional[int]:
    """
    Return the enum member for value, or value itself when it is not a
    member. Out-of-list values must survive decoding so that validation
    can report them.
    """
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return value


def describe(enum_cls: Type[IntEnum], value: Optional[int]) -> str:
    """Human readable name of a coded field value ("Unknown" if unlisted)."""
    if enum_cls is LanguageCode:
        if value == LanguageCode.INVALID:
            return "<invalid>"
        try:
            return LanguageCode(value).name.replace("_", " ").title()
        except ValueError:
            return "Unknown"
    return ENUM_NAMES.get(enum_cls, {}).get(value, "Unknown")


# =============================================================================
# Field Identifiers
# =============================================================================


class GSIField(str, Enum):
    """GSI field tags, used to locate decode and validation errors."""

    CPN = "CPN"
    DFC = "DFC"
    DSC = "DSC"
    CCT = "CCT"
    LC = "LC"
    OPT = "OPT"
    OET = "OET"
    TPT = "TPT"
    TET = "TET"
    TN = "TN"
    TCD = "TCD"
    SLR = "SLR"
    CD = "CD"
    RD = "RD"
    RN = "RN"
    TNB = "TNB"
    TNS = "TNS"
    TNG = "TNG"
    MNC = "MNC"
    MNR = "MNR"
    TCS = "TCS"
    TCP = "TCP"
    TCF = "TCF"
    TND = "TND"
    DSN = "DSN"
    CO = "CO"
    PUB = "PUB"
    EN = "EN"
    ECD = "ECD"
    UDA = "UDA"


class TTIField(str, Enum):
    """TTI field tags, used to locate decode and validation errors."""

    SGN = "SGN"
    SN = "SN"
    EBN = "EBN"
    CS = "CS"
    TCI = "TCI"
    TCO = "TCO"
    VP = "VP"
    JC = "JC"
    CF = "CF"
    TF = "TF"


# =============================================================================
# Timecode
# =============================================================================


@dataclass
class Timecode:
    """A temporal position expressed as HH:MM:SS:FF."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    frames: int = 0

    def __str__(self) -> str:
        return (
            f"{self.hours:02d}:{self.minutes:02d}:"
            f"{self.seconds:02d}:{self.frames:02d}"
        )

    def to_frames(self, framerate: int) -> int:
        """Total number of frames since 00:00:00:00."""
        return (
            self.hours * 3600 * framerate
            + self.minutes * 60 * framerate
            + self.seconds * framerate
            + self.frames
        )

    @classmethod
    def from_frames(cls, frames: int, framerate: int) -> "Timecode":
        hours, frames = divmod(frames, 3600 * framerate)
        minutes, frames = divmod(frames, 60 * framerate)
        seconds, frames = divmod(frames, framerate)
        return cls(hours, minutes, seconds, frames)

    def to_seconds(self, framerate: int) -> float:
        return self.to_frames(framerate) / framerate

    @classmethod
    def from_seconds(cls, seconds: float, framerate: int) -> "Timecode":
        return cls.from_frames(int(round(seconds * framerate)), framerate)

    def correct(self, framerate: int) -> "Timecode":
        """
        Return a copy with every component brought back into range,
        e.g. 00:00:00:30 at 25 fps becomes 00:00:01:05.
        """
        return Timecode.from_frames(self.to_frames(framerate), framerate)

    def validate(self, framerate: int) -> Optional[str]:
        """Return the reason this timecode is invalid, or None."""
        if not 0 <= self.hours <= 23:
            return f"hours out of range: {self.hours}"
        if not 0 <= self.minutes <= 59:
            return f"minutes out of range: {self.minutes}"
        if not 0 <= self.seconds <= 59:
            return f"seconds out of range: {self.seconds}"
        if not 0 <= self.frames < framerate:
            return f"frames out of range for {framerate} fps: {self.frames}"
        return None


# =============================================================================
# GSI Block
# =============================================================================


def derive_framerate_from_dfc(dfc: Optional[str]) -> int:
    """
    Frame-rate carried by the Disk Format Code (DFC).
    Only STL25.01 and STL30.01 are defined; anything else yields 0.
    """
    if dfc == DiskFormatCode.STL25_01:
        return 25
    if dfc == DiskFormatCode.STL30_01:
        return 30
    return 0


@dataclass
class GSIBlock:
    """General Subtitle Information block (first 1024 bytes of the file)."""

    code_page_number: int = CodePageNumber.INVALID
    disk_format_code: str = ""
    display_standard_code: int = DisplayStandardCode.BLANK
    character_code_table: int = CharacterCodeTable.INVALID
    language_code: int = LanguageCode.INVALID
    original_program_title: str = ""
    original_episode_title: str = ""
    translated_program_title: str = ""
    translated_episode_title: str = ""
    translator_name: str = ""
    translator_contact_details: str = ""
    subtitle_list_reference_code: str = ""
    creation_date: Optional[date] = None
    revision_date: Optional[date] = None
    revision_number: Optional[int] = None
    total_tti_blocks: Optional[int] = None
    total_subtitles: Optional[int] = None
    total_subtitle_groups: Optional[int] = None
    max_characters_per_row: Optional[int] = None
    max_rows: Optional[int] = None
    time_code_status: int = TimeCodeStatus.INVALID
    time_code_start_of_program: Optional[Timecode] = None
    time_code_first_in_cue: Optional[Timecode] = None
    total_disks: Optional[int] = None
    disk_sequence_number: Optional[int] = None
    country_of_origin: str = ""
    publisher: str = ""
    editor_name: str = ""
    editor_contact_details: str = ""
    user_defined_area: bytes = b""

    def reset(self) -> None:
        """Put every field back to its "absent" sentinel."""
        for f in fields(self):
            setattr(self, f.name, f.default)

    @property
    def framerate(self) -> int:
        return derive_framerate_from_dfc(self.disk_format_code)

    @property
    def is_teletext(self) -> bool:
        return self.display_standard_code in (
            DisplayStandardCode.LEVEL1_TELETEXT,
            DisplayStandardCode.LEVEL2_TELETEXT,
        )


# =============================================================================
# TTI Block
# =============================================================================


@dataclass
class TTIBlock:
    """Text and Timing Information block (one 128-byte record)."""

    subtitle_group_number: Optional[int] = None
    subtitle_number: Optional[int] = None
    extension_block_number: Optional[int] = None
    cumulative_status: int = CumulativeStatus.INVALID
    time_code_in: Timecode = field(default_factory=Timecode)
    time_code_out: Timecode = field(default_factory=Timecode)
    vertical_position: Optional[int] = None
    justification_code: int = JustificationCode.INVALID
    comment_flag: int = CommentFlag.INVALID
    # Raw Text Field bytes, trailing unused space removed
    text_field: bytes = b""
    # Whether byte 127 of the record held the unused space code
    terminated_by_unused_space: bool = field(default=True, compare=False, repr=False)

    def reset(self) -> None:
        self.subtitle_group_number = None
        self.subtitle_number = None
        self.extension_block_number = None
        self.cumulative_status = CumulativeStatus.INVALID
        self.time_code_in = Timecode()
        self.time_code_out = Timecode()
        self.vertical_position = None
        self.justification_code = JustificationCode.INVALID
        self.comment_flag = CommentFlag.INVALID
        self.text_field = b""
        self.terminated_by_unused_space = True

    def text(self, cct: Union[CharacterCodeTable, int]) -> str:
        """Decode the Text Field with the given character code table."""
        try:
            return decode_tti_text_field(self.text_field, cct)
        except DecodeFieldError as e:
            e.field = TTIField.TF
            raise

    def set_text(self, text: str, cct: Union[CharacterCodeTable, int]) -> None:
        """Encode text into the Text Field with the given character code table."""
        try:
            encoded = encode_tti_text_field(text, cct)[:TEXT_FIELD_SIZE]
        except EncodeFieldError as e:
            e.field = TTIField.TF
            raise
        self.text_field = encoded
        self.terminated_by_unused_space = len(encoded) < TEXT_FIELD_SIZE


# =============================================================================
# STL File
# =============================================================================


@dataclass
class STLFile:
    """One GSI block followed by the TTI blocks in file order."""

    gsi: GSIBlock = field(default_factory=GSIBlock)
    tti: List[TTIBlock] = field(default_factory=list)
