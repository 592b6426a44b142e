"""
EBU STL Text Encoding - Character sets of the GSI and TTI text fields.

Contains:
- TextCodec interface and a Charmap wrapper around Python codecs
- ISO 6937 codec for the Latin character code table (CCT 00)
- Registries mapping Code Page Numbers and Character Code Tables to codecs
- TTI Text Field transcoding helpers
"""

import unicodedata
from typing import Dict, Optional

from ebustl_codec.errors import DecodeFieldError, EncodeFieldError, ErrorKind


# =============================================================================
# Codecs
# =============================================================================


class TextCodec:
    """Bidirectional transcoder between a byte character set and str."""

    name = "text"

    def decode(self, data: bytes) -> str:
        raise NotImplementedError

    def encode(self, text: str) -> bytes:
        raise NotImplementedError


class Charmap(TextCodec):
    """
    Single-byte character set backed by a Python codec.

    Decoding is strict; encoding replaces unmappable characters with "?".
    """

    def __init__(self, codec_name: str):
        self.name = codec_name

    def decode(self, data: bytes) -> str:
        return data.decode(self.name)

    def encode(self, text: str) -> bytes:
        return text.encode(self.name, errors="replace")

    def __repr__(self) -> str:
        return f"Charmap({self.name!r})"


# ISO 6937 non-spacing diacritical marks (prefix byte -> combining character)
ISO6937_DIACRITICS: Dict[int, str] = {
    0xC1: "\u0300",  # grave
    0xC2: "\u0301",  # acute
    0xC3: "\u0302",  # circumflex
    0xC4: "\u0303",  # tilde
    0xC5: "\u0304",  # macron
    0xC6: "\u0306",  # breve
    0xC7: "\u0307",  # dot above
    0xC8: "\u0308",  # diaeresis
    0xCA: "\u030a",  # ring above
    0xCB: "\u0327",  # cedilla
    0xCD: "\u030b",  # double acute
    0xCE: "\u0328",  # ogonek
    0xCF: "\u030c",  # caron
}

# ISO 6937 spacing characters of the upper half, other than diacritics
ISO6937_UPPER: Dict[int, str] = {
    0xA0: "\u00a0",
    0xA1: "¡",
    0xA2: "¢",
    0xA3: "£",
    0xA5: "¥",
    0xA7: "§",
    0xA8: "¤",
    0xA9: "‘",
    0xAA: "“",
    0xAB: "«",
    0xAC: "←",
    0xAD: "↑",
    0xAE: "→",
    0xAF: "↓",
    0xB0: "°",
    0xB1: "±",
    0xB2: "²",
    0xB3: "³",
    0xB4: "×",
    0xB5: "µ",
    0xB6: "¶",
    0xB7: "·",
    0xB8: "÷",
    0xB9: "’",
    0xBA: "”",
    0xBB: "»",
    0xBC: "¼",
    0xBD: "½",
    0xBE: "¾",
    0xBF: "¿",
    0xD0: "―",
    0xD1: "¹",
    0xD2: "®",
    0xD3: "©",
    0xD4: "™",
    0xD5: "♪",
    0xD6: "¬",
    0xD7: "¦",
    0xDC: "⅛",
    0xDD: "⅜",
    0xDE: "⅝",
    0xDF: "⅞",
    0xE0: "\u2126",
    0xE1: "Æ",
    0xE2: "Đ",
    0xE3: "ª",
    0xE4: "Ħ",
    0xE6: "Ĳ",
    0xE7: "Ŀ",
    0xE8: "Ł",
    0xE9: "Ø",
    0xEA: "Œ",
    0xEB: "º",
    0xEC: "Þ",
    0xED: "Ŧ",
    0xEE: "Ŋ",
    0xEF: "ŉ",
    0xF0: "ĸ",
    0xF1: "æ",
    0xF2: "đ",
    0xF3: "ð",
    0xF4: "ħ",
    0xF5: "ı",
    0xF6: "ĳ",
    0xF7: "ŀ",
    0xF8: "ł",
    0xF9: "ø",
    0xFA: "œ",
    0xFB: "ß",
    0xFC: "þ",
    0xFD: "ŧ",
    0xFE: "ŋ",
    0xFF: "\u00ad",
}


def _build_iso6937_decoding_table() -> Dict[int, str]:
    # 0x00-0x9F pass through: ASCII, teletext spacing attributes and the
    # EBU STL control codes (0x80-0x8F) all keep their byte value.
    table = {b: chr(b) for b in range(0xA0)}
    table.update(ISO6937_UPPER)
    return table


class ISO6937(TextCodec):
    """
    ISO/IEC 6937 codec, as used by the Latin character code table.

    Diacritics are sent as a non-spacing prefix byte (0xC1-0xCF) followed
    by the base letter. Decoded text is NFC-normalized.
    """

    name = "iso6937"

    DECODING_TABLE = _build_iso6937_decoding_table()
    ENCODING_TABLE = {char: byte for byte, char in DECODING_TABLE.items()}
    # NFD turns the ohm sign into the Greek capital omega
    ENCODING_TABLE["\u03a9"] = 0xE0
    DIACRITIC_PREFIXES = {char: byte for byte, char in ISO6937_DIACRITICS.items()}

    def decode(self, data: bytes) -> str:
        chars = []
        i = 0
        while i < len(data):
            byte = data[i]
            mark = ISO6937_DIACRITICS.get(byte)
            if mark is not None:
                if i + 1 >= len(data):
                    raise UnicodeDecodeError(
                        self.name, data, i, i + 1, "diacritic without base character"
                    )
                base = self.DECODING_TABLE.get(data[i + 1])
                if base is None:
                    raise UnicodeDecodeError(
                        self.name, data, i + 1, i + 2, "undefined character"
                    )
                chars.append(base + mark)
                i += 2
                continue
            char = self.DECODING_TABLE.get(byte)
            if char is None:
                raise UnicodeDecodeError(
                    self.name, data, i, i + 1, "undefined character"
                )
            chars.append(char)
            i += 1
        return unicodedata.normalize("NFC", "".join(chars))

    def encode(self, text: str) -> bytes:
        decomposed = unicodedata.normalize("NFD", text)
        out = bytearray()
        i = 0
        while i < len(decomposed):
            char = decomposed[i]
            if unicodedata.combining(char):
                raise UnicodeEncodeError(
                    self.name, decomposed, i, i + 1, "combining mark without base"
                )
            end = i + 1
            while end < len(decomposed) and unicodedata.combining(decomposed[end]):
                end += 1
            marks = decomposed[i + 1 : end]
            byte = self.ENCODING_TABLE.get(char)
            if byte is None:
                out.append(0x3F)
            elif not marks:
                out.append(byte)
            elif marks in self.DIACRITIC_PREFIXES:
                out.append(self.DIACRITIC_PREFIXES[marks])
                out.append(byte)
            else:
                # Only one diacritic per character can be expressed
                out.append(0x3F)
            i = end
        return bytes(out)

    def __repr__(self) -> str:
        return "ISO6937()"


# =============================================================================
# Registries
# =============================================================================


# Code Page Number (GSI) -> codec
CODE_PAGE_CODECS: Dict[int, TextCodec] = {
    437: Charmap("cp437"),
    850: Charmap("cp850"),
    860: Charmap("cp860"),
    863: Charmap("cp863"),
    865: Charmap("cp865"),
}

# Character Code Table (TTI Text Field) -> codec
CHARACTER_CODE_TABLE_CODECS: Dict[int, TextCodec] = {
    0x00: ISO6937(),
    0x01: Charmap("iso8859_5"),
    0x02: Charmap("iso8859_6"),
    0x03: Charmap("iso8859_7"),
    0x04: Charmap("iso8859_8"),
}


def get_code_page_codec(cpn: Optional[int]) -> Optional[TextCodec]:
    return CODE_PAGE_CODECS.get(cpn)


def get_character_code_table_codec(cct: Optional[int]) -> Optional[TextCodec]:
    return CHARACTER_CODE_TABLE_CODECS.get(cct)


# =============================================================================
# TTI Text Field
# =============================================================================


def decode_tti_text_field(tf: bytes, cct: Optional[int]) -> str:
    """
    Transcode raw Text Field bytes with the given character code table.

    Control codes are kept in the returned text as their code points.
    """
    codec = get_character_code_table_codec(cct)
    if codec is None:
        raise DecodeFieldError(ErrorKind.UNSUPPORTED_CHARACTER_CODE_TABLE, raw=tf)
    try:
        return codec.decode(tf)
    except UnicodeDecodeError as e:
        raise DecodeFieldError(ErrorKind.INVALID_TTI_STRING_VALUE, raw=tf) from e


def encode_tti_text_field(text: str, cct: Optional[int]) -> bytes:
    codec = get_character_code_table_codec(cct)
    if codec is None:
        raise EncodeFieldError(ErrorKind.UNSUPPORTED_CHARACTER_CODE_TABLE, value=text)
    try:
        return codec.encode(text)
    except UnicodeEncodeError as e:
        raise EncodeFieldError(ErrorKind.INVALID_TTI_STRING_VALUE, value=text) from e
