import dataclasses

from ebustl_codec.models import GSIBlock, TTIBlock
from ebustl_codec.STLReader.parsers.gsi_parser import parse_gsi
from ebustl_codec.STLReader.parsers.tti_blocks_parser import parse_tti


# =============================================================================
# Shared helper functions to create test STL data
# =============================================================================

GSI_SIZE = 1024
TTI_SIZE = 128


def make_gsi_block(
    cpn: bytes = b"850",
    dfc: bytes = b"STL25.01",
    dsc: bytes = b"1",
    cct: bytes = b"00",
    language_code: bytes = b"09",  # English
    title: bytes = b"Test Title",
    episode_title: bytes = b"Pilot",
    translated_title: bytes = b"Titre de test",
    translated_episode_title: bytes = b"Pilote",
    translator_name: bytes = b"Jane Doe",
    translator_contact: bytes = b"jane@example.com",
    subtitle_list_reference: bytes = b"REF-0001",
    creation_date: bytes = b"230115",
    revision_date: bytes = b"230116",
    revision_number: bytes = b"01",
    tnb: bytes = b"00001",
    tns: bytes = b"00001",
    tng: bytes = b"001",
    mnc: bytes = b"40",
    mnr: bytes = b"23",
    tcs: bytes = b"1",
    tcp: bytes = b"10000000",
    tcf: bytes = b"10000000",
    tnd: bytes = b"1",
    dsn: bytes = b"1",
    country: bytes = b"FRA",
    publisher: bytes = b"Example Publisher",
    editor_name: bytes = b"John Doe",
    editor_contact: bytes = b"john@example.com",
    uda: bytes = b"",
) -> bytes:
    """Create a 1024-byte GSI block; the defaults form a fully valid block."""
    gsi = bytearray(b" " * GSI_SIZE)

    def put(start: int, end: int, value: bytes) -> None:
        gsi[start:end] = value.ljust(end - start)[: end - start]

    put(0, 3, cpn)
    put(3, 11, dfc)
    put(11, 12, dsc)
    put(12, 14, cct)
    put(14, 16, language_code)
    put(16, 48, title)
    put(48, 80, episode_title)
    put(80, 112, translated_title)
    put(112, 144, translated_episode_title)
    put(144, 176, translator_name)
    put(176, 208, translator_contact)
    put(208, 224, subtitle_list_reference)
    put(224, 230, creation_date)
    put(230, 236, revision_date)
    put(236, 238, revision_number)
    put(238, 243, tnb)
    put(243, 248, tns)
    put(248, 251, tng)
    put(251, 253, mnc)
    put(253, 255, mnr)
    put(255, 256, tcs)
    put(256, 264, tcp)
    put(264, 272, tcf)
    put(272, 273, tnd)
    put(273, 274, dsn)
    put(274, 277, country)
    put(277, 309, publisher)
    put(309, 341, editor_name)
    put(341, 373, editor_contact)
    put(448, 1024, uda)

    return bytes(gsi)


def make_tti_block(
    sgn: int = 0,
    sn: int = 0,
    ebn: int = 0xFF,
    cs: int = 0x00,  # Not part of a cumulative set
    tci: tuple = (10, 0, 0, 0),  # 10:00:00:00
    tco: tuple = (10, 0, 2, 0),  # 10:00:02:00
    vp: int = 20,
    jc: int = 0x02,  # Centered
    cf: int = 0x00,  # Subtitle data
    text: bytes = b"Hello World",
) -> bytes:
    """Create a 128-byte TTI block with specified fields."""
    tti = bytearray(TTI_SIZE)

    # Subtitle Group Number (byte 0)
    tti[0] = sgn

    # Subtitle Number (bytes 1-2, little-endian)
    tti[1:3] = sn.to_bytes(2, "little")

    # Extension Block Number (byte 3)
    tti[3] = ebn

    # Cumulative Status (byte 4)
    tti[4] = cs

    # Time Code In (bytes 5-8)
    tti[5:9] = bytes(tci)

    # Time Code Out (bytes 9-12)
    tti[9:13] = bytes(tco)

    # Vertical Position (byte 13)
    tti[13] = vp

    # Justification Code (byte 14)
    tti[14] = jc

    # Comment Flag (byte 15)
    tti[15] = cf

    # Text field (bytes 16-127, 112 bytes)
    # Pad with unused space marker (0x8F)
    tti[16:128] = text.ljust(112, b"\x8f")[:112]

    return bytes(tti)


def make_stl_file(gsi: bytes = None, tti_blocks: list = None) -> bytes:
    """Create a complete STL file with GSI header and TTI blocks."""
    if gsi is None:
        gsi = make_gsi_block()
    if tti_blocks is None:
        tti_blocks = [make_tti_block()]

    return gsi + b"".join(tti_blocks)


# =============================================================================
# Shared helper functions to create decoded records
# =============================================================================


def make_gsi(**changes) -> GSIBlock:
    """Decoded form of make_gsi_block(), with some fields replaced."""
    gsi, _ = parse_gsi(make_gsi_block())
    return dataclasses.replace(gsi, **changes)


def make_tti(**changes) -> TTIBlock:
    """Decoded form of make_tti_block(), with some fields replaced."""
    return dataclasses.replace(parse_tti(make_tti_block()), **changes)
