import io
from typing import BinaryIO, List, Tuple, Union

import structlog

from ebustl_codec.errors import DecodeFieldError, ErrorKind, StructuralError
from ebustl_codec.models import GSI_BLOCK_SIZE, STLFile

from .parsers.gsi_parser import parse_gsi
from .parsers.tti_blocks_parser import parse_tti_blocks

logger = structlog.get_logger()


def decode_stl_file(
    source: Union[bytes, bytearray, BinaryIO],
) -> Tuple[STLFile, List[DecodeFieldError]]:
    """
    Decode an STL file: the 1024-byte GSI block, then 128-byte TTI blocks
    until the data runs out.

    Args:
        source: the raw file content, or a binary stream positioned at
            the start of the GSI block

    Returns:
        The decoded file and the GSI fields that could not be decoded.

    Raises:
        StructuralError: when the GSI block or a TTI block is truncated.
    """
    buffer = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source

    # GSI block (first 1024 bytes)
    gsi_raw = buffer.read(GSI_BLOCK_SIZE)
    if len(gsi_raw) < GSI_BLOCK_SIZE:
        raise StructuralError(
            ErrorKind.SHORT_GSI_BLOCK,
            detail=f"STL file too short to contain GSI header: {len(gsi_raw)} bytes",
        )
    gsi, warns = parse_gsi(gsi_raw)

    # TTI blocks (remaining 128-byte records)
    tti = parse_tti_blocks(buffer)

    logger.debug("stl_file_decoded", tti_blocks=len(tti), warnings=len(warns))
    return STLFile(gsi=gsi, tti=tti), warns
