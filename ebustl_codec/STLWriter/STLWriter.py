"""
STLWriter - EBU STL (.stl) binary writer.

Encodes an STLFile (GSI block + TTI blocks) back to the EBU Tech 3264
binary layout. Records are written as they are; with `sync_totals=True`
the GSI totals (TNB, TNS, TNG) are recomputed from the TTI blocks first.
"""

import dataclasses
import io
from typing import BinaryIO

from ebustl_codec.models import STLFile
from ebustl_codec.validation.file_validation import count_subtitles_and_groups

from .encoder import encode_stl_file


class STLWriter:
    """EBU STL binary writer."""

    def __init__(self, sync_totals: bool = False):
        """
        Args:
            sync_totals: Write TNB, TNS and TNG computed from the TTI blocks
                         instead of the values stored in the GSI block. The
                         caller's STLFile is left unchanged.
        """
        self._sync_totals = sync_totals

    def write(self, stl_file: STLFile, sink: BinaryIO) -> None:
        encode_stl_file(self._prepare(stl_file), sink)

    def to_bytes(self, stl_file: STLFile) -> bytes:
        buffer = io.BytesIO()
        self.write(stl_file, buffer)
        return buffer.getvalue()

    def _prepare(self, stl_file: STLFile) -> STLFile:
        if not self._sync_totals:
            return stl_file
        subtitles, groups = count_subtitles_and_groups(stl_file.tti)
        gsi = dataclasses.replace(
            stl_file.gsi,
            total_tti_blocks=len(stl_file.tti),
            total_subtitles=subtitles,
            total_subtitle_groups=groups,
        )
        return STLFile(gsi=gsi, tti=stl_file.tti)
