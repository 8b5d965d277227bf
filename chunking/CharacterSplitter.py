# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: CharacterSplitter
# -----------------------------------------------------------------------------
import logging
from typing import List

from chunking.TextSplitter import SplitResult, validate_sizes
from utility.logging_utils import get_class_logger


class CharacterSplitter:
    """
    Fixed-width splitter. A unit is one character when `separator` is empty,
    otherwise one piece of text.split(separator). Every chunk holds
    `chunk_size` units, the last one possibly fewer.
    """

    def __init__(self, separator: str = "", *, logger: logging.Logger | None = None):
        self.separator = separator
        self.logger = logger or get_class_logger(self.__class__)

    def _units(self, text: str) -> List[str]:
        if self.separator == "":
            return list(text)
        return text.split(self.separator)

    def _emit(self, chunks: List[str], buffer: List[str]) -> None:
        chunk = self.separator.join(buffer).strip()
        if chunk:
            chunks.append(chunk)

    def split(self, text: str, chunk_size: int = 100, overlap_size: int = 0) -> SplitResult:
        validate_sizes(chunk_size, overlap_size)
        if not text or not text.strip():
            return [], None

        chunks: List[str] = []
        buffer: List[str] = []
        fresh_units = 0  # units not yet covered by an emitted chunk

        for unit in self._units(text):
            buffer.append(unit)
            fresh_units += 1

            if len(buffer) == chunk_size:
                self._emit(chunks, buffer)
                buffer = buffer[chunk_size - overlap_size:] if overlap_size else []
                fresh_units = 0

        if fresh_units:
            self._emit(chunks, buffer)

        self.logger.debug("Split %d chars into %d chunks (chunk_size=%d)", len(text), len(chunks), chunk_size)
        return chunks, None
