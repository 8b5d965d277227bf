# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: RecursiveCharacterSplitter
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional, Sequence

from chunking.TextSplitter import SplitResult, validate_sizes
from utility.logging_utils import get_class_logger

DEFAULT_SEPARATORS = ("\n\n", "\n", ".", " ")


class RecursiveCharacterSplitter:
    """
    Tries separators from coarsest to finest. The first separator whose
    pieces all fit `chunk_size` wins, and its pieces are packed greedily into
    chunks. Overlap is not applied.

    If no separator gives small enough pieces the result is empty.
    """

    def __init__(
        self,
        separators: Optional[Sequence[str]] = None,
        *,
        logger: logging.Logger | None = None,
    ):
        self.separators = tuple(separators) if separators is not None else DEFAULT_SEPARATORS
        self.logger = logger or get_class_logger(self.__class__)

    def _measure(self, text: str) -> int:
        return len(text)

    def _effective_chunk_size(self, chunk_size: int) -> int:
        return chunk_size

    def _empty_result(self) -> SplitResult:
        return [], None

    def _with_tokens(self, chunks: List[str]) -> SplitResult:
        return chunks, None

    @staticmethod
    def _pieces(text: str, separator: str) -> List[str]:
        return list(text) if separator == "" else text.split(separator)

    def _pack(self, pieces: List[str], separator: str, chunk_size: int) -> List[str]:
        chunks: List[str] = []
        current: List[str] = []

        for piece in pieces:
            if current and self._measure(separator.join(current + [piece])) > chunk_size:
                chunks.append(separator.join(current))
                current = [piece]
            else:
                current.append(piece)
        if current:
            chunks.append(separator.join(current))

        return [c.strip() for c in chunks if c.strip()]

    def split(self, text: str, chunk_size: int = 100, overlap_size: int = 0) -> SplitResult:
        validate_sizes(chunk_size, overlap_size)
        if not text or not text.strip():
            return self._empty_result()

        chunk_size = self._effective_chunk_size(chunk_size)

        for separator in self.separators:
            pieces = self._pieces(text, separator)
            if all(self._measure(p) <= chunk_size for p in pieces):
                chunks = self._pack(pieces, separator, chunk_size)
                self.logger.debug(
                    "Split on %r into %d chunks (chunk_size=%d)", separator, len(chunks), chunk_size
                )
                return self._with_tokens(chunks)

        self.logger.warning(
            "No separator in %r splits %d chars into pieces of <= %d; returning no chunks",
            self.separators,
            len(text),
            chunk_size,
        )
        return self._empty_result()
