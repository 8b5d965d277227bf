# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: DocumentChunker
# -----------------------------------------------------------------------------
import logging
import uuid
from typing import Any, Dict, List, Optional

from chunking.TextChunk import TextChunk
from chunking.TextSplitter import TextSplitter, validate_sizes
from utility.logging_utils import get_class_logger


class DocumentChunker:
    """
    Runs a TextSplitter over one source text and wraps the pieces as
    TextChunk objects with provenance metadata.
    """

    def __init__(
        self,
        splitter: TextSplitter,
        *,
        chunk_size: int = 510,
        overlap_size: int = 0,
        logger: logging.Logger | None = None,
    ):
        # guard against bad config before any text is seen
        validate_sizes(chunk_size, overlap_size)

        self.splitter = splitter
        self.chunk_size = chunk_size
        self.overlap_size = overlap_size
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def _string_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, str]:
        # Index metadata is str -> str; None values are dropped
        return {str(k): str(v) for k, v in (metadata or {}).items() if v is not None}

    @staticmethod
    def _chunk_id(source_id: str, chunk_index: int) -> str:
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{source_id}#{chunk_index}"))

    def chunk_document(
        self,
        source_id: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[TextChunk]:
        base_metadata = self._string_metadata(metadata)

        self.logger.info(
            "Chunking source_id=%s chars=%d splitter=%s chunk_size=%d overlap=%d",
            source_id,
            len(text or ""),
            self.splitter.__class__.__name__,
            self.chunk_size,
            self.overlap_size,
        )

        texts, token_spans = self.splitter.split(text, self.chunk_size, self.overlap_size)

        chunks: List[TextChunk] = []
        for chunk_index, chunk_text in enumerate(texts):
            chunks.append(
                TextChunk(
                    chunk_id=self._chunk_id(source_id, chunk_index),
                    source_id=source_id,
                    chunk_index=chunk_index,
                    text=chunk_text,
                    tokens=token_spans[chunk_index] if token_spans is not None else None,
                    metadata=dict(base_metadata),
                )
            )

        # Summary
        total_chunks = len(chunks)
        if total_chunks:
            avg_len = sum(len(c.text) for c in chunks) / total_chunks
            if token_spans is not None:
                avg_tokens = sum(len(c.tokens or []) for c in chunks) / total_chunks
                self.logger.info(
                    "Chunking Summary: chunks=%d | avg_len=%.1f chars | avg_tokens=%.1f",
                    total_chunks,
                    avg_len,
                    avg_tokens,
                )
            else:
                self.logger.info(
                    "Chunking Summary: chunks=%d | avg_len=%.1f chars", total_chunks, avg_len
                )
            self.logger.debug("First chunk: %s", chunks[0].short_preview())
        else:
            self.logger.warning("No chunks produced for source_id=%s", source_id)

        return chunks
