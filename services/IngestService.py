# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: IngestService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from chunking.DocumentChunker import DocumentChunker
from chunking.TextChunk import TextChunk
from chunking.TextSplitter import splitter_from_name
from config.Config import Config
from index.SimilarityIndex import SimilarityIndex
from tokenizer.BertTokenizer import BertTokenizer
from tokenizer.Tokenizer import Tokenizer
from utility.logging_utils import get_class_logger

# (source_id, text, metadata)
SourceDocument = Tuple[str, str, Optional[Dict[str, Any]]]


class IngestService:
    """
    Owns the ingest pipeline:
      - chunk source text (DocumentChunker + configured splitter)
      - embed and add the chunks to the index in one concurrent batch
    """

    def __init__(
        self,
        *,
        index: SimilarityIndex,
        chunker: DocumentChunker,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.chunker = chunker
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def build_default_chunker(
        cfg: Optional[Config] = None,
        *,
        tokenizer: Optional[Tokenizer] = None,
    ) -> DocumentChunker:
        cfg = cfg or Config.from_env()
        if tokenizer is None and cfg.splitter.lower() in ("token", "recursive_token"):
            tokenizer = BertTokenizer.from_config(cfg)
        splitter = splitter_from_name(cfg.splitter, tokenizer)
        return DocumentChunker(
            splitter,
            chunk_size=cfg.chunk_size,
            overlap_size=cfg.overlap_size,
        )

    async def ingest_text(
        self,
        source_id: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
        *,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> List[TextChunk]:
        # "source" feeds exports and prompts; caller value wins
        doc_metadata: Dict[str, Any] = {"source": source_id}
        doc_metadata.update(metadata or {})

        chunks = self.chunker.chunk_document(source_id, text, doc_metadata)
        if not chunks:
            return []

        await self.index.add_items(
            ids=[c.chunk_id for c in chunks],
            texts=[c.text for c in chunks],
            metadatas=[c.to_metadata() for c in chunks],
            on_progress=on_progress,
        )

        self.logger.info(
            "Ingested source_id=%s: %d chunks into index %r (total=%d)",
            source_id,
            len(chunks),
            self.index.name,
            len(self.index),
        )
        return chunks

    async def ingest_documents(self, documents: Iterable[SourceDocument]) -> int:
        """Ingest each document on its own; one failure does not stop the rest."""
        ingested_count = 0
        doc_list = list(documents)

        for source_id, text, metadata in doc_list:
            try:
                await self.ingest_text(source_id, text, metadata)
                ingested_count += 1
            except Exception as e:
                self.logger.error("Failed ingest for source '%s': %s", source_id, e, exc_info=True)

        self.logger.info(
            "Document ingest complete: %d/%d documents successfully indexed",
            ingested_count,
            len(doc_list),
        )
        return ingested_count
