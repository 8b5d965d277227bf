# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: TextChunk
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class TextChunk:
    """
    One piece of a source text, ready to be embedded and added to an index.
    Carries enough provenance to trace a search hit back to its source.
    """

    # Core identifiers
    chunk_id: str
    source_id: str
    chunk_index: int

    # Content
    text: str
    tokens: Optional[List[str]] = None

    # Caller supplied metadata (source name, page, ...)
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_metadata(self) -> Dict[str, str]:
        """
        Flat string metadata for the index item. Caller keys win over the
        provenance keys when both are present.
        """
        base_meta = {
            "chunk_id": self.chunk_id,
            "source_id": self.source_id,
            "chunk_index": str(self.chunk_index),
        }
        base_meta.update(self.metadata)
        return base_meta

    def short_preview(self, n: int = 120) -> str:
        """Return a compact text preview for logging/debugging."""
        clean = " ".join(self.text.split())
        preview = (clean[:n] + "...") if len(clean) > n else clean
        return f"[{self.source_id} | #{self.chunk_index}] {preview}"
