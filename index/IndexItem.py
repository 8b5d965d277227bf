# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: IndexItem
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class IndexItem:
    """Embedding vector + original text + searchable metadata."""
    id: str
    text: str
    embedding: List[float]
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        # Key order is the persisted field order
        return {
            "id": self.id,
            "text": self.text,
            "embedding": [float(v) for v in self.embedding],
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexItem":
        return cls(
            id=data["id"],
            text=data["text"],
            embedding=list(data["embedding"]),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class SearchResult:
    """
    One ranked hit. `score` is the raw metric value: higher is better for
    dot product and cosine, lower is better for Euclidean distance.
    """
    id: str
    score: float
    text: str
    metadata: Dict[str, str] = field(default_factory=dict)
