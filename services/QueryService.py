# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: QueryService
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from index.IndexItem import SearchResult
from index.SimilarityIndex import SimilarityIndex
from metrics.DistanceMetrics import DistanceMetric

LLM_PROMPT_TEMPLATE = """Given the following extracted parts of a long document and a question, create a final answer with references ("SOURCES").
If you don't know the answer, just say that you don't know. Don't try to make up an answer.
ALWAYS return a "SOURCES" part in your answer.

QUESTION: {query}
=========
{sources}
=========
FINAL ANSWER:"""


@dataclass
class QueryService:
    index: SimilarityIndex
    default_top_k: Optional[int] = None

    async def search(
        self,
        query_text: str,
        top_k: Optional[int] = None,
        metric: Optional[DistanceMetric] = None,
    ) -> List[SearchResult]:
        k = top_k if top_k is not None else self.default_top_k
        return await self.index.search(query_text, top_k=k, metric=metric)

    async def query(self, query_text: str, top_k: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.to_hits(await self.search(query_text, top_k=top_k))

    @staticmethod
    def to_hits(
        results: Sequence[SearchResult],
        include_text: bool = True,
        include_scores: bool = True,
        include_metadata: bool = True,
    ) -> List[Dict[str, Any]]:
        """Flatten search results into plain dicts (JSON friendly)."""
        hits: List[Dict[str, Any]] = []
        for result in results:
            hit: Dict[str, Any] = {
                "id": result.id,
                "source": result.metadata.get("source"),
                "chunk_index": result.metadata.get("chunk_index"),
            }
            if include_text:
                hit["text"] = result.text
            if include_scores:
                hit["score"] = float(result.score)
            if include_metadata:
                hit["metadata"] = dict(result.metadata)

            hits.append(hit)

        return hits

    @staticmethod
    def combined_results_string(results: Sequence[SearchResult]) -> str:
        """
        Each result as its text followed by one "KEY: value" line per
        metadata entry, results separated by a blank line.
        """
        blocks = []
        for result in results:
            metadata_lines = "\n".join(f"{k.upper()}: {v}" for k, v in result.metadata.items())
            blocks.append(f"{result.text}\n{metadata_lines}")
        return "\n\n".join(blocks)

    @classmethod
    def export_llm_prompt(cls, query: str, results: Sequence[SearchResult]) -> str:
        return LLM_PROMPT_TEMPLATE.format(query=query, sources=cls.combined_results_string(results))
