# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: SimilarityIndex
# -----------------------------------------------------------------------------
import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from config.Config import Config
from embedding.Embedder import Embedder
from embedding.TokenHashEmbedder import TokenHashEmbedder
from index.IndexItem import IndexItem, SearchResult
from metrics.DistanceMetrics import DistanceMetric, metric_from_name
from persistence.PineconeExporter import PineconeExporter
from persistence.VectorStore import VectorStore, store_from_name
from utility.errors import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    IndexNotReadyError,
)
from utility.logging_utils import get_class_logger

Vector = List[float]


class SimilarityIndex:
    """
    In-memory vector index with exhaustive nearest-neighbour search.

    Build it with `await SimilarityIndex.create(...)`: the embedder is called
    once on a probe sentence to fix `dimension`. An index constructed
    directly has no dimension yet and refuses item and query operations
    until `await discover_dimension()` has run.

    Item ids are not required to be unique. get_item and update_item act on
    the first match, remove_item on all matches.
    """

    PROBE_TEXT = "Test sentence"

    def __init__(
        self,
        name: Optional[str] = None,
        embedder: Optional[Embedder] = None,
        metric: Optional[DistanceMetric] = None,
        vector_store: Optional[VectorStore] = None,
        cfg: Optional[Config] = None,
        *,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg or Config.from_env()
        self.logger = logger or get_class_logger(self.__class__)

        self.name = name or self.cfg.index_name
        self.embedder = embedder or TokenHashEmbedder.from_config(self.cfg)
        self.metric = metric or metric_from_name(self.cfg.metric)
        self.vector_store = vector_store or store_from_name(self.cfg.vector_store)
        self.store_dir = Path(self.cfg.store_dir).expanduser()

        self.dimension: Optional[int] = None
        self.items: List[IndexItem] = []

    @classmethod
    async def create(
        cls,
        name: Optional[str] = None,
        embedder: Optional[Embedder] = None,
        metric: Optional[DistanceMetric] = None,
        vector_store: Optional[VectorStore] = None,
        cfg: Optional[Config] = None,
        *,
        logger: logging.Logger | None = None,
    ) -> "SimilarityIndex":
        index = cls(name, embedder, metric, vector_store, cfg, logger=logger)
        await index.discover_dimension()
        return index

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return (
            f"SimilarityIndex(name={self.name!r}, dimension={self.dimension}, "
            f"items={len(self.items)}, metric={self.metric!r})"
        )

    # ---- lifecycle ----

    @property
    def is_ready(self) -> bool:
        return self.dimension is not None

    async def discover_dimension(self) -> int:
        if self.dimension is not None:
            return self.dimension

        try:
            probe = await self.embedder.encode(self.PROBE_TEXT)
        except Exception as e:
            raise EmbeddingError(
                f"{self.embedder.__class__.__name__} failed to encode the probe sentence: {e}"
            ) from e

        if probe is None or len(probe) == 0:
            raise EmbeddingError(
                f"{self.embedder.__class__.__name__} returned no vector for the probe sentence"
            )

        self.dimension = len(probe)
        self.logger.info(
            "Index %r ready: embedder=%s dimension=%d metric=%s store=%s",
            self.name,
            self.embedder.__class__.__name__,
            self.dimension,
            self.metric.name,
            self.vector_store.__class__.__name__,
        )
        return self.dimension

    def _require_ready(self) -> int:
        if self.dimension is None:
            raise IndexNotReadyError(
                f"Index {self.name!r} has no dimension yet; build it with SimilarityIndex.create() "
                "or await discover_dimension() first"
            )
        return self.dimension

    # ---- embeddings ----

    async def get_embedding(self, text: str, embedding: Optional[Sequence[float]] = None) -> Vector:
        """
        The supplied embedding when it has the index dimension, otherwise a
        fresh encode of `text`. Encode failures give a zero vector.
        """
        dimension = self._require_ready()

        if embedding is not None:
            if len(embedding) == dimension:
                return [float(v) for v in embedding]
            self.logger.warning(
                "Supplied embedding has %d values, index dimension is %d; re-encoding text",
                len(embedding),
                dimension,
            )

        try:
            vector = await self.embedder.encode(text)
        except Exception:
            self.logger.exception("Embedder raised for text %r; using zero vector", text[:60])
            return [0.0] * dimension

        if vector is None or len(vector) != dimension:
            self.logger.warning(
                "No usable embedding for text %r (got %s); using zero vector",
                text[:60],
                "nothing" if vector is None else f"{len(vector)} values",
            )
            return [0.0] * dimension

        return [float(v) for v in vector]

    # ---- create ----

    async def add_item(
        self,
        id: str,
        text: str,
        metadata: Optional[Dict[str, str]] = None,
        embedding: Optional[Sequence[float]] = None,
    ) -> IndexItem:
        vector = await self.get_embedding(text, embedding)
        item = IndexItem(id=id, text=text, embedding=vector, metadata=dict(metadata or {}))
        self.items.append(item)
        return item

    async def add_items(
        self,
        ids: Sequence[str],
        texts: Sequence[str],
        metadatas: Sequence[Dict[str, str]],
        embeddings: Optional[Sequence[Optional[Sequence[float]]]] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> List[IndexItem]:
        """
        Embed a batch concurrently, at most cfg.max_concurrency encodes in
        flight. Items are appended in input order once every encode is done.
        """
        self._require_ready()

        if not len(ids) == len(texts) == len(metadatas):
            raise ConfigurationError(
                f"ids, texts and metadatas must have the same length "
                f"({len(ids)}, {len(texts)}, {len(metadatas)})"
            )
        if embeddings is not None and len(embeddings) != len(ids):
            raise ConfigurationError(
                f"embeddings must have the same length as ids ({len(embeddings)} vs {len(ids)})"
            )

        semaphore = asyncio.Semaphore(self.cfg.max_concurrency)

        async def build_one(i: int) -> IndexItem:
            async with semaphore:
                vector = await self.get_embedding(texts[i], embeddings[i] if embeddings is not None else None)
            if on_progress is not None:
                on_progress(ids[i])
            return IndexItem(id=ids[i], text=texts[i], embedding=vector, metadata=dict(metadatas[i] or {}))

        built = await asyncio.gather(*(build_one(i) for i in range(len(ids))))
        self.items.extend(built)

        self.logger.info("Added %d items to index %r (total=%d)", len(built), self.name, len(self.items))
        return list(built)

    def add_index_items(self, items: Iterable[IndexItem]) -> int:
        """Append already-embedded items, e.g. from a stored index."""
        dimension = self._require_ready()
        items = list(items)

        wrong = [item.id for item in items if len(item.embedding) != dimension]
        if wrong:
            raise DimensionMismatchError(
                f"{len(wrong)} items do not have dimension {dimension} (first id {wrong[0]!r})"
            )

        self.items.extend(items)
        return len(items)

    # ---- read ----

    def get_item(self, id: str) -> Optional[IndexItem]:
        self._require_ready()
        return next((item for item in self.items if item.id == id), None)

    def sample(self, count: int) -> List[IndexItem]:
        self._require_ready()
        return self.items[: max(count, 0)]

    async def search(
        self,
        query: str,
        top_k: Optional[int] = None,
        metric: Optional[DistanceMetric] = None,
    ) -> List[SearchResult]:
        """
        Best min(top_k, len(index)) items for `query`, best first.
        `metric` overrides the index metric for this call only.
        """
        dimension = self._require_ready()
        k = self.cfg.default_top_k if top_k is None else top_k

        try:
            query_vector = await self.embedder.encode(query)
        except Exception:
            self.logger.exception("Embedder raised for query %r; returning no results", query[:60])
            return []

        if query_vector is None or len(query_vector) != dimension:
            self.logger.warning(
                "No usable embedding for query %r (got %s); returning no results",
                query[:60],
                "nothing" if query_vector is None else f"{len(query_vector)} values",
            )
            return []

        active_metric = metric or self.metric
        ranked = active_metric.find_nearest(query_vector, [item.embedding for item in self.items], k)

        results = []
        for score, position in ranked:
            item = self.items[position]
            results.append(SearchResult(id=item.id, score=score, text=item.text, metadata=dict(item.metadata)))

        self.logger.debug("Query %r -> %d results (%s)", query[:60], len(results), active_metric.name)
        return results

    # ---- update / delete ----

    def update_item(
        self,
        id: str,
        text: Optional[str] = None,
        embedding: Optional[Sequence[float]] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        """
        Replace the given fields of the first item with this id. The text is
        not re-embedded; pass `embedding` to change the vector.
        """
        dimension = self._require_ready()

        if embedding is not None and len(embedding) != dimension:
            raise DimensionMismatchError(f"Dimension mismatch, expected {dimension}, saw {len(embedding)}")

        item = self.get_item(id)
        if item is None:
            self.logger.warning("update_item: no item with id %r", id)
            return False

        if text is not None:
            item.text = text
        if embedding is not None:
            item.embedding = [float(v) for v in embedding]
        if metadata is not None:
            item.metadata = dict(metadata)
        return True

    def remove_item(self, id: str) -> int:
        self._require_ready()
        before = len(self.items)
        self.items = [item for item in self.items if item.id != id]
        removed = before - len(self.items)
        self.logger.debug("Removed %d items with id %r", removed, id)
        return removed

    def remove_all(self) -> None:
        self._require_ready()
        self.logger.info("Removing all %d items from index %r", len(self.items), self.name)
        self.items.clear()

    # ---- persistence ----

    def save_index(self, directory: Optional[Path] = None, name: Optional[str] = None) -> Path:
        target_dir = Path(directory).expanduser() if directory is not None else self.store_dir
        return self.vector_store.save_index(self.items, target_dir, name or self.name)

    async def load_index(
        self,
        directory: Optional[Path] = None,
        name: Optional[str] = None,
    ) -> Optional[List[IndexItem]]:
        """
        Append the items of the first stored index whose file name contains
        `name`. Existing items are kept; call remove_all() first to replace.
        """
        self._require_ready()
        source_dir = Path(directory).expanduser() if directory is not None else self.store_dir
        index_name = name or self.name

        for path in self.vector_store.list_indexes(source_dir):
            if index_name in path.name:
                items = self.vector_store.load_index(path)
                self.add_index_items(items)
                self.logger.info("Loaded %d items into index %r from %s", len(items), self.name, path)
                return items

        self.logger.warning("No stored index matching %r in %s", index_name, source_dir)
        return None

    def export_index(self, directory: Optional[Path] = None) -> Path:
        dimension = self._require_ready()
        target_dir = Path(directory).expanduser() if directory is not None else self.store_dir
        return PineconeExporter().export(
            self.items,
            target_dir,
            index_name=self.name,
            embedder_name=self.embedder.__class__.__name__,
            dimension=dimension,
        )

    def estimated_size_in_bytes(self) -> int:
        """Rough memory footprint: UTF-8 strings plus 4 bytes per vector value."""
        total = 0
        for item in self.items:
            total += len(item.id.encode("utf-8"))
            total += len(item.text.encode("utf-8"))
            total += sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in item.metadata.items())
            total += 4 * len(item.embedding)
        return total
