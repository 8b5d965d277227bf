# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: DistanceMetrics
# -----------------------------------------------------------------------------
import logging
import sys
from typing import List, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from metrics.TopK import top_k
from utility.errors import ConfigurationError
from utility.logging_utils import get_class_logger

Vector = Sequence[float]
ScoredIndex = Tuple[float, int]


@runtime_checkable
class DistanceMetric(Protocol):
    name: str
    higher_is_better: bool

    def distance(self, a: Vector, b: Vector) -> float:
        ...

    def find_nearest(self, query: Vector, candidates: Sequence[Vector], k: int) -> List[ScoredIndex]:
        ...


class _BaseMetric:
    """
    Shared ranking for all metrics.

    Subclasses provide a scalar distance() with its own length-mismatch
    sentinel and a vectorised _batch_scores() for the common case where
    every candidate has the query's length.
    """

    name = "base"
    higher_is_better = True
    mismatch_score = 0.0

    def __init__(self, *, logger: logging.Logger | None = None):
        self.logger = logger or get_class_logger(self.__class__)

    def _length_mismatch(self, a: Vector, b: Vector) -> bool:
        if len(a) == len(b):
            return False
        self.logger.warning(
            "%s: vector length mismatch (%d vs %d), scoring as %s",
            self.name,
            len(a),
            len(b),
            self.mismatch_score,
        )
        return True

    def _batch_scores(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _is_before(self, a: ScoredIndex, b: ScoredIndex) -> bool:
        if a[0] != b[0]:
            return a[0] > b[0] if self.higher_is_better else a[0] < b[0]
        return a[1] < b[1]

    def scores(self, query: Vector, candidates: Sequence[Vector]) -> List[float]:
        if all(len(c) == len(query) for c in candidates):
            q = np.asarray(query, dtype=np.float64)
            matrix = np.asarray(candidates, dtype=np.float64).reshape(len(candidates), len(q))
            return [float(s) for s in self._batch_scores(q, matrix)]
        return [self.distance(query, c) for c in candidates]

    def distance(self, a: Vector, b: Vector) -> float:
        raise NotImplementedError

    def find_nearest(self, query: Vector, candidates: Sequence[Vector], k: int) -> List[ScoredIndex]:
        """
        (score, candidate index) pairs for the best min(k, n) candidates,
        ordered best first. Equal scores rank the lower index first.
        """
        if not candidates:
            return []
        scored = [(score, idx) for idx, score in enumerate(self.scores(query, candidates))]
        return top_k(scored, k, self._is_before)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DotProduct(_BaseMetric):
    name = "dotproduct"
    higher_is_better = True
    mismatch_score = -sys.float_info.max

    def distance(self, a: Vector, b: Vector) -> float:
        if self._length_mismatch(a, b):
            return self.mismatch_score
        return float(np.dot(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)))

    def _batch_scores(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        return matrix @ query


class CosineSimilarity(_BaseMetric):
    name = "cosine"
    higher_is_better = True
    mismatch_score = -1.0

    def distance(self, a: Vector, b: Vector) -> float:
        if self._length_mismatch(a, b):
            return self.mismatch_score

        va = np.asarray(a, dtype=np.float64)
        vb = np.asarray(b, dtype=np.float64)
        denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
        if denom == 0.0:
            return 0.0
        return float(np.dot(va, vb)) / denom

    def _batch_scores(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        denom = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        dots = matrix @ query
        out = np.zeros_like(dots)
        np.divide(dots, denom, out=out, where=denom != 0.0)
        return out


class EuclideanDistance(_BaseMetric):
    name = "euclidean"
    higher_is_better = False
    mismatch_score = sys.float_info.max

    def distance(self, a: Vector, b: Vector) -> float:
        if self._length_mismatch(a, b):
            return self.mismatch_score
        diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
        return float(np.linalg.norm(diff))

    def _batch_scores(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        return np.linalg.norm(matrix - query, axis=1)


_METRICS = {
    DotProduct.name: DotProduct,
    CosineSimilarity.name: CosineSimilarity,
    EuclideanDistance.name: EuclideanDistance,
}


def metric_from_name(name: str, *, logger: logging.Logger | None = None) -> _BaseMetric:
    key = (name or "").strip().lower()
    if key not in _METRICS:
        raise ConfigurationError(f"Unknown metric {name!r}; expected one of {sorted(_METRICS)}")
    return _METRICS[key](logger=logger)
