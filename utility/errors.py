# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: errors.py
# -----------------------------------------------------------------------------


class SimilaritySearchError(Exception):
    """Base class for all library errors."""


class ConfigurationError(SimilaritySearchError, ValueError):
    """
    Raised when a call or a configuration would corrupt index invariants.
    Callers must not continue with the offending input.
    """


class DimensionMismatchError(ConfigurationError):
    """Raised when an explicit embedding does not match the index dimension."""


class VocabularyError(ConfigurationError):
    """Raised when the tokenizer vocabulary is missing entries or inconsistent."""


class EmbeddingError(SimilaritySearchError, RuntimeError):
    """Raised when the embedder cannot produce the probe vector for dimension discovery."""


class IndexNotReadyError(SimilaritySearchError, RuntimeError):
    """Raised when an index is used before its dimension has been discovered."""


class VectorStoreError(SimilaritySearchError, RuntimeError):
    """Raised when reading, writing or decoding a persisted index fails."""
