# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

from utility.errors import ConfigurationError

# Load .env once globally; real environment variables win
load_dotenv(find_dotenv(usecwd=True), override=False)


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigurationError(f"Env var {name} must be an int, got {v!r}") from e


@dataclass(frozen=True)
class Config:
    # Index identity + persistence
    index_name: str = "SimilaritySearchIndex"
    store_dir: str = "~/.simsearch"
    vector_store: str = "json"

    # Search
    metric: str = "cosine"
    default_top_k: int = 5
    max_concurrency: int = 8

    # Chunking
    splitter: str = "token"
    chunk_size: int = 510
    overlap_size: int = 0

    # Local embedder / tokenizer
    embedding_dim: int = 384
    vocab_path: str = ""

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "index_name": "SIMSEARCH_INDEX_NAME",
        "store_dir": "SIMSEARCH_STORE_DIR",
        "vector_store": "SIMSEARCH_VECTOR_STORE",

        "metric": "SIMSEARCH_METRIC",
        "default_top_k": "SIMSEARCH_TOP_K",
        "max_concurrency": "SIMSEARCH_MAX_CONCURRENCY",

        "splitter": "SIMSEARCH_SPLITTER",
        "chunk_size": "SIMSEARCH_CHUNK_SIZE",
        "overlap_size": "SIMSEARCH_OVERLAP_SIZE",

        "embedding_dim": "SIMSEARCH_EMBEDDING_DIM",
        "vocab_path": "SIMSEARCH_VOCAB_PATH",
    }

    INT_FIELDS = (
        "default_top_k",
        "max_concurrency",
        "chunk_size",
        "overlap_size",
        "embedding_dim",
    )

    # Names accepted by the metric / store / splitter factories
    METRICS = ("dotproduct", "cosine", "euclidean")
    VECTOR_STORES = ("json", "binary")
    SPLITTERS = ("character", "token", "recursive", "recursive_token")

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, falling back to field defaults."""
        defaults = Config()
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            default = getattr(defaults, field_name)
            if field_name in Config.INT_FIELDS:
                kwargs[field_name] = _env_int(env_name, default)
            else:
                kwargs[field_name] = _env(env_name, default)
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast on values that would break the index later on.
        """
        if not self.index_name.strip():
            raise ConfigurationError("index_name must not be empty")

        if self.metric.lower() not in self.METRICS:
            raise ConfigurationError(f"Unknown metric {self.metric!r}; expected one of {self.METRICS}")

        if self.vector_store.lower() not in self.VECTOR_STORES:
            raise ConfigurationError(
                f"Unknown vector store {self.vector_store!r}; expected one of {self.VECTOR_STORES}"
            )

        if self.splitter.lower() not in self.SPLITTERS:
            raise ConfigurationError(f"Unknown splitter {self.splitter!r}; expected one of {self.SPLITTERS}")

        not_positive = [
            name for name in ("default_top_k", "max_concurrency", "chunk_size", "embedding_dim")
            if getattr(self, name) <= 0
        ]
        if not_positive:
            env_names = [self.ENV_VARS[f] for f in not_positive]
            raise ConfigurationError(f"Values must be positive: {env_names}")

        if not 0 <= self.overlap_size < self.chunk_size:
            raise ConfigurationError(
                f"overlap_size ({self.overlap_size}) must be >= 0 and < chunk_size ({self.chunk_size})"
            )

    def summary(self) -> dict:
        """Return a compact summary for logging."""
        return {
            "index_name": self.index_name,
            "store_dir": self.store_dir,
            "vector_store": self.vector_store,
            "metric": self.metric,
            "default_top_k": self.default_top_k,
            "max_concurrency": self.max_concurrency,
            "splitter": self.splitter,
            "chunk_size": self.chunk_size,
            "overlap_size": self.overlap_size,
            "embedding_dim": self.embedding_dim,
            "vocab_path": self.vocab_path or "<bundled>",
        }
