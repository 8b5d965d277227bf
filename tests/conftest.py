# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Description: conftest.py
# -----------------------------------------------------------------------------

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from embedding.TokenHashEmbedder import TokenHashEmbedder  # noqa: E402
from tokenizer.BertTokenizer import BertTokenizer  # noqa: E402


class MappingEmbedder:
    """
    Test embedder: fixed vectors per text, a default vector otherwise.
    Texts in `none_for` encode to None, texts in `raise_for` raise.
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        *,
        dimension: int = 3,
        none_for: Sequence[str] = (),
        raise_for: Sequence[str] = (),
        delay: float = 0.0,
    ):
        self.vectors = vectors or {}
        self.dimension = dimension
        self.none_for = set(none_for)
        self.raise_for = set(raise_for)
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def encode(self, text: str) -> Optional[List[float]]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if text in self.raise_for:
                raise RuntimeError(f"encoder blew up on {text!r}")
            if text in self.none_for:
                return None
            return list(self.vectors.get(text, [1.0] + [0.0] * (self.dimension - 1)))
        finally:
            self.in_flight -= 1


@pytest.fixture
def cfg(tmp_path) -> Config:
    return Config(store_dir=str(tmp_path / "indexes"))


@pytest.fixture
def make_embedder():
    return MappingEmbedder


@pytest.fixture
def hash_embedder() -> TokenHashEmbedder:
    return TokenHashEmbedder(dimension=64)


@pytest.fixture(scope="session")
def bert_tokenizer() -> BertTokenizer:
    return BertTokenizer()
