# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: test_embedder.py
# -----------------------------------------------------------------------------
import math

import pytest

from embedding.Embedder import Embedder
from embedding.TokenHashEmbedder import TokenHashEmbedder
from metrics.DistanceMetrics import CosineSimilarity
from utility.errors import ConfigurationError


@pytest.mark.asyncio
async def test_encode_is_normalised_and_deterministic(hash_embedder):
    first = await hash_embedder.encode("Hello world")
    second = await TokenHashEmbedder(dimension=64).encode("Hello world")

    assert len(first) == 64
    assert first == second
    assert math.sqrt(sum(v * v for v in first)) == pytest.approx(1.0, abs=1e-5)


@pytest.mark.asyncio
async def test_case_insensitive(hash_embedder):
    assert await hash_embedder.encode("HELLO World") == await hash_embedder.encode("hello world")


@pytest.mark.asyncio
async def test_text_without_tokens_gives_none(hash_embedder):
    assert await hash_embedder.encode("   ") is None
    assert await hash_embedder.encode("") is None


@pytest.mark.asyncio
async def test_shared_words_score_higher(hash_embedder):
    cos = CosineSimilarity()
    base = await hash_embedder.encode("the cat sat on the mat")
    close = await hash_embedder.encode("a cat sat on a mat")
    far = await hash_embedder.encode("quarterly revenue forecasts")

    assert cos.distance(base, close) > cos.distance(base, far)


def test_protocol_and_validation(hash_embedder):
    assert isinstance(hash_embedder, Embedder)
    with pytest.raises(ConfigurationError):
        TokenHashEmbedder(dimension=0)
