# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: TokenHashEmbedder
# -----------------------------------------------------------------------------
import hashlib
import logging
from typing import List, Optional

import numpy as np

from tokenizer.NativeTokenizer import NativeTokenizer
from tokenizer.Tokenizer import Tokenizer
from utility.errors import ConfigurationError
from utility.logging_utils import get_class_logger


class TokenHashEmbedder:
    """
    Deterministic local embedder: lower-cased token counts hashed into
    `dimension` buckets, then L2 normalised. Texts sharing words score high
    under cosine, texts sharing none score zero. No model required.
    """

    def __init__(
        self,
        dimension: int = 384,
        tokenizer: Optional[Tokenizer] = None,
        *,
        normalize: bool = True,
        logger: logging.Logger | None = None,
    ):
        if dimension <= 0:
            raise ConfigurationError(f"dimension must be > 0, got {dimension}")

        self.dimension = dimension
        self.tokenizer = tokenizer or NativeTokenizer()
        self.normalize = normalize
        self.logger = logger or get_class_logger(self.__class__)

    @classmethod
    def from_config(cls, cfg) -> "TokenHashEmbedder":
        return cls(cfg.embedding_dim)

    def _bucket(self, token: str) -> int:
        digest = hashlib.sha256(token.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "little") % self.dimension

    def embed(self, text: str) -> Optional[List[float]]:
        tokens = [t.lower() for t in self.tokenizer.tokenize(text or "")]
        if not tokens:
            self.logger.debug("No tokens in text %r, nothing to embed", (text or "")[:40])
            return None

        vec = np.zeros(self.dimension, dtype=np.float32)
        for token in tokens:
            vec[self._bucket(token)] += 1.0

        if self.normalize:
            vec = vec / (np.linalg.norm(vec) + 1e-12)

        return vec.tolist()

    async def encode(self, text: str) -> Optional[List[float]]:
        return self.embed(text)
