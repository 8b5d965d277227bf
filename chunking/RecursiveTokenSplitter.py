# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: RecursiveTokenSplitter
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional, Sequence

from chunking.RecursiveCharacterSplitter import RecursiveCharacterSplitter
from chunking.TextSplitter import MAX_MODEL_TOKENS, SplitResult
from tokenizer.BertTokenizer import BertTokenizer
from tokenizer.Tokenizer import Tokenizer

DEFAULT_TOKEN_SEPARATORS = ("\n\n", "\n", ".", " ", "")


class RecursiveTokenSplitter(RecursiveCharacterSplitter):
    """
    RecursiveCharacterSplitter measured in tokens. Packed text is
    re-tokenized to size it, so sub-word merges across pieces are counted
    correctly.
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        separators: Optional[Sequence[str]] = None,
        *,
        logger: logging.Logger | None = None,
    ):
        super().__init__(
            separators if separators is not None else DEFAULT_TOKEN_SEPARATORS,
            logger=logger,
        )
        self.tokenizer = tokenizer or BertTokenizer()

    def _measure(self, text: str) -> int:
        return len(self.tokenizer.tokenize(text))

    def _effective_chunk_size(self, chunk_size: int) -> int:
        return min(chunk_size, MAX_MODEL_TOKENS)

    def _empty_result(self) -> SplitResult:
        return [], []

    def _with_tokens(self, chunks: List[str]) -> SplitResult:
        return chunks, [self.tokenizer.tokenize(c) for c in chunks]
