# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: TokenSplitter
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional

from chunking.TextSplitter import MAX_MODEL_TOKENS, SplitResult, validate_sizes
from tokenizer.BertTokenizer import BertTokenizer
from tokenizer.Tokenizer import Tokenizer
from utility.logging_utils import get_class_logger

SENTENCE_ENDINGS = (".", "?", "!")


class TokenSplitter:
    """
    Token-budget splitter.

    The text is tokenized once and cut into windows of at most `chunk_size`
    tokens. A window is pulled back to its last sentence ending when it has
    one, otherwise to its last word start, so no chunk begins on a "##"
    continuation piece. Returned token lists are the exact spans consumed.

    A single word with more pieces than `chunk_size` is cut on characters
    instead: each chunk is the longest run of the word that re-tokenizes
    within budget, and its token list is that re-tokenization. Overlap is
    not applied inside such a word.
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None, *, logger: logging.Logger | None = None):
        self.tokenizer = tokenizer or BertTokenizer()
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def _is_continuation(token: str) -> bool:
        return token.startswith("##")

    def _word_end(self, tokens: List[str], start: int) -> int:
        end = start + 1
        while end < len(tokens) and self._is_continuation(tokens[end]):
            end += 1
        return end

    def _window_end(self, tokens: List[str], start: int, end: int) -> int:
        # Window runs to the end of the text: nothing to trim
        if end >= len(tokens):
            return end

        for i in range(end, start, -1):
            if tokens[i - 1] in SENTENCE_ENDINGS:
                return i

        for i in range(end, start, -1):
            if not self._is_continuation(tokens[i]):
                return i

        return end

    def _split_long_word(self, word_tokens: List[str], chunk_size: int) -> List[List[str]]:
        word = self.tokenizer.detokenize(word_tokens).strip()
        pieces: List[List[str]] = []

        pos = 0
        while pos < len(word):
            cut = len(word)
            piece = self.tokenizer.tokenize(word[pos:cut])
            while cut > pos + 1 and len(piece) > chunk_size:
                cut -= 1
                piece = self.tokenizer.tokenize(word[pos:cut])
            if piece:
                pieces.append(piece)
            pos = cut

        return pieces

    def split(self, text: str, chunk_size: int = MAX_MODEL_TOKENS, overlap_size: int = 0) -> SplitResult:
        validate_sizes(chunk_size, overlap_size)
        if not text or not text.strip():
            return [], []

        if chunk_size > MAX_MODEL_TOKENS:
            self.logger.debug("chunk_size %d capped at %d tokens", chunk_size, MAX_MODEL_TOKENS)
            chunk_size = MAX_MODEL_TOKENS
        overlap_size = min(overlap_size, chunk_size - 1)

        tokens = self.tokenizer.tokenize(text)
        chunks: List[str] = []
        token_spans: List[List[str]] = []

        start = 0
        while start < len(tokens):
            word_end = self._word_end(tokens, start)
            if word_end - start > chunk_size:
                self.logger.debug(
                    "Word of %d pieces exceeds chunk_size %d; cutting on characters",
                    word_end - start,
                    chunk_size,
                )
                for piece in self._split_long_word(tokens[start:word_end], chunk_size):
                    chunks.append(self.tokenizer.detokenize(piece).strip())
                    token_spans.append(piece)
                start = word_end
                continue

            end = self._window_end(tokens, start, min(start + chunk_size, len(tokens)))
            span = tokens[start:end]

            chunks.append(self.tokenizer.detokenize(span).strip())
            token_spans.append(span)

            if end >= len(tokens):
                break

            next_start = max(end - overlap_size, start + 1)
            while next_start < end and self._is_continuation(tokens[next_start]):
                next_start += 1
            start = next_start

        self.logger.debug(
            "Split %d tokens into %d chunks (chunk_size=%d overlap=%d)",
            len(tokens),
            len(chunks),
            chunk_size,
            overlap_size,
        )
        return chunks, token_spans
