# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: TextSplitter
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from utility.errors import ConfigurationError

# (chunks, per-chunk tokens or None for character based splitters)
SplitResult = Tuple[List[str], Optional[List[List[str]]]]

# Content budget of a 512 wide encoder input once [CLS] and [SEP] are added
MAX_MODEL_TOKENS = 510


@runtime_checkable
class TextSplitter(Protocol):
    def split(self, text: str, chunk_size: int, overlap_size: int = 0) -> SplitResult:
        ...


def validate_sizes(chunk_size: int, overlap_size: int) -> None:
    """Reject sizes that would loop forever or emit nothing."""
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be > 0, got {chunk_size}")
    if overlap_size < 0:
        raise ConfigurationError(f"overlap_size must be >= 0, got {overlap_size}")
    if overlap_size >= chunk_size:
        raise ConfigurationError(
            f"overlap_size ({overlap_size}) must be < chunk_size ({chunk_size})"
        )


def splitter_from_name(name: str, tokenizer=None, *, logger: logging.Logger | None = None) -> TextSplitter:
    """
    Build a splitter by its config name. Token based splitters default to the
    bundled BertTokenizer when no tokenizer is given.
    """
    from chunking.CharacterSplitter import CharacterSplitter
    from chunking.RecursiveCharacterSplitter import RecursiveCharacterSplitter
    from chunking.RecursiveTokenSplitter import RecursiveTokenSplitter
    from chunking.TokenSplitter import TokenSplitter

    key = (name or "").strip().lower()
    if key == "character":
        return CharacterSplitter(logger=logger)
    if key == "token":
        return TokenSplitter(tokenizer, logger=logger)
    if key == "recursive":
        return RecursiveCharacterSplitter(logger=logger)
    if key == "recursive_token":
        return RecursiveTokenSplitter(tokenizer, logger=logger)

    raise ConfigurationError(
        f"Unknown splitter {name!r}; expected one of ['character', 'recursive', 'recursive_token', 'token']"
    )
