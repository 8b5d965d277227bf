# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: Tokenizer
# -----------------------------------------------------------------------------

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class Tokenizer(Protocol):
    def tokenize(self, text: str) -> List[str]:
        ...

    def detokenize(self, tokens: List[str]) -> str:
        ...
