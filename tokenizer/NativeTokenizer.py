# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: NativeTokenizer
# -----------------------------------------------------------------------------
import re
from typing import List

_WORD_RE = re.compile(r"\w+|[^\w\s]")


class NativeTokenizer:
    """
    Word-level tokenizer: runs of word characters, and every other
    non-space character as its own token. No vocabulary involved.
    """

    def tokenize(self, text: str) -> List[str]:
        return _WORD_RE.findall(text)

    def detokenize(self, tokens: List[str]) -> str:
        return " ".join(tokens)
