# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: Embedder
# -----------------------------------------------------------------------------
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    """
    Anything that turns text into a fixed-length vector.

    encode() returns None when the text cannot be embedded. It may also
    raise; the index treats both the same way.
    """

    async def encode(self, text: str) -> Optional[List[float]]:
        ...
