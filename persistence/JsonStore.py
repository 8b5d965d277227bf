# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: JsonStore
# -----------------------------------------------------------------------------
import json
from typing import Any, List

from persistence.VectorStore import FileVectorStore
from utility.errors import VectorStoreError


class JsonStore(FileVectorStore):
    """Whole index as one JSON array of {id, text, embedding, metadata}."""

    extension = ".json"

    def _encode(self, records: List[dict]) -> bytes:
        return json.dumps(records, ensure_ascii=False).encode("utf-8")

    def _decode(self, data: bytes) -> Any:
        try:
            records = json.loads(data.decode("utf-8"))
        except ValueError as e:
            raise VectorStoreError(f"Index file is not valid UTF-8 JSON: {e}") from e

        if not isinstance(records, list):
            raise VectorStoreError(f"Index file must hold a JSON array, got {type(records).__name__}")
        return records
