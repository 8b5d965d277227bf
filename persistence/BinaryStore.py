# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: BinaryStore
# -----------------------------------------------------------------------------
import json
import lzma
import struct
from typing import Any, List

from persistence.VectorStore import FileVectorStore
from utility.errors import VectorStoreError

# 4-byte little-endian signed record length
_LENGTH = struct.Struct("<i")


class BinaryStore(FileVectorStore):
    """
    Compact index file: every item is written as a length prefix followed by
    its UTF-8 JSON object, and the whole stream is LZMA (xz) compressed.
    """

    extension = ".dat"

    def _encode(self, records: List[dict]) -> bytes:
        stream = bytearray()
        for record in records:
            payload = json.dumps(record, ensure_ascii=False).encode("utf-8")
            stream += _LENGTH.pack(len(payload))
            stream += payload
        return lzma.compress(bytes(stream), format=lzma.FORMAT_XZ)

    def _decode(self, data: bytes) -> Any:
        try:
            stream = lzma.decompress(data)
        except lzma.LZMAError as e:
            raise VectorStoreError(f"Index file is not a valid LZMA stream: {e}") from e

        records = []
        offset = 0
        while offset < len(stream):
            if offset + _LENGTH.size > len(stream):
                raise VectorStoreError(f"Truncated length prefix at byte {offset}")
            (length,) = _LENGTH.unpack_from(stream, offset)
            offset += _LENGTH.size

            if length < 0 or offset + length > len(stream):
                raise VectorStoreError(f"Record length {length} at byte {offset} overruns the stream")

            try:
                records.append(json.loads(stream[offset:offset + length].decode("utf-8")))
            except ValueError as e:
                raise VectorStoreError(f"Record at byte {offset} is not valid UTF-8 JSON: {e}") from e
            offset += length

        return records
