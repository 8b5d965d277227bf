# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: VectorStore
# -----------------------------------------------------------------------------
import logging
from pathlib import Path
from typing import Any, List, Protocol, Sequence, runtime_checkable

from pydantic import ValidationError

from index.IndexItem import IndexItem
from persistence.types import IndexItemListAdapter
from utility.errors import ConfigurationError, VectorStoreError
from utility.file_utils import atomic_write_bytes
from utility.logging_utils import get_class_logger


@runtime_checkable
class VectorStore(Protocol):
    extension: str

    def save_index(self, items: Sequence[IndexItem], directory: Path, name: str) -> Path:
        ...

    def load_index(self, path: Path) -> List[IndexItem]:
        ...

    def list_indexes(self, directory: Path) -> List[Path]:
        ...


class FileVectorStore:
    """
    One index per file, `<directory>/<name><extension>`.

    Subclasses only convert between item dicts and bytes. Writes are atomic;
    every read, decode or validation failure surfaces as VectorStoreError.
    """

    extension = ""

    def __init__(self, *, logger: logging.Logger | None = None):
        self.logger = logger or get_class_logger(self.__class__)

    def _encode(self, records: List[dict]) -> bytes:
        raise NotImplementedError

    def _decode(self, data: bytes) -> Any:
        raise NotImplementedError

    def path_for(self, directory: Path, name: str) -> Path:
        return Path(directory).expanduser() / f"{name}{self.extension}"

    def save_index(self, items: Sequence[IndexItem], directory: Path, name: str) -> Path:
        path = self.path_for(directory, name)
        data = self._encode([item.to_dict() for item in items])

        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            raise VectorStoreError(f"Failed to write index {name!r} to {path}: {e}") from e

        self.logger.info("Saved %d items to %s (%d bytes)", len(items), path, len(data))
        return path

    def load_index(self, path: Path) -> List[IndexItem]:
        path = Path(path).expanduser()
        try:
            data = path.read_bytes()
        except OSError as e:
            raise VectorStoreError(f"Failed to read index file {path}: {e}") from e

        records = self._decode(data)

        try:
            models = IndexItemListAdapter.validate_python(records)
        except ValidationError as e:
            raise VectorStoreError(f"Index file {path} has invalid items: {e}") from e

        items = [IndexItem(id=m.id, text=m.text, embedding=m.embedding, metadata=m.metadata) for m in models]
        self.logger.info("Loaded %d items from %s", len(items), path)
        return items

    def list_indexes(self, directory: Path) -> List[Path]:
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            self.logger.error("Index directory %s does not exist", directory)
            return []

        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == self.extension
        )


def store_from_name(name: str, *, logger: logging.Logger | None = None) -> FileVectorStore:
    from persistence.BinaryStore import BinaryStore
    from persistence.JsonStore import JsonStore

    key = (name or "").strip().lower()
    if key == "json":
        return JsonStore(logger=logger)
    if key == "binary":
        return BinaryStore(logger=logger)

    raise ConfigurationError(f"Unknown vector store {name!r}; expected one of ['binary', 'json']")
