# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: PineconeExporter
# -----------------------------------------------------------------------------
import logging
from pathlib import Path
from typing import Sequence

from index.IndexItem import IndexItem
from persistence.types import PineconeExportModel, PineconeMetadataModel, PineconeVectorModel
from utility.errors import VectorStoreError
from utility.file_utils import atomic_write_text
from utility.logging_utils import get_class_logger


class PineconeExporter:
    """
    Writes index items in the vector-database import layout:
      {"vectors": [{"id", "metadata": {"text", "source"}, "values"}]}
    """

    def __init__(self, *, logger: logging.Logger | None = None):
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def file_name(index_name: str, embedder_name: str, dimension: int) -> str:
        return f"{index_name}_{embedder_name}_{dimension}.json"

    def build(self, items: Sequence[IndexItem]) -> PineconeExportModel:
        return PineconeExportModel(
            vectors=[
                PineconeVectorModel(
                    id=item.id,
                    metadata=PineconeMetadataModel(text=item.text, source=item.metadata.get("source", "")),
                    values=item.embedding,
                )
                for item in items
            ]
        )

    def export(
        self,
        items: Sequence[IndexItem],
        directory: Path,
        *,
        index_name: str,
        embedder_name: str,
        dimension: int,
    ) -> Path:
        path = Path(directory).expanduser() / self.file_name(index_name, embedder_name, dimension)
        document = self.build(items)

        try:
            atomic_write_text(path, document.model_dump_json(indent=2))
        except OSError as e:
            raise VectorStoreError(f"Failed to write export file {path}: {e}") from e

        self.logger.info("Exported %d vectors to %s", len(items), path)
        return path
