# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: types.py
# -----------------------------------------------------------------------------
from typing import Dict, List

from pydantic import BaseModel, TypeAdapter


class IndexItemModel(BaseModel):
    id: str
    text: str
    embedding: List[float]
    metadata: Dict[str, str] = {}


class PineconeMetadataModel(BaseModel):
    text: str
    source: str = ""


class PineconeVectorModel(BaseModel):
    id: str
    metadata: PineconeMetadataModel
    values: List[float]


class PineconeExportModel(BaseModel):
    vectors: List[PineconeVectorModel]


IndexItemListAdapter = TypeAdapter(List[IndexItemModel])
