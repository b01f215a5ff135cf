"""hukukrag ingest — legal chunker and local document loaders."""

from hukukrag.ingest.base import BaseChunker
from hukukrag.ingest.legal import LegalChunker, semantic_chunk
from hukukrag.ingest.loaders import load_document

__all__ = [
    "BaseChunker",
    "LegalChunker",
    "load_document",
    "semantic_chunk",
]
