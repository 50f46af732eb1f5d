"""Shared schemas for wpbook."""

from wpbook.schemas.catalog import CatalogResult, ConnectionStatus
from wpbook.schemas.document import GeneratedDocument
from wpbook.schemas.item import Item, Tier
from wpbook.schemas.progress import ProgressUpdate
from wpbook.schemas.tree import BookTree, ChapterNode, SectionNode, TopicNode

__all__ = [
    "BookTree",
    "CatalogResult",
    "ChapterNode",
    "ConnectionStatus",
    "GeneratedDocument",
    "Item",
    "ProgressUpdate",
    "SectionNode",
    "Tier",
    "TopicNode",
]
