"""wpbook: assemble WordPress book hierarchies into printable documents."""

from wpbook.catalog import load_catalog
from wpbook.exceptions import (
    AuthenticationError,
    EndpointNotFoundError,
    FetchError,
    NoContentError,
    WpBookError,
)
from wpbook.generation import GenerationOptions, generate_book
from wpbook.output_formatter import format_book
from wpbook.schemas import BookTree, CatalogResult, GeneratedDocument, Item, ProgressUpdate
from wpbook.tree_fetcher import TreeFetchOptions, fetch_tree

__all__ = [
    "AuthenticationError",
    "BookTree",
    "CatalogResult",
    "EndpointNotFoundError",
    "FetchError",
    "GeneratedDocument",
    "GenerationOptions",
    "Item",
    "NoContentError",
    "ProgressUpdate",
    "TreeFetchOptions",
    "WpBookError",
    "fetch_tree",
    "format_book",
    "generate_book",
    "load_catalog",
]
