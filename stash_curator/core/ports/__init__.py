"""
Interfaces ports (architecture hexagonale).

Contrats abstraits implémentés par les adaptateurs.
"""

from stash_curator.core.ports.catalog import (
    CatalogError,
    CatalogFetchError,
    CatalogUpdateError,
    ICatalogService,
)
from stash_curator.core.ports.file_system import IFileSystem

__all__ = [
    "CatalogError",
    "CatalogFetchError",
    "CatalogUpdateError",
    "ICatalogService",
    "IFileSystem",
]
