"""
Couche adaptateurs (infrastructure).

Les adaptateurs implementent les ports definis dans core/ports/ :
- cli/ : Interface ligne de commande (Typer)
- stash/ : Client GraphQL du catalogue Stash (httpx)
- file_system.py : Operations sur le systeme de fichiers

Chaque adaptateur depend de core/ mais core/ ne depend jamais des adaptateurs.
"""

from stash_curator.adapters.file_system import FileSystemAdapter
from stash_curator.adapters.stash import StashClient

__all__ = [
    "FileSystemAdapter",
    "StashClient",
]
