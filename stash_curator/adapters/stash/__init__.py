"""Adaptateur GraphQL pour le serveur Stash."""

from stash_curator.adapters.stash.client import StashClient
from stash_curator.adapters.stash.retry import StashBusyError

__all__ = ["StashClient", "StashBusyError"]
