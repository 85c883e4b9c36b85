"""Sous-package CLI commands - re-exporte les commandes publiques."""

from stash_curator.adapters.cli.commands.analyze_command import (
    analyze_performers_command,
    analyze_studios_command,
)
from stash_curator.adapters.cli.commands.clean_command import (
    clean_folders,
)
from stash_curator.adapters.cli.commands.organize_command import (
    organize,
)
from stash_curator.adapters.cli.commands.rate_command import (
    rate,
)
from stash_curator.adapters.cli.commands.select_command import (
    select,
)

__all__ = [
    "analyze_performers_command",
    "analyze_studios_command",
    "clean_folders",
    "organize",
    "rate",
    "select",
]
