"""
Utilitaires partages pour les commandes CLI de Stash Curator.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container et fermant le client Stash
- exit_on_catalog_error : decorateur traduisant les erreurs fatales en code de sortie
- format_ratio : pourcentage lisible
"""

import inspect
from contextlib import contextmanager
from functools import wraps

import typer
from loguru import logger as loguru_logger
from rich.console import Console

from stash_curator.container import Container
from stash_curator.core.ports import CatalogError
from stash_curator.core.value_objects import InvalidTemplateError
from stash_curator.logging_config import command_context, command_name

console = Console()

# Codes de sortie
EXIT_CATALOG_ERROR = 1
EXIT_CONFIG_ERROR = 2


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("stash_curator")
    try:
        yield
    finally:
        loguru_logger.enable("stash_curator")


def with_container():
    """
    Decorateur qui injecte un container initialise en premier argument.

    Les logs emis pendant la commande portent son nom et un identifiant
    d'execution. Le client Stash est ferme a la fin de la commande, y
    compris en cas d'erreur.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                with command_context(command_name(func.__name__)):
                    return await func(container, *args, **kwargs)
            finally:
                await container.stash_client().close()
        return wrapper
    return decorator


def exit_on_catalog_error(func):
    """
    Decorateur pour les commandes sync : affiche les erreurs fatales et
    sort avec le code adapte (1 pour le catalogue, 2 pour la configuration).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidTemplateError as e:
            console.print(f"[red]Template invalide :[/red] {e}")
            raise typer.Exit(code=EXIT_CONFIG_ERROR)
        except CatalogError as e:
            console.print(f"[red]Erreur Stash :[/red] {e}")
            raise typer.Exit(code=EXIT_CATALOG_ERROR)
    # Preserver les annotations Typer
    wrapper.__signature__ = inspect.signature(func)
    return wrapper


def format_ratio(part: float, total: float) -> str:
    """Pourcentage avec une decimale, "0%" si total nul."""
    if not total:
        return "0%"
    return f"{part / total * 100:.1f}%"
