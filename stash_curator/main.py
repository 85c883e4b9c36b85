"""
Point d'entrée CLI de Stash Curator.

Configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    analyze_performers_command,
    analyze_studios_command,
    clean_folders,
    organize,
    rate,
    select,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="stash-curator",
    help="Curation d'un catalogue Stash : notation, sélection et réorganisation",
)
container = Container()


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv, -vvv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Stash Curator - Curation de catalogue Stash."""
    if not quiet and not verbose:
        return
    settings = container.config()
    configure_logging(
        log_level="ERROR" if quiet else "DEBUG",
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


app.command()(rate)
app.command()(select)
app.command()(organize)
app.command(name="analyze-studios")(analyze_studios_command)
app.command(name="analyze-performers")(analyze_performers_command)
app.command(name="clean-folders")(clean_folders)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Stash Curator")
    typer.echo(f"Serveur Stash : {config.stash_url}")
    typer.echo(f"Clé API : {'configurée' if config.stash_auth_enabled else 'non configurée'}")
    typer.echo(f"Préfixe des données : {config.stash_data_prefix}")
    typer.echo(f"Bibliothèque locale : {config.library_dir}")
    typer.echo(f"Marge réservée : {config.reserved_space_mb} Mo")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Stash Curator v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de Stash Curator", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
