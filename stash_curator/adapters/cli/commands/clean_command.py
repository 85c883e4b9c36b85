"""
Commande CLI de nettoyage des dossiers sans video.

Sans option, la commande liste les dossiers trouves. `--interactive`
demande une confirmation par dossier ; `--delete` supprime tout apres
des confirmations renforcees (grand nombre de dossiers, noms sensibles).
"""

from pathlib import Path
from typing import Annotated, Sequence

import typer
from rich.prompt import Confirm
from rich.table import Table

from stash_curator.adapters.cli.helpers import console
from stash_curator.logging_config import command_context
from stash_curator.services.folder_cleaner import (
    CleanupResult,
    EmptyFolder,
    delete_folder,
    delete_folders,
    find_empty_folders,
)

# Au-dela, la suppression groupee demande une confirmation supplementaire
LARGE_DELETION_COUNT = 10
DISPLAY_LIMIT = 20


def build_folder_table(folders: Sequence[EmptyFolder], limit: int = DISPLAY_LIMIT) -> Table:
    """Table Rich des dossiers sans video, noms sensibles en rouge."""
    table = Table(title=f"Dossiers sans video ({len(folders)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Dossier")
    table.add_column("Sous-dossiers", justify="center")

    for position, folder in enumerate(folders[:limit], start=1):
        style = "red" if folder.is_important else "cyan"
        table.add_row(
            str(position),
            f"[{style}]{folder.path}[/{style}]",
            "oui" if folder.has_subfolders else "",
        )
    return table


def _confirm_batch(folders: Sequence[EmptyFolder], important: Sequence[EmptyFolder]) -> bool:
    if len(folders) > LARGE_DELETION_COUNT and not Confirm.ask(
        f"Vous allez supprimer {len(folders)} dossiers. Continuer ?", default=False
    ):
        return False
    if important and not Confirm.ask(
        f"[red]{len(important)} dossier(s) ont un nom sensible.[/red] Continuer quand meme ?",
        default=False,
    ):
        return False
    return Confirm.ask(
        f"Confirmation finale : supprimer les {len(folders)} dossiers ? "
        "Cette action est irreversible.",
        default=False,
    )


def _run_interactive(folders: Sequence[EmptyFolder]) -> CleanupResult:
    result = CleanupResult()
    skipped = 0
    for position, folder in enumerate(folders, start=1):
        console.print(f"\n[yellow][{position}/{len(folders)}][/yellow] [cyan]{folder.path}[/cyan]")
        console.print(f"  [dim]Parent : {folder.parent}[/dim]")
        if folder.has_subfolders:
            console.print("  [dim]Contient des sous-dossiers sans video[/dim]")
        if not folder.path.exists():
            console.print("  [dim]Deja supprime avec son parent[/dim]")
            continue
        if not Confirm.ask("Supprimer ce dossier ?", default=False):
            skipped += 1
            continue
        try:
            delete_folder(folder.path)
            result.removed += 1
        except OSError as e:
            result.errors.append(f"Suppression echouee {folder.path}: {e}")
            console.print(f"  [red]Echec :[/red] {e}")
    console.print(f"\n{skipped} dossier(s) conserve(s)")
    return result


def clean_folders(
    root: Annotated[
        Path,
        typer.Argument(help="Repertoire a scanner"),
    ],
    delete: Annotated[
        bool,
        typer.Option("--delete", help="Supprimer tous les dossiers trouves"),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Confirmer chaque suppression"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Ne pas demander de confirmation (avec --delete)"),
    ] = False,
) -> None:
    """Liste ou supprime les dossiers ne contenant aucune video."""
    if not root.is_dir():
        console.print(f"[red]Repertoire introuvable :[/red] {root}")
        raise typer.Exit(code=1)

    with command_context("clean-folders"):
        with console.status(f"[cyan]Scan de {root}..."):
            folders = find_empty_folders(root)

        if not folders:
            console.print("[green]Aucun dossier sans video : l'arborescence est propre.[/green]")
            return

        important = [f for f in folders if f.is_important]
        if important:
            console.print(
                f"[red]Attention : {len(important)} dossier(s) ont un nom "
                "potentiellement important :[/red]"
            )
            for folder in important:
                console.print(f"  [red]{folder.path}[/red]")

        console.print(build_folder_table(folders))
        if len(folders) > DISPLAY_LIMIT:
            console.print(f"[dim]... et {len(folders) - DISPLAY_LIMIT} autre(s)[/dim]")

        if interactive:
            result = _run_interactive(folders)
        elif delete:
            if not yes and not _confirm_batch(folders, important):
                console.print("[yellow]Operation annulee.[/yellow]")
                return
            result = delete_folders(folders)
        else:
            console.print("Aucun dossier supprime (--delete ou --interactive pour supprimer).")
            return

        console.print(f"[green]{result.removed}[/green] dossier(s) supprime(s)")
        if result.errors:
            for error in result.errors:
                console.print(f"  [red]{error}[/red]")
            console.print(
                "[yellow]En cas d'erreur de permission, relancer avec les droits "
                "suffisants.[/yellow]"
            )
            raise typer.Exit(code=1)
