"""
Commande CLI de selection de scenes sous contrainte d'espace.

La selection de base regroupe les scenes des tags demandes. L'espace
libre de la destination, moins une marge de securite et la selection de
base, donne le budget restant ; au-dela d'un seuil, le remplissage
intelligent complete avec des scenes favorites. La selection peut ensuite
etre copiee vers la destination avec ses NFO, ses affiches et les photos
des performers.
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional, Sequence

import typer
from rich.table import Table

from stash_curator.adapters.cli.helpers import (
    console,
    exit_on_catalog_error,
    suppress_loguru,
    with_container,
)
from stash_curator.core.entities import Scene
from stash_curator.core.value_objects import SceneFilter
from stash_curator.services.library_organizer import map_catalog_path
from stash_curator.services.scene_copier import CopyOutcome, CopyResult, CopySummary
from stash_curator.services.space_filler import (
    compute_available_budget,
    dedupe_scenes,
    total_size,
)
from stash_curator.utils.helpers import convert_mb_to_bytes, format_bytes


def build_selection_table(title: str, scenes: Sequence[Scene]) -> Table:
    """Table Rich des scenes selectionnees."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Titre", style="cyan")
    table.add_column("Studio")
    table.add_column("Engagement", justify="right")
    table.add_column("Taille", justify="right")

    for scene in scenes:
        table.add_row(
            scene.id,
            scene.title or "-",
            scene.studio.name if scene.studio else "-",
            str(scene.engagement),
            format_bytes(scene.size),
        )
    return table


def write_selection_list(
    scenes: Sequence[Scene],
    output: Path,
    catalog_prefix: str,
    library_dir: Path,
) -> int:
    """Ecrit les chemins locaux des fichiers principaux, un par ligne."""
    lines = [
        str(map_catalog_path(scene.main_file.path, catalog_prefix, library_dir))
        for scene in scenes
        if scene.main_file is not None
    ]
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    return len(lines)


@exit_on_catalog_error
def select(
    destination: Annotated[
        Path,
        typer.Argument(help="Repertoire de destination (espace libre mesure)"),
    ],
    tag: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="ID de tag de la selection de base (repetable)"),
    ] = None,
    fill: Annotated[
        bool,
        typer.Option("--fill/--no-fill", help="Completer avec des scenes favorites"),
    ] = True,
    reserved_mb: Annotated[
        Optional[int],
        typer.Option("--reserved-mb", help="Marge de securite en Mo", min=0),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Fichier recevant la liste des chemins"),
    ] = None,
    copy: Annotated[
        bool,
        typer.Option("--copy", help="Copier la selection vers la destination"),
    ] = False,
    people: Annotated[
        bool,
        typer.Option("--people", help="Exporter les photos des performers (Emby/Jellyfin)"),
    ] = False,
    source_dir: Annotated[
        Optional[Path],
        typer.Option("--source-dir", help="Repertoire local des donnees Stash (copie)"),
    ] = None,
) -> None:
    """Selectionne des scenes tenant dans l'espace libre de la destination."""
    if people and not copy:
        console.print("[red]--people necessite --copy.[/red]")
        raise typer.Exit(code=2)
    asyncio.run(
        _select_async(
            destination, tag or [], fill, reserved_mb, output, copy, people, source_dir
        )
    )


@with_container()
async def _select_async(
    container,
    destination: Path,
    tag_ids: list[str],
    fill: bool,
    reserved_mb: Optional[int],
    output: Optional[Path],
    copy: bool = False,
    people: bool = False,
    source_dir: Optional[Path] = None,
) -> None:
    """Implementation async de la commande select."""
    config = container.config()
    catalog = container.stash_client()
    file_system = container.file_system()

    if not file_system.exists(destination):
        console.print(f"[red]Destination introuvable :[/red] {destination}")
        raise typer.Exit(code=1)

    base: list[Scene] = []
    if tag_ids:
        base = dedupe_scenes(
            await catalog.find_scenes(SceneFilter(tag_ids=tuple(tag_ids)))
        )
        console.print(build_selection_table("Selection de base", base))

    reserved = convert_mb_to_bytes(
        reserved_mb if reserved_mb is not None else config.reserved_space_mb
    )
    free = file_system.free_space(destination)
    remaining = compute_available_budget(free, reserved, total_size(base))

    console.print(f"Espace libre : [bold]{format_bytes(free)}[/bold]")
    console.print(f"Selection de base : [bold]{format_bytes(total_size(base))}[/bold]")
    console.print(f"Budget restant : [bold]{format_bytes(remaining)}[/bold]")

    if remaining <= 0:
        console.print("[red]La selection de base ne tient pas dans l'espace libre.[/red]")
        raise typer.Exit(code=1)

    selection = list(base)
    threshold = convert_mb_to_bytes(config.smart_fill_threshold_mb)
    if fill and remaining > threshold:
        service = container.space_filler_service()
        with console.status("[cyan]Recherche des scenes favorites..."):
            result = await service.fill(remaining, already_included=base)
        console.print(build_selection_table("Scenes favorites ajoutees", result.added))
        console.print(
            f"[green]{len(result.added)}[/green] scene(s) ajoutee(s) "
            f"({format_bytes(result.added_size)}), "
            f"{result.duplicates_removed} doublon(s) retire(s)"
        )
        selection = result.combined(base)
    elif fill:
        console.print(
            f"[dim]Remplissage ignore : moins de {format_bytes(threshold)} disponibles.[/dim]"
        )

    console.print(
        f"\n[bold]Total :[/bold] {len(selection)} scene(s), "
        f"{format_bytes(total_size(selection))}"
    )

    if output is not None:
        count = write_selection_list(
            selection, output, config.stash_data_prefix, config.library_dir
        )
        console.print(f"Liste ecrite : {output} ({count} chemin(s))")

    if copy:
        await _copy_selection(
            container, selection, destination, source_dir or config.library_dir, people
        )


def build_copy_summary_table(summary: CopySummary) -> Table:
    """Table Rich du resume de la copie."""
    table = Table(title="Copie")
    table.add_column("Resultat")
    table.add_column("Scenes", justify="right")
    table.add_row("[green]Copiees[/green]", str(summary.copied))
    table.add_row("[dim]Deja presentes[/dim]", str(summary.existing))
    table.add_row("[red]Echecs[/red]", str(summary.failed))
    table.add_row("Affiches", str(summary.posters))
    return table


async def _copy_selection(
    container,
    selection: Sequence[Scene],
    destination: Path,
    source_dir: Path,
    people: bool,
) -> None:
    config = container.config()
    service = container.scene_copier_service()

    def on_progress(result: CopyResult) -> None:
        """Callback de progression."""
        if result.outcome == CopyOutcome.COPIED:
            console.print(f"  [green]✓[/green] {result.scene_id} -> {result.message}")
        elif result.outcome == CopyOutcome.FAILED:
            console.print(f"  [red]✗[/red] {result.scene_id} - {result.message}")

    console.print(f"\n[bold cyan]Copie[/bold cyan] de {len(selection)} scene(s) vers {destination}")
    with suppress_loguru():
        _, summary = await service.copy_scenes(
            selection,
            destination,
            config.stash_data_prefix,
            source_dir,
            on_progress=on_progress,
        )
    console.print(build_copy_summary_table(summary))

    if people:
        with console.status("[cyan]Export des photos des performers..."):
            saved = await service.export_people_metadata(selection, destination)
        console.print(f"{saved} photo(s) de performers exportee(s)")
