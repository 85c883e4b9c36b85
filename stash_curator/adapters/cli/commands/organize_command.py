"""
Commande CLI de reorganisation de la bibliotheque.

Renomme et range les fichiers des scenes selon un modele de nom et une
structure de repertoires (par studio, plate ou imbriquee, ou par
performer), ecrit un fichier NFO par scene puis demande a Stash de
rescanner la bibliotheque.
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from stash_curator.adapters.cli.helpers import (
    EXIT_CONFIG_ERROR,
    console,
    exit_on_catalog_error,
    suppress_loguru,
    with_container,
)
from stash_curator.core.entities import Gender
from stash_curator.core.value_objects import (
    FilenameTemplate,
    OrganizationPlan,
    OrganizationType,
    SceneFilter,
    StudioStructure,
)
from stash_curator.services.library_organizer import (
    LibraryPlan,
    OrganizeOutcome,
    OrganizeResult,
    OrganizeSummary,
    build_plan,
)

DEFAULT_TEMPLATE = "{studio} - {date} - {title}.{ext}"


def build_scene_filter(
    require_title: bool = False,
    require_date: bool = False,
    require_studio: bool = False,
    require_details: bool = False,
    with_performers: bool = False,
    with_tags: bool = False,
    liked_only: bool = False,
    organized: Optional[bool] = None,
) -> SceneFilter:
    """Construit le filtre de scenes a partir des options de la commande."""
    return SceneFilter(
        require_title=require_title,
        require_date=require_date,
        require_studio=require_studio,
        require_details=require_details,
        performer_count_above=0 if with_performers else None,
        tag_count_above=0 if with_tags else None,
        engagement_above=0 if liked_only else None,
        organized=organized,
    )


def build_summary_table(summary: OrganizeSummary) -> Table:
    """Table Rich du resume de l'organisation."""
    table = Table(title="Resume")
    table.add_column("Resultat")
    table.add_column("Scenes", justify="right")
    table.add_row("[green]Deplacees[/green]", str(summary.moved))
    table.add_row("[dim]Deja en place[/dim]", str(summary.skipped))
    table.add_row("[red]Echecs[/red]", str(summary.failed))
    table.add_row("[yellow]Doublons ignores[/yellow]", str(summary.duplicates))
    return table


def _print_duplicates(library_plan: LibraryPlan) -> None:
    if not library_plan.duplicates:
        return
    console.print(
        f"[yellow]{len(library_plan.duplicates)} scene(s) en doublon "
        f"(chemin cible deja pris), non deplacee(s) :[/yellow]"
    )
    for scene_plan in library_plan.duplicates:
        console.print(f"  [dim]-[/dim] {scene_plan.scene.id} -> {scene_plan.target_path}")


@exit_on_catalog_error
def organize(
    template: Annotated[
        str,
        typer.Option("--template", help="Modele de nom, ex: '{date} - {title}.{ext}'"),
    ] = DEFAULT_TEMPLATE,
    data_dir: Annotated[
        Optional[Path],
        typer.Option("--data-dir", help="Repertoire local des donnees Stash"),
    ] = None,
    by: Annotated[
        OrganizationType,
        typer.Option("--by", help="Organisation par studio ou par performer"),
    ] = OrganizationType.STUDIO,
    structure: Annotated[
        StudioStructure,
        typer.Option("--structure", help="Repertoires de studios plats ou imbriques"),
    ] = StudioStructure.FLAT,
    gender: Annotated[
        Optional[Gender],
        typer.Option("--gender", help="Genre du performer (organisation par performer)"),
    ] = None,
    male: Annotated[
        bool,
        typer.Option("--male", help="Seulement les scenes avec un performer masculin"),
    ] = False,
    female: Annotated[
        bool,
        typer.Option("--female", help="Seulement les scenes avec un performer feminin"),
    ] = False,
    require_title: Annotated[bool, typer.Option("--require-title")] = False,
    require_date: Annotated[bool, typer.Option("--require-date")] = False,
    require_studio: Annotated[bool, typer.Option("--require-studio")] = False,
    require_details: Annotated[bool, typer.Option("--require-details")] = False,
    with_performers: Annotated[bool, typer.Option("--with-performers")] = False,
    with_tags: Annotated[bool, typer.Option("--with-tags")] = False,
    liked: Annotated[
        bool,
        typer.Option("--liked", help="Seulement les scenes avec engagement"),
    ] = False,
    organized: Annotated[
        Optional[bool],
        typer.Option("--organized/--unorganized", help="Filtre sur le drapeau organized"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Afficher les actions sans toucher au disque"),
    ] = False,
) -> None:
    """Renomme et range les fichiers des scenes."""
    parsed_template = FilenameTemplate.parse(template)
    scene_filter = build_scene_filter(
        require_title=require_title,
        require_date=require_date,
        require_studio=require_studio,
        require_details=require_details,
        with_performers=with_performers,
        with_tags=with_tags,
        liked_only=liked,
        organized=organized,
    )
    asyncio.run(
        _organize_async(
            parsed_template,
            data_dir,
            by,
            structure,
            gender,
            male,
            female,
            scene_filter,
            dry_run,
        )
    )


@with_container()
async def _organize_async(
    container,
    template: FilenameTemplate,
    data_dir: Optional[Path],
    by: OrganizationType,
    structure: StudioStructure,
    gender: Optional[Gender],
    male: bool,
    female: bool,
    scene_filter: SceneFilter,
    dry_run: bool,
) -> None:
    """Implementation async de la commande organize."""
    config = container.config()
    try:
        plan = OrganizationPlan(
            template=template,
            data_dir=data_dir or config.library_dir,
            organization_type=by,
            studio_structure=structure,
            performer_gender=gender,
            require_male=male,
            require_female=female,
            catalog_data_prefix=config.stash_data_prefix,
        )
    except ValueError as e:
        console.print(f"[red]Configuration invalide :[/red] {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    service = container.library_organizer_service()
    with console.status("[cyan]Chargement des scenes..."):
        scenes, studios = await service.load(scene_filter)

    library_plan = build_plan(scenes, plan, studios)
    console.print(
        f"[bold cyan]Organisation[/bold cyan]: {len(library_plan.to_organize)} scene(s) "
        f"sur {len(scenes)}"
        + (" [yellow](dry run)[/yellow]" if dry_run else "")
    )
    _print_duplicates(library_plan)

    def on_progress(result: OrganizeResult) -> None:
        """Callback de progression."""
        if result.outcome == OrganizeOutcome.MOVED:
            console.print(f"  [green]✓[/green] {result.scene_id} -> {result.message}")
        elif result.outcome == OrganizeOutcome.FAILED:
            console.print(f"  [red]✗[/red] {result.scene_id} - {result.message}")

    with suppress_loguru():
        results, summary = await service.organize(
            library_plan, dry_run=dry_run, on_progress=on_progress
        )

    for result in library_plan.failures:
        console.print(f"  [red]✗[/red] {result.scene_id} - {result.message}")

    console.print(build_summary_table(summary))
