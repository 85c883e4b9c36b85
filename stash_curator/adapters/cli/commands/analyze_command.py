"""
Commandes CLI d'analyse de l'engagement par studio et par performer.
"""

import asyncio
from typing import Annotated, Sequence

import typer
from rich.table import Table

from stash_curator.adapters.cli.helpers import (
    console,
    exit_on_catalog_error,
    with_container,
)
from stash_curator.core.entities import Gender
from stash_curator.core.value_objects import SceneFilter
from stash_curator.services.performer_analyzer import (
    DEFAULT_FAVORITES_COUNT,
    DEFAULT_MIN_SCENES,
    PerformerStats,
    analyze_performers,
)
from stash_curator.services.studio_analyzer import (
    DEFAULT_TOP_COUNT,
    StudioStats,
    analyze_studios,
)
from stash_curator.utils.helpers import format_bytes


def build_studio_table(title: str, stats: Sequence[StudioStats]) -> Table:
    """Table Rich des statistiques de studios."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Studio", style="cyan")
    table.add_column("Scenes", justify="right")
    table.add_column("Engagement", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Taille", justify="right")

    for position, item in enumerate(stats, start=1):
        table.add_row(
            str(position),
            item.studio.name or item.studio.id,
            str(item.scene_count),
            str(item.total_engagement),
            f"{item.engagement_percent:.1f}",
            format_bytes(item.total_size),
        )
    return table


@exit_on_catalog_error
def analyze_studios_command(
    top: Annotated[
        int,
        typer.Option("--top", "-n", help="Nombre de studios par classement", min=1),
    ] = DEFAULT_TOP_COUNT,
) -> None:
    """Classe les studios par engagement et propose des candidats au nettoyage."""
    asyncio.run(_analyze_studios_async(top))


@with_container()
async def _analyze_studios_async(container, top: int) -> None:
    """Implementation async de la commande analyze-studios."""
    catalog = container.stash_client()

    with console.status("[cyan]Chargement du catalogue..."):
        scenes = await catalog.find_scenes()
        studios = await catalog.find_studios()

    analysis = analyze_studios(studios, scenes, top_count=top)

    console.print(build_studio_table("Top studios par engagement total", analysis.by_total))
    console.print(build_studio_table("Top studios par frequence d'engagement", analysis.by_percent))

    if not analysis.cleanup_candidates:
        console.print("[green]Aucun studio candidat au nettoyage.[/green]")
        return

    reclaimable = sum(s.total_size for s in analysis.cleanup_candidates)
    console.print(
        build_studio_table("Candidats au nettoyage (< 10%)", analysis.cleanup_candidates)
    )
    console.print(
        f"[yellow]{len(analysis.cleanup_candidates)}[/yellow] studio(s), "
        f"{format_bytes(reclaimable)} recuperables"
    )


def build_performer_table(title: str, stats: Sequence[PerformerStats]) -> Table:
    """Table Rich des performers favoris."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Performer", style="cyan")
    table.add_column("Engagement", justify="right", style="magenta")
    table.add_column("Scenes", justify="right")
    table.add_column("Scenes aimees", justify="right", style="green")
    table.add_column("%", justify="right")

    for position, item in enumerate(stats, start=1):
        table.add_row(
            str(position),
            item.performer.name or item.performer.id,
            str(item.performer.engagement),
            str(item.performer.scene_count),
            str(item.liked_scene_count),
            f"{item.liked_scene_percent:.0f}",
        )
    return table


@exit_on_catalog_error
def analyze_performers_command(
    gender: Annotated[
        Gender,
        typer.Option("--gender", help="Genre des performers analyses"),
    ] = Gender.FEMALE,
    min_scenes: Annotated[
        int,
        typer.Option("--min-scenes", help="Nombre minimum de scenes par performer", min=1),
    ] = DEFAULT_MIN_SCENES,
    favorites: Annotated[
        bool,
        typer.Option("--favorites/--no-favorites", help="Afficher les performers favoris"),
    ] = True,
    top: Annotated[
        int,
        typer.Option("--top", "-n", help="Nombre de favoris affiches", min=1),
    ] = DEFAULT_FAVORITES_COUNT,
) -> None:
    """Mesure la part de performers engageants et liste les favoris."""
    asyncio.run(_analyze_performers_async(gender, min_scenes, favorites, top))


@with_container()
async def _analyze_performers_async(
    container,
    gender: Gender,
    min_scenes: int,
    favorites: bool,
    top: int,
) -> None:
    """Implementation async de la commande analyze-performers."""
    catalog = container.stash_client()

    with console.status("[cyan]Chargement des performers..."):
        performers = await catalog.find_performers(
            gender=gender, scene_count_above=min_scenes - 1
        )
        liked_scenes = (
            await catalog.find_scenes(SceneFilter(engagement_above=0)) if favorites else []
        )

    analysis = analyze_performers(performers, liked_scenes, gender, min_scenes)

    console.print(
        f"Sur [green]{analysis.performer_count}[/green] performer(s) "
        f"[magenta]{gender.value}[/magenta] avec au moins {min_scenes} scene(s), "
        f"[green]{len(analysis.engaged)}[/green] ont de l'engagement "
        f"([magenta]{analysis.engaged_percent:.2f}%[/magenta])."
    )

    if favorites and analysis.engaged:
        console.print(
            build_performer_table(f"Top {top} performers", analysis.favorites(top))
        )
