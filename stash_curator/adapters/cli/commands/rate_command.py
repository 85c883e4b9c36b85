"""
Commande CLI de notation du catalogue.

Note studios, tags, performers et scenes a partir d'un seul instantane,
affiche les classements puis, sur demande, ecrit les notes dans Stash.
"""

import asyncio
from typing import Annotated, Optional, Sequence

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from stash_curator.adapters.cli.helpers import (
    console,
    exit_on_catalog_error,
    suppress_loguru,
    with_container,
)
from stash_curator.core.entities import ArtifactKind
from stash_curator.core.value_objects import Rated
from stash_curator.services.rating import CatalogRatings
from stash_curator.services.rating_updater import (
    ProgressInfo,
    RatingsUpdaterService,
    UpdateResult,
    UpdateStats,
)

DEFAULT_TOP = 50


def build_ranking_table(title: str, rated: Sequence[Rated], top: int = DEFAULT_TOP) -> Table:
    """Table Rich du classement (rang, nom, note, engagement, formule)."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Nom", style="cyan")
    table.add_column("Note", justify="right", style="bold")
    table.add_column("Engagement", justify="right")
    table.add_column("Formule", style="dim")

    for position, item in enumerate(rated[:top], start=1):
        table.add_row(
            str(position),
            item.name or item.id,
            f"{item.score:g}",
            str(item.rating.engagement),
            item.rating.formula_explained,
        )
    return table


def _display_ratings(ratings: CatalogRatings, top: int) -> None:
    console.print(build_ranking_table("Studios", ratings.studios, top))
    console.print(build_ranking_table("Tags", ratings.tags, top))
    console.print(build_ranking_table("Performers masculins", ratings.male_performers, top))
    console.print(build_ranking_table("Performers feminins", ratings.female_performers, top))
    console.print(build_ranking_table("Scenes", ratings.scenes, top))


async def _push_batch(
    service: RatingsUpdaterService,
    label: str,
    kind: Optional[ArtifactKind],
    rated: Sequence[Rated],
    delay_seconds: float,
) -> UpdateStats:
    """Ecrit un lot de notes avec une barre de progression."""
    if not rated:
        return UpdateStats()

    with suppress_loguru():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=False,
        ) as progress:
            task = progress.add_task(f"[cyan]{label}...", total=len(rated))

            def on_progress(info: ProgressInfo) -> None:
                """Callback de progression."""
                progress.update(task, completed=info.current)
                if info.result == UpdateResult.FAILED:
                    progress.console.print(f"  [red]✗[/red] {info.name} - echec")

            stats = await service.push_ratings(
                kind, rated, delay_seconds=delay_seconds, on_progress=on_progress
            )

    if stats.skipped:
        console.print(f"  [yellow]{stats.skipped}[/yellow] {label.lower()} ignore(s)")
    return stats


@exit_on_catalog_error
def rate(
    top: Annotated[
        int,
        typer.Option("--top", "-n", help="Nombre d'elements affiches par classement", min=1),
    ] = DEFAULT_TOP,
    push: Annotated[
        bool,
        typer.Option("--push", help="Ecrire les notes calculees dans Stash"),
    ] = False,
) -> None:
    """Calcule les notes du catalogue et affiche les classements."""
    asyncio.run(_rate_async(top, push))


@with_container()
async def _rate_async(container, top: int, push: bool) -> None:
    """Implementation async de la commande rate."""
    engine = container.rating_engine()

    with console.status("[cyan]Chargement du catalogue..."):
        snapshot = await engine.load_snapshot()

    ratings = engine.rate_catalog(snapshot)
    _display_ratings(ratings, top)

    if not push:
        console.print("\n[dim]Utilisez --push pour ecrire les notes dans Stash.[/dim]")
        return

    service = container.ratings_updater_service()
    delay = container.config().update_delay_seconds
    batches = [
        ("Studios", ArtifactKind.STUDIO, ratings.studios),
        ("Tags", ArtifactKind.TAG, ratings.tags),
        ("Performers", ArtifactKind.PERFORMER, ratings.performers),
        ("Scenes", None, ratings.scenes),
    ]

    total = UpdateStats()
    for label, kind, rated in batches:
        stats = await _push_batch(service, label, kind, rated, delay)
        total.total += stats.total
        total.updated += stats.updated
        total.failed += stats.failed
        total.skipped += stats.skipped

    console.print("\n[bold]Resume:[/bold]")
    console.print(f"  [green]{total.updated}[/green] note(s) ecrite(s)")
    if total.failed > 0:
        console.print(f"  [red]{total.failed}[/red] echec(s)")
    if total.skipped > 0:
        console.print(f"  [yellow]{total.skipped}[/yellow] ignoree(s)")
