"""
Service d'ecriture des notes calculees dans le catalogue.

Les notes sont poussees une par une (chaque entite a sa propre note),
avec une pause entre deux appels pour ne pas surcharger le serveur.
Un echec sur un element est journalise et n'interrompt pas le lot.
"""

import asyncio
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from loguru import logger

from stash_curator.core.entities import ArtifactKind
from stash_curator.core.ports import CatalogError, ICatalogService
from stash_curator.core.value_objects import Rated


class UpdateResult(Enum):
    """Resultat de l'ecriture d'une note."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ProgressInfo:
    """Information de progression pour le callback."""

    current: int
    total: int
    name: str
    rating: int
    result: UpdateResult


@dataclass
class UpdateStats:
    """Statistiques d'ecriture des notes."""

    total: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0


class RatingsUpdaterService:
    """
    Service pour pousser les notes calculees vers le catalogue.

    Les tags ne supportent pas de note cote catalogue : un lot de tags
    est integralement ignore.
    """

    def __init__(self, catalog: ICatalogService) -> None:
        """
        Initialise le service.

        Args:
            catalog: Port d'acces au catalogue
        """
        self._catalog = catalog

    async def push_ratings(
        self,
        kind: Optional[ArtifactKind],
        rated: Sequence[Rated],
        delay_seconds: float = 0.2,
        on_progress: Optional[Callable[[ProgressInfo], None]] = None,
    ) -> UpdateStats:
        """
        Ecrit les notes d'un lot d'entites.

        Args:
            kind: Type d'artefact, None pour des scenes
            rated: Entites notees
            delay_seconds: Pause entre deux appels (sauf avant le premier)
            on_progress: Callback appele apres chaque entite traitee

        Returns:
            Statistiques d'ecriture
        """
        stats = UpdateStats(total=len(rated))

        if kind == ArtifactKind.TAG:
            logger.warning("Les tags ne supportent pas de note, ecriture ignoree")
            stats.skipped = stats.total
            return stats

        for i, item in enumerate(rated):
            # Rate limiting (sauf premier appel)
            if i > 0 and delay_seconds > 0:
                await asyncio.sleep(delay_seconds)

            rating = math.floor(item.score)
            try:
                await self._catalog.update_rating(kind, item.id, rating)
            except CatalogError as e:
                logger.error(f"Echec de mise a jour de la note de {item.id} ({item.name}): {e}")
                stats.failed += 1
                result = UpdateResult.FAILED
            else:
                stats.updated += 1
                result = UpdateResult.SUCCESS

            if on_progress:
                on_progress(ProgressInfo(
                    current=i + 1,
                    total=stats.total,
                    name=item.name,
                    rating=rating,
                    result=result,
                ))

        logger.info(
            f"Notes ecrites : {stats.updated}/{stats.total} ({stats.failed} echec(s))"
        )
        return stats
