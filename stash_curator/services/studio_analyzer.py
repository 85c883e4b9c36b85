"""
Analyse de l'engagement par studio.

A partir d'un seul instantane des scenes, calcule pour chaque studio le
nombre de scenes, la taille totale, l'engagement total et la frequence
d'engagement (engagement / scenes * 100). Les studios peu engageants et
volumineux sont proposes au nettoyage.
"""

import math
from dataclasses import dataclass, field
from typing import Sequence

from stash_curator.core.entities import Scene, Studio

# Un studio sous ce pourcentage d'engagement est candidat au nettoyage
CLEANUP_PERCENT_THRESHOLD = 10
DEFAULT_TOP_COUNT = 100


@dataclass
class StudioStats:
    """Statistiques d'engagement d'un studio."""

    studio: Studio
    scene_count: int = 0
    total_size: int = 0
    total_engagement: int = 0

    @property
    def engagement_percent(self) -> float:
        """Engagement rapporte au nombre de scenes, en pourcentage."""
        if not self.scene_count:
            return 0
        return self.total_engagement / self.scene_count * 100


@dataclass
class StudioAnalysis:
    """Resultat de l'analyse des studios."""

    by_total: list[StudioStats] = field(default_factory=list)
    by_percent: list[StudioStats] = field(default_factory=list)
    cleanup_candidates: list[StudioStats] = field(default_factory=list)


def compute_studio_stats(
    studios: Sequence[Studio],
    scenes: Sequence[Scene],
) -> list[StudioStats]:
    """
    Agrege les scenes par studio.

    Les studios sans scene sont conserves avec des compteurs a zero ;
    les scenes d'un studio absent de la liste sont ignorees.
    """
    stats = {studio.id: StudioStats(studio=studio) for studio in studios}
    for scene in scenes:
        if scene.studio is None or scene.studio.id not in stats:
            continue
        studio_stats = stats[scene.studio.id]
        studio_stats.scene_count += 1
        studio_stats.total_size += scene.size
        studio_stats.total_engagement += scene.engagement
    return list(stats.values())


def analyze_studios(
    studios: Sequence[Studio],
    scenes: Sequence[Scene],
    top_count: int = DEFAULT_TOP_COUNT,
) -> StudioAnalysis:
    """
    Classe les studios par engagement.

    Args:
        studios: Studios du catalogue.
        scenes: Toutes les scenes du catalogue.
        top_count: Taille des classements.

    Returns:
        StudioAnalysis : top par engagement total, top par frequence et
        candidats au nettoyage (floor(frequence) < 10) par taille decroissante.
    """
    stats = [s for s in compute_studio_stats(studios, scenes) if s.scene_count]

    by_total = sorted(stats, key=lambda s: s.total_engagement, reverse=True)
    by_percent = sorted(stats, key=lambda s: s.engagement_percent, reverse=True)
    cleanup = sorted(
        (s for s in stats if math.floor(s.engagement_percent) < CLEANUP_PERCENT_THRESHOLD),
        key=lambda s: s.total_size,
        reverse=True,
    )

    return StudioAnalysis(
        by_total=by_total[:top_count],
        by_percent=by_percent[:top_count],
        cleanup_candidates=cleanup,
    )
