"""
Analyse de l'engagement par performer.

Pour les performers d'un genre apparaissant dans un nombre minimum de
scenes, mesure la part de performers engageants (engagement > 0) puis
classe les favoris par engagement decroissant.
"""

from dataclasses import dataclass, field
from typing import Sequence

from stash_curator.core.entities import Gender, Performer, Scene

DEFAULT_MIN_SCENES = 3
DEFAULT_FAVORITES_COUNT = 10


@dataclass
class PerformerStats:
    """Engagement d'un performer et de ses scenes."""

    performer: Performer
    liked_scene_count: int = 0

    @property
    def liked_scene_percent(self) -> float:
        """Part des scenes du performer ayant de l'engagement, en pourcentage."""
        if not self.performer.scene_count:
            return 0
        return self.liked_scene_count / self.performer.scene_count * 100


@dataclass
class PerformerAnalysis:
    """Resultat de l'analyse des performers d'un genre."""

    gender: Gender
    min_scenes: int
    performer_count: int = 0
    engaged: list[PerformerStats] = field(default_factory=list)

    @property
    def engaged_percent(self) -> float:
        """Part des performers engageants, arrondie a 2 decimales."""
        if not self.performer_count:
            return 0
        return round(len(self.engaged) / self.performer_count * 100, 2)

    def favorites(self, count: int = DEFAULT_FAVORITES_COUNT) -> list[PerformerStats]:
        """Performers engageants par engagement decroissant, `count` premiers."""
        ranked = sorted(self.engaged, key=lambda s: s.performer.engagement, reverse=True)
        return ranked[:count]


def count_liked_scenes(scenes: Sequence[Scene]) -> dict[str, int]:
    """Nombre de scenes avec engagement par ID de performer."""
    counts: dict[str, int] = {}
    for scene in scenes:
        if not scene.is_liked:
            continue
        for performer in scene.performers:
            counts[performer.id] = counts.get(performer.id, 0) + 1
    return counts


def analyze_performers(
    performers: Sequence[Performer],
    scenes: Sequence[Scene],
    gender: Gender,
    min_scenes: int = DEFAULT_MIN_SCENES,
) -> PerformerAnalysis:
    """
    Analyse l'engagement des performers.

    Args:
        performers: Performers du genre, deja filtres sur le nombre de scenes.
        scenes: Scenes servant au decompte des scenes aimees par performer.
        gender: Genre analyse (pour l'affichage).
        min_scenes: Nombre minimum de scenes demande.

    Returns:
        PerformerAnalysis avec les performers engageants.
    """
    liked_counts = count_liked_scenes(scenes)
    engaged = [
        PerformerStats(performer=p, liked_scene_count=liked_counts.get(p.id, 0))
        for p in performers
        if p.engagement > 0
    ]
    return PerformerAnalysis(
        gender=gender,
        min_scenes=min_scenes,
        performer_count=len(performers),
        engaged=engaged,
    )
