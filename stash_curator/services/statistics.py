"""
Statistiques de population du catalogue.

Ce module calcule les moyennes servant de denominateurs a la notation :
likes par artefact, scenes par artefact, likes par scene aimee et notes
moyennes par type d'artefact. Un catalogue vide est valide : toute
division par zero donne 0.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from stash_curator.core.entities import Scene
from stash_curator.core.value_objects import Rated

# Precision des divisions, garantit des traces de formule reproductibles
DIVISION_PRECISION = 4


def divide(a: float, b: float) -> float:
    """
    Division arrondie a 4 decimales, 0 si le diviseur est nul.

    Args:
        a: Dividende.
        b: Diviseur.

    Returns:
        round(a / b, 4), ou 0 quand b vaut 0.
    """
    if b == 0:
        return 0
    return round(a / b, DIVISION_PRECISION)


def total_engagement(scenes: Iterable[Scene]) -> int:
    """Somme des compteurs d'engagement des scenes."""
    return sum(scene.engagement for scene in scenes)


@dataclass(frozen=True)
class ArtifactStatistics:
    """Moyennes de population pour un type d'artefact."""

    avg_likes_per_artifact: float = 0
    avg_scenes_per_artifact: float = 0


@dataclass(frozen=True)
class SceneStatistics:
    """Moyennes utilisees pour noter les scenes."""

    avg_likes_per_liked_scene: float = 0
    avg_studio_score: float = 0
    avg_tag_score: float = 0
    avg_performer_score: float = 0


def compute_artifact_statistics(
    artifacts: Sequence[object],
    scenes: Sequence[Scene],
) -> ArtifactStatistics:
    """
    Calcule les moyennes d'un type d'artefact.

    Args:
        artifacts: Artefacts d'un meme type.
        scenes: Scenes associees a ce type d'artefact.

    Returns:
        ArtifactStatistics avec likes et scenes moyens par artefact.
    """
    return ArtifactStatistics(
        avg_likes_per_artifact=divide(total_engagement(scenes), len(artifacts)),
        avg_scenes_per_artifact=divide(len(scenes), len(artifacts)),
    )


def _average_score(rated: Sequence[Rated]) -> float:
    return divide(sum(item.score for item in rated), len(rated))


def compute_scene_statistics(
    scenes: Sequence[Scene],
    rated_studios: Sequence[Rated],
    rated_tags: Sequence[Rated],
    rated_performers: Sequence[Rated],
) -> SceneStatistics:
    """
    Calcule les moyennes necessaires a la notation des scenes.

    Args:
        scenes: Toutes les scenes a noter.
        rated_studios: Studios deja notes.
        rated_tags: Tags deja notes.
        rated_performers: Performers deja notes.

    Returns:
        SceneStatistics (likes par scene aimee, notes moyennes par type).
    """
    liked_scenes = [scene for scene in scenes if scene.is_liked]
    return SceneStatistics(
        avg_likes_per_liked_scene=divide(total_engagement(liked_scenes), len(liked_scenes)),
        avg_studio_score=_average_score(rated_studios),
        avg_tag_score=_average_score(rated_tags),
        avg_performer_score=_average_score(rated_performers),
    )
