"""
Moteur de notation du catalogue.

Convertit les compteurs d'engagement bruts en notes normalisees sur 100 :
d'abord les artefacts (studios, tags, performers), puis les scenes, dont la
note depend des artefacts deja notes. Chaque note est accompagnee d'une
trace de formule qui permet de la recalculer a la main.

Formule artefact :
    floor(likedSceneRatio * oCountMultiplier * sceneCountPenalty * favoriteMultiplier * 100)

Formule scene :
    min(100, floor(averageArtifactScore * oCountMultiplier))
    ou avgTagScore quand la scene n'a aucun engagement.
"""

import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, TypeVar, Union

from loguru import logger

from stash_curator.core.entities import ArtifactKind, Gender, Performer, Scene, Studio, Tag
from stash_curator.core.ports import ICatalogService
from stash_curator.core.value_objects import Rated, RatingResult
from stash_curator.services.statistics import (
    ArtifactStatistics,
    SceneStatistics,
    compute_artifact_statistics,
    compute_scene_statistics,
    divide,
    total_engagement,
)

Artifact = Union[Performer, Studio, Tag]
A = TypeVar("A", Performer, Studio, Tag)

MAX_SCORE = 100
FAVORITE_MULTIPLIER = 1.1
LIKES_DIVISOR = 3
SCENE_COUNT_DIVISOR = 2
SCENE_ENGAGEMENT_DIVISOR = 20

ARTIFACT_FORMULA = (
    "likedSceneRatio * oCountMultiplier * sceneCountPenalty * favoriteMultiplier * 100"
)
SCENE_FORMULA = "Average Artifact Score * oCountMultiplier"
UNENGAGED_SCENE_FORMULA = "avgTagScore"
UNENGAGED_SCENE_EXPLAINED = "No engagement, using avgTagScore"


def format_number(value: float) -> str:
    """
    Formate un nombre pour une trace : 4 decimales maximum, sans zeros inutiles.

    Exemples : 1.1 -> "1.1", 0.5 -> "0.5", 1 -> "1", 0.53333 -> "0.5333".
    """
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _references(kind: ArtifactKind, artifact: Artifact, scene: Scene) -> bool:
    """Verifie si la scene reference l'artefact."""
    if kind == ArtifactKind.STUDIO:
        return scene.studio is not None and scene.studio.id == artifact.id
    if kind == ArtifactKind.TAG:
        return any(tag.id == artifact.id for tag in scene.tags)
    return any(performer.id == artifact.id for performer in scene.performers)


def associated_scenes(
    kind: ArtifactKind,
    artifact: Artifact,
    scenes: Sequence[Scene],
) -> list[Scene]:
    """Retourne les scenes referencant l'artefact."""
    return [scene for scene in scenes if _references(kind, artifact, scene)]


def rate_artifact(
    kind: ArtifactKind,
    artifact: Artifact,
    scenes: Sequence[Scene],
    statistics: ArtifactStatistics,
) -> RatingResult:
    """
    Calcule la note d'un artefact.

    Args:
        kind: Type de l'artefact.
        artifact: Artefact a noter.
        scenes: Scenes du type d'artefact (population de reference).
        statistics: Moyennes de population du type d'artefact.

    Returns:
        RatingResult avec une note entiere dans [0, 100]. L'engagement
        retenu est la somme des engagements des scenes aimees associees.
    """
    own_scenes = associated_scenes(kind, artifact, scenes)
    liked_scenes = [scene for scene in own_scenes if scene.is_liked]
    likes = total_engagement(liked_scenes)

    liked_scene_ratio = divide(len(liked_scenes), len(own_scenes))
    o_count_multiplier = divide(likes, statistics.avg_likes_per_artifact * LIKES_DIVISOR)
    scene_count_penalty = min(
        1, divide(len(own_scenes), statistics.avg_scenes_per_artifact * SCENE_COUNT_DIVISOR)
    )
    favorite_multiplier = FAVORITE_MULTIPLIER if artifact.favorite else 1

    raw_score = math.floor(
        liked_scene_ratio
        * o_count_multiplier
        * scene_count_penalty
        * favorite_multiplier
        * 100
    )
    score = max(0, min(MAX_SCORE, raw_score))

    formula = " * ".join(
        format_number(value)
        for value in (
            liked_scene_ratio,
            o_count_multiplier,
            scene_count_penalty,
            favorite_multiplier,
            100,
        )
    )
    return RatingResult(
        score=score,
        engagement=likes,
        formula=formula,
        formula_explained=ARTIFACT_FORMULA,
    )


def rank(rated: Sequence[Rated]) -> list[Rated]:
    """Trie par note decroissante puis par engagement decroissant (tri stable)."""
    return sorted(rated, key=lambda item: (-item.score, -item.rating.engagement))


def rate_artifacts(
    kind: ArtifactKind,
    artifacts: Sequence[A],
    scenes: Sequence[Scene],
    statistics: Optional[ArtifactStatistics] = None,
) -> list[Rated[A]]:
    """
    Note tous les artefacts d'un type et les classe.

    Args:
        kind: Type des artefacts.
        artifacts: Artefacts a noter.
        scenes: Scenes associees a ce type d'artefact.
        statistics: Moyennes imposees ; calculees depuis artifacts/scenes si None.

    Returns:
        Liste classee des artefacts notes (vide si aucun artefact).
    """
    if statistics is None:
        statistics = compute_artifact_statistics(artifacts, scenes)

    logger.info(
        f"Notation de {len(artifacts)} {kind.value}(s) sur {len(scenes)} scenes : "
        f"{statistics.avg_likes_per_artifact} likes et "
        f"{statistics.avg_scenes_per_artifact} scenes en moyenne par {kind.value}"
    )

    return rank(
        [
            Rated(base=artifact, rating=rate_artifact(kind, artifact, scenes, statistics))
            for artifact in artifacts
        ]
    )


def average_artifact_score(
    scene: Scene,
    studio_scores: Mapping[str, float],
    tag_scores: Mapping[str, float],
    performer_scores: Mapping[str, float],
    statistics: SceneStatistics,
) -> int:
    """
    Moyenne (arrondie a l'entier inferieur) des notes des artefacts d'une scene.

    Une association manquante ou non notee est remplacee par la note moyenne
    du type : une scene sans tag n'est pas penalisee a zero.
    """
    if scene.studio is not None and scene.studio.id in studio_scores:
        studio_score = studio_scores[scene.studio.id]
    else:
        studio_score = statistics.avg_studio_score

    scene_tag_scores = [tag_scores[t.id] for t in scene.tags if t.id in tag_scores]
    if not scene_tag_scores:
        scene_tag_scores = [statistics.avg_tag_score]

    scene_performer_scores = [
        performer_scores[p.id] for p in scene.performers if p.id in performer_scores
    ]
    if not scene_performer_scores:
        scene_performer_scores = [statistics.avg_performer_score]

    all_scores = [studio_score, *scene_tag_scores, *scene_performer_scores]
    return math.floor(sum(all_scores) / len(all_scores))


def rate_scene(
    scene: Scene,
    studio_scores: Mapping[str, float],
    tag_scores: Mapping[str, float],
    performer_scores: Mapping[str, float],
    statistics: SceneStatistics,
) -> RatingResult:
    """
    Calcule la note d'une scene a partir des notes de ses artefacts.

    Sans engagement, la note vaut exactement avgTagScore.
    """
    if not scene.engagement:
        return RatingResult(
            score=statistics.avg_tag_score,
            engagement=0,
            formula=UNENGAGED_SCENE_FORMULA,
            formula_explained=UNENGAGED_SCENE_EXPLAINED,
        )

    average_score = average_artifact_score(
        scene, studio_scores, tag_scores, performer_scores, statistics
    )
    # Moyennes imposees a zero : multiplicateur neutre
    o_count_multiplier = round(
        divide(
            scene.engagement,
            statistics.avg_likes_per_liked_scene * SCENE_ENGAGEMENT_DIVISOR,
        )
        + 1,
        4,
    )
    score = min(MAX_SCORE, math.floor(average_score * o_count_multiplier))

    return RatingResult(
        score=score,
        engagement=scene.engagement,
        formula=f"{format_number(average_score)} * {format_number(o_count_multiplier)}",
        formula_explained=SCENE_FORMULA,
    )


def _scores_by_id(rated: Sequence[Rated]) -> dict[str, float]:
    return {item.id: item.score for item in rated}


def rate_scenes(
    scenes: Sequence[Scene],
    rated_studios: Sequence[Rated[Studio]],
    rated_tags: Sequence[Rated[Tag]],
    rated_performers: Sequence[Rated[Performer]],
    statistics: Optional[SceneStatistics] = None,
) -> list[Rated[Scene]]:
    """
    Note toutes les scenes et les classe.

    Args:
        scenes: Scenes a noter.
        rated_studios: Studios deja notes.
        rated_tags: Tags deja notes.
        rated_performers: Performers deja notes (tous genres confondus).
        statistics: Moyennes imposees ; calculees si None.

    Returns:
        Liste classee des scenes notees.
    """
    if statistics is None:
        statistics = compute_scene_statistics(
            scenes, rated_studios, rated_tags, rated_performers
        )

    logger.info(
        f"Notation de {len(scenes)} scenes : studio moyen {statistics.avg_studio_score}, "
        f"tag moyen {statistics.avg_tag_score}, "
        f"performer moyen {statistics.avg_performer_score}, "
        f"{statistics.avg_likes_per_liked_scene} likes par scene aimee"
    )

    studio_scores = _scores_by_id(rated_studios)
    tag_scores = _scores_by_id(rated_tags)
    performer_scores = _scores_by_id(rated_performers)

    return rank(
        [
            Rated(
                base=scene,
                rating=rate_scene(
                    scene, studio_scores, tag_scores, performer_scores, statistics
                ),
            )
            for scene in scenes
        ]
    )


@dataclass
class CatalogSnapshot:
    """Instantane du catalogue charge une seule fois avant la notation."""

    scenes: list[Scene] = field(default_factory=list)
    studios: list[Studio] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    male_performers: list[Performer] = field(default_factory=list)
    female_performers: list[Performer] = field(default_factory=list)


@dataclass
class CatalogRatings:
    """Resultat de la notation complete du catalogue."""

    studios: list[Rated[Studio]] = field(default_factory=list)
    tags: list[Rated[Tag]] = field(default_factory=list)
    male_performers: list[Rated[Performer]] = field(default_factory=list)
    female_performers: list[Rated[Performer]] = field(default_factory=list)
    scenes: list[Rated[Scene]] = field(default_factory=list)

    @property
    def performers(self) -> list[Rated[Performer]]:
        """Performers notes, hommes puis femmes."""
        return [*self.male_performers, *self.female_performers]


class RatingEngine:
    """
    Service de notation du catalogue complet.

    Charge l'instantane via le port catalogue puis note, dans l'ordre,
    studios, tags, performers masculins, performers feminins et scenes.
    Chaque type est note contre le sous-ensemble de scenes qui le concerne.
    """

    def __init__(self, catalog: ICatalogService) -> None:
        """
        Initialise le moteur.

        Args:
            catalog: Port d'acces au catalogue
        """
        self._catalog = catalog

    async def load_snapshot(self) -> CatalogSnapshot:
        """
        Charge scenes et artefacts depuis le catalogue.

        Les performers feminins sans engagement sont exclus de la population.

        Raises:
            CatalogFetchError: Si un chargement echoue (fatal)
        """
        scenes = await self._catalog.find_scenes()
        male_performers = await self._catalog.find_performers(
            gender=Gender.MALE, scene_count_above=0
        )
        female_performers = await self._catalog.find_performers(
            gender=Gender.FEMALE, scene_count_above=0, engagement_above=0
        )
        studios = await self._catalog.find_studios(scene_count_above=0)
        tags = await self._catalog.find_tags(scene_count_above=0)

        logger.info(
            f"Catalogue charge : {len(studios)} studios, {len(tags)} tags, "
            f"{len(male_performers)} performers masculins, "
            f"{len(female_performers)} performers feminins, {len(scenes)} scenes"
        )
        return CatalogSnapshot(
            scenes=scenes,
            studios=studios,
            tags=tags,
            male_performers=male_performers,
            female_performers=female_performers,
        )

    def rate_catalog(self, snapshot: CatalogSnapshot) -> CatalogRatings:
        """
        Note l'ensemble du catalogue a partir d'un instantane.

        Args:
            snapshot: Instantane du catalogue

        Returns:
            CatalogRatings avec chaque liste classee
        """
        scenes = snapshot.scenes

        studios = rate_artifacts(
            ArtifactKind.STUDIO,
            snapshot.studios,
            [scene for scene in scenes if scene.studio is not None],
        )
        tags = rate_artifacts(
            ArtifactKind.TAG,
            snapshot.tags,
            [scene for scene in scenes if scene.tags],
        )
        male_performers = rate_artifacts(
            ArtifactKind.PERFORMER,
            snapshot.male_performers,
            [scene for scene in scenes if scene.has_performer_of_gender(Gender.MALE)],
        )
        female_performers = rate_artifacts(
            ArtifactKind.PERFORMER,
            snapshot.female_performers,
            [scene for scene in scenes if scene.has_performer_of_gender(Gender.FEMALE)],
        )
        rated_scenes = rate_scenes(
            scenes, studios, tags, [*male_performers, *female_performers]
        )

        return CatalogRatings(
            studios=studios,
            tags=tags,
            male_performers=male_performers,
            female_performers=female_performers,
            scenes=rated_scenes,
        )
