"""
Tests unitaires pour les statistiques de population.

Verifie :
- divide : arrondi a 4 decimales et division par zero
- compute_artifact_statistics : moyennes par artefact
- compute_scene_statistics : moyennes des notes et likes par scene aimee
"""

from stash_curator.core.entities import Studio
from stash_curator.core.value_objects import Rated, RatingResult
from stash_curator.services.statistics import (
    compute_artifact_statistics,
    compute_scene_statistics,
    divide,
    total_engagement,
)
from tests.fixtures.catalog import make_scene


def _rated(id: str, score: float) -> Rated:
    return Rated(base=Studio(id=id), rating=RatingResult(score, 0, "", ""))


class TestDivide:
    """Tests pour divide."""

    def test_divide_by_zero_returns_zero(self) -> None:
        assert divide(10, 0) == 0

    def test_divide_rounds_to_four_decimals(self) -> None:
        assert divide(40, 75) == 0.5333
        assert divide(2, 3) == 0.6667

    def test_divide_exact(self) -> None:
        assert divide(10, 20) == 0.5


class TestArtifactStatistics:
    """Tests pour compute_artifact_statistics."""

    def test_averages_over_artifacts(self) -> None:
        scenes = [make_scene(str(i), engagement=5) for i in range(10)]
        stats = compute_artifact_statistics([Studio(id="a"), Studio(id="b")], scenes)

        assert stats.avg_likes_per_artifact == 25
        assert stats.avg_scenes_per_artifact == 5

    def test_empty_catalog_gives_zero(self) -> None:
        stats = compute_artifact_statistics([], [])

        assert stats.avg_likes_per_artifact == 0
        assert stats.avg_scenes_per_artifact == 0


class TestSceneStatistics:
    """Tests pour compute_scene_statistics."""

    def test_averages(self) -> None:
        scenes = [
            make_scene("1", engagement=4),
            make_scene("2", engagement=2),
            make_scene("3", engagement=0),
        ]
        stats = compute_scene_statistics(
            scenes,
            rated_studios=[_rated("s1", 10), _rated("s2", 20)],
            rated_tags=[_rated("t1", 30)],
            rated_performers=[],
        )

        assert stats.avg_likes_per_liked_scene == 3
        assert stats.avg_studio_score == 15
        assert stats.avg_tag_score == 30
        assert stats.avg_performer_score == 0

    def test_total_engagement(self) -> None:
        scenes = [make_scene("1", engagement=4), make_scene("2", engagement=2)]
        assert total_engagement(scenes) == 6
