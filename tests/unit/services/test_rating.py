"""
Tests unitaires pour le moteur de notation.

Verifie :
- La formule artefact (exemple de reference : notes 14 et 1)
- Le plafonnement a 100 et les populations vides
- La notation des scenes, y compris sans engagement
- Le chargement de l'instantane via le port catalogue
"""

from unittest.mock import call

import pytest

from stash_curator.core.entities import ArtifactKind, Gender, Studio, Tag
from stash_curator.core.value_objects import Rated, RatingResult
from stash_curator.services.rating import (
    ARTIFACT_FORMULA,
    SCENE_FORMULA,
    UNENGAGED_SCENE_EXPLAINED,
    RatingEngine,
    average_artifact_score,
    format_number,
    rank,
    rate_artifact,
    rate_artifacts,
    rate_scene,
    rate_scenes,
)
from stash_curator.services.statistics import ArtifactStatistics, SceneStatistics
from tests.fixtures.catalog import make_performer, make_scene


def _studio_scenes(studio: Studio, liked: list[int], total: int, prefix: str):
    """Scenes d'un studio : les premieres avec les likes donnes, les autres sans."""
    scenes = [
        make_scene(f"{prefix}{i}", engagement=likes, studio=studio)
        for i, likes in enumerate(liked)
    ]
    scenes += [
        make_scene(f"{prefix}x{i}", studio=studio) for i in range(total - len(liked))
    ]
    return scenes


class TestFormatNumber:
    """Tests pour format_number."""

    def test_strips_trailing_zeros(self) -> None:
        assert format_number(1.1) == "1.1"
        assert format_number(100) == "100"
        assert format_number(0) == "0"

    def test_keeps_four_decimals(self) -> None:
        assert format_number(0.53333) == "0.5333"


class TestRateArtifact:
    """Tests pour la formule artefact."""

    @pytest.fixture
    def statistics(self) -> ArtifactStatistics:
        return ArtifactStatistics(avg_likes_per_artifact=25, avg_scenes_per_artifact=10)

    def test_reference_example(self, statistics: ArtifactStatistics) -> None:
        """Favori 5/10 aimees (40 likes) -> 14 ; normal 2/10 aimees (10 likes) -> 1."""
        favorite = Studio(id="fav", name="Favori", favorite=True)
        plain = Studio(id="plain", name="Normal")
        scenes = _studio_scenes(favorite, [10, 10, 10, 5, 5], 10, "f") + _studio_scenes(
            plain, [5, 5], 10, "p"
        )

        ranked = rate_artifacts(ArtifactKind.STUDIO, [plain, favorite], scenes, statistics)

        assert [item.id for item in ranked] == ["fav", "plain"]
        assert ranked[0].score == 14
        assert ranked[1].score == 1
        assert ranked[0].rating.engagement == 40
        assert ranked[0].rating.formula == "0.5 * 0.5333 * 0.5 * 1.1 * 100"
        assert ranked[0].rating.formula_explained == ARTIFACT_FORMULA

    def test_no_liked_scene_scores_zero(self, statistics: ArtifactStatistics) -> None:
        studio = Studio(id="s", favorite=True)
        scenes = _studio_scenes(studio, [], 5, "s")

        result = rate_artifact(ArtifactKind.STUDIO, studio, scenes, statistics)

        assert result.score == 0
        assert result.engagement == 0

    def test_score_is_capped_at_100(self) -> None:
        studio = Studio(id="s")
        scenes = _studio_scenes(studio, [1000] * 10, 10, "s")
        statistics = ArtifactStatistics(avg_likes_per_artifact=1, avg_scenes_per_artifact=1)

        result = rate_artifact(ArtifactKind.STUDIO, studio, scenes, statistics)

        assert result.score == 100

    def test_artifact_without_scenes(self, statistics: ArtifactStatistics) -> None:
        tag = Tag(id="t")
        result = rate_artifact(ArtifactKind.TAG, tag, [], statistics)
        assert result.score == 0

    def test_performer_association(self) -> None:
        performer = make_performer("p1", engagement=3)
        scenes = [
            make_scene("1", engagement=3, performers=[performer]),
            make_scene("2", engagement=3),
        ]
        statistics = ArtifactStatistics(avg_likes_per_artifact=1, avg_scenes_per_artifact=1)

        result = rate_artifact(ArtifactKind.PERFORMER, performer, scenes, statistics)

        assert result.engagement == 3

    def test_empty_population(self) -> None:
        assert rate_artifacts(ArtifactKind.STUDIO, [], []) == []


class TestRank:
    """Tests pour rank."""

    def test_ties_broken_by_engagement(self) -> None:
        low = Rated(base=Studio(id="low"), rating=RatingResult(50, 1, "", ""))
        high = Rated(base=Studio(id="high"), rating=RatingResult(50, 9, "", ""))
        top = Rated(base=Studio(id="top"), rating=RatingResult(80, 0, "", ""))

        assert [r.id for r in rank([low, high, top])] == ["top", "high", "low"]


class TestRateScene:
    """Tests pour la notation des scenes."""

    @pytest.fixture
    def statistics(self) -> SceneStatistics:
        return SceneStatistics(
            avg_likes_per_liked_scene=3,
            avg_studio_score=20,
            avg_tag_score=12.5,
            avg_performer_score=10,
        )

    def test_zero_engagement_uses_average_tag_score(self, statistics: SceneStatistics) -> None:
        scene = make_scene("1", engagement=0, studio=Studio(id="s"))

        result = rate_scene(scene, {"s": 90}, {}, {}, statistics)

        assert result.score == 12.5
        assert result.formula_explained == UNENGAGED_SCENE_EXPLAINED

    def test_engaged_scene(self, statistics: SceneStatistics) -> None:
        scene = make_scene(
            "1",
            engagement=6,
            studio=Studio(id="s"),
            tags=[Tag(id="t")],
            performers=[make_performer("p")],
        )

        result = rate_scene(scene, {"s": 50}, {"t": 40}, {"p": 30}, statistics)

        # floor((50 + 40 + 30) / 3) = 40 ; 6 / 3 / 20 + 1 = 1.1
        assert result.score == 44
        assert result.formula == "40 * 1.1"
        assert result.formula_explained == SCENE_FORMULA

    def test_missing_associations_use_averages(self, statistics: SceneStatistics) -> None:
        scene = make_scene("1", engagement=3, tags=[Tag(id="unrated")])

        average = average_artifact_score(scene, {}, {}, {}, statistics)

        # floor((20 + 12.5 + 10) / 3)
        assert average == 14

    def test_score_capped_at_100(self) -> None:
        statistics = SceneStatistics(avg_likes_per_liked_scene=1, avg_studio_score=100)
        scene = make_scene("1", engagement=100, studio=Studio(id="s"))

        result = rate_scene(scene, {"s": 100}, {}, {}, statistics)

        assert result.score == 100

    def test_rate_scenes_ranks_results(self) -> None:
        studio = Studio(id="s")
        rated_studio = Rated(base=studio, rating=RatingResult(60, 0, "", ""))
        scenes = [
            make_scene("cold", engagement=0, studio=studio),
            make_scene("hot", engagement=5, studio=studio),
        ]

        ranked = rate_scenes(scenes, [rated_studio], [], [])

        assert ranked[0].id == "hot"

    def test_imposed_zero_likes_average_is_neutral(self) -> None:
        """Des moyennes imposees a zero ne font pas echouer la notation."""
        studio = Studio(id="s")
        rated_studio = Rated(base=studio, rating=RatingResult(60, 0, "", ""))
        statistics = SceneStatistics(avg_likes_per_liked_scene=0, avg_studio_score=60)
        scenes = [make_scene("hot", engagement=5, studio=studio)]

        ranked = rate_scenes(scenes, [rated_studio], [], [], statistics=statistics)

        # floor((60 + 0 + 0) / 3) * 1
        assert ranked[0].score == 20
        assert ranked[0].rating.formula == "20 * 1"


class TestRatingEngine:
    """Tests pour RatingEngine."""

    @pytest.mark.asyncio
    async def test_load_snapshot_query_order(self, mock_catalog) -> None:
        """Scenes, performers masculins, feminins engages, studios puis tags."""
        engine = RatingEngine(mock_catalog)

        await engine.load_snapshot()

        mock_catalog.find_scenes.assert_awaited_once_with()
        assert mock_catalog.find_performers.await_args_list == [
            call(gender=Gender.MALE, scene_count_above=0),
            call(gender=Gender.FEMALE, scene_count_above=0, engagement_above=0),
        ]
        mock_catalog.find_studios.assert_awaited_once_with(scene_count_above=0)
        mock_catalog.find_tags.assert_awaited_once_with(scene_count_above=0)

    @pytest.mark.asyncio
    async def test_rate_catalog(self, mock_catalog) -> None:
        studio = Studio(id="s", name="Studio")
        female = make_performer("f", gender=Gender.FEMALE)
        male = make_performer("m", gender=Gender.MALE)
        tag = Tag(id="t", name="Tag")
        scene = make_scene(
            "1", engagement=3, studio=studio, tags=[tag], performers=[female, male]
        )
        mock_catalog.find_scenes.return_value = [scene]
        mock_catalog.find_performers.side_effect = [[male], [female]]
        mock_catalog.find_studios.return_value = [studio]
        mock_catalog.find_tags.return_value = [tag]

        engine = RatingEngine(mock_catalog)
        ratings = engine.rate_catalog(await engine.load_snapshot())

        assert [r.id for r in ratings.studios] == ["s"]
        assert [r.id for r in ratings.tags] == ["t"]
        assert [r.id for r in ratings.performers] == ["m", "f"]
        assert [r.id for r in ratings.scenes] == ["1"]
        assert all(0 <= r.score <= 100 for r in ratings.studios)
