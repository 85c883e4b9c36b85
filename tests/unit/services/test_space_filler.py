"""
Tests unitaires pour la selection sous contrainte d'espace.

Verifie :
- Le remplissage glouton (budget jamais depasse)
- Le retour du pool complet quand il tient
- Les poids par genre et le score personnalise
- L'interrogation des pools de favoris et le dedoublonnage
"""

import pytest

from stash_curator.core.entities import Gender, Studio, Tag
from stash_curator.core.value_objects import SceneFilter
from stash_curator.services.space_filler import (
    FavoriteSet,
    GenderWeights,
    SelectionResult,
    SpaceFillerService,
    compute_available_budget,
    dedupe_scenes,
    reduce_to_size,
    score_scene,
    select_scenes,
    sort_by_score,
    total_size,
)
from tests.fixtures.catalog import make_performer, make_scene


class TestReduceToSize:
    """Tests pour le remplissage glouton."""

    def test_reference_example(self) -> None:
        """Budget 5e9 et trois scenes de 2e9 : exactement 2 acceptees."""
        scenes = [make_scene(str(i), size=2_000_000_000) for i in range(3)]

        accepted = reduce_to_size(scenes, 5_000_000_000)

        assert len(accepted) == 2
        assert total_size(accepted) <= 5_000_000_000

    def test_overflowing_scene_skipped_but_later_ones_considered(self) -> None:
        scenes = [
            make_scene("big", size=8),
            make_scene("small", size=2),
        ]
        assert [s.id for s in reduce_to_size(scenes, 5)] == ["small"]

    def test_exact_fit_is_rejected(self) -> None:
        """Une scene qui remplit exactement le budget n'est pas acceptee."""
        assert reduce_to_size([make_scene("1", size=5)], 5) == []


class TestSelectScenes:
    """Tests pour select_scenes."""

    def test_full_pool_when_it_fits(self) -> None:
        pool = [make_scene(str(i), size=10) for i in range(3)]
        assert select_scenes(pool, 30, FavoriteSet()) == pool

    def test_reduced_pool_sorted_by_score(self) -> None:
        pool = [
            make_scene("cold", engagement=1, size=10),
            make_scene("hot", engagement=9, size=10),
        ]
        selected = select_scenes(pool, 15, FavoriteSet())
        assert [s.id for s in selected] == ["hot"]


class TestGenderWeights:
    """Tests pour GenderWeights."""

    def test_overrepresented_gender_is_reduced(self) -> None:
        favorites = FavoriteSet.from_artifacts(
            female_performers=[
                make_performer(str(i), favorite=True) for i in range(4)
            ],
            male_performers=[
                make_performer("m1", gender=Gender.MALE, favorite=True),
                make_performer("m2", gender=Gender.MALE, favorite=True),
            ],
        )
        weights = GenderWeights.from_favorites(favorites)

        assert weights.female == 0.5
        assert weights.male == 1

    def test_zero_denominator_gives_one(self) -> None:
        favorites = FavoriteSet.from_artifacts(
            female_performers=[make_performer("f", favorite=True)]
        )
        weights = GenderWeights.from_favorites(favorites)

        assert weights.female == 1
        assert weights.male == 0

    def test_other_genders_weigh_zero(self) -> None:
        assert GenderWeights().for_gender(Gender.NON_BINARY) == 0
        assert GenderWeights().for_gender(None) == 0


class TestScoreScene:
    """Tests pour score_scene."""

    def test_custom_score(self) -> None:
        scene = make_scene(
            "1",
            engagement=3,
            studio=Studio(id="s", favorite=True),
            tags=[Tag(id="t1", favorite=True), Tag(id="t2", favorite=True), Tag(id="t3")],
            performers=[
                make_performer("f", favorite=True, engagement=10),
                make_performer("m", gender=Gender.MALE, favorite=True, engagement=4),
                make_performer("x", engagement=100),
            ],
        )
        weights = GenderWeights(female=0.5, male=1)

        # 3 + 10 * 0.5 + 4 * 1 + 5 + 2 * 5
        assert score_scene(scene, weights) == 27

    def test_sort_is_stable(self) -> None:
        scenes = [make_scene("a", engagement=1), make_scene("b", engagement=1)]
        assert [s.id for s in sort_by_score(scenes, GenderWeights())] == ["a", "b"]


class TestHelpers:
    """Tests des fonctions utilitaires."""

    def test_dedupe_keeps_first(self) -> None:
        first = make_scene("1", title="first")
        scenes = [first, make_scene("2"), make_scene("1", title="second")]

        unique = dedupe_scenes(scenes)

        assert [s.id for s in unique] == ["1", "2"]
        assert unique[0].title == "first"

    def test_available_budget(self) -> None:
        assert compute_available_budget(100, 20, 30) == 50
        assert compute_available_budget(10, 20) == -10

    def test_favorite_set_filters_and_dedupes(self) -> None:
        favorites = FavoriteSet.from_artifacts(
            studios=[Studio(id="1", favorite=True), Studio(id="1", favorite=True), Studio(id="2")]
        )
        assert [s.id for s in favorites.studios] == ["1"]

    def test_combined_selection(self) -> None:
        base = [make_scene("b")]
        result = SelectionResult(added=[make_scene("a")])
        assert [s.id for s in result.combined(base)] == ["b", "a"]


class TestSpaceFillerService:
    """Tests pour SpaceFillerService."""

    @pytest.fixture
    def favorites(self) -> FavoriteSet:
        return FavoriteSet.from_artifacts(
            female_performers=[make_performer("f", favorite=True)],
            studios=[Studio(id="s", favorite=True)],
            tags=[Tag(id="t", favorite=True)],
        )

    @pytest.mark.asyncio
    async def test_find_candidates_queries_pools_in_order(self, mock_catalog, favorites) -> None:
        service = SpaceFillerService(mock_catalog)

        await service.find_candidates(favorites)

        filters = [c.args[0] for c in mock_catalog.find_scenes.await_args_list]
        assert filters == [
            SceneFilter(performer_favorite=True, engagement_above=0),
            SceneFilter(studio_ids=("s",), engagement_above=0),
            SceneFilter(tag_ids=("t",), engagement_above=0),
        ]

    @pytest.mark.asyncio
    async def test_no_favorites_no_query(self, mock_catalog) -> None:
        service = SpaceFillerService(mock_catalog)

        candidates = await service.find_candidates(FavoriteSet())

        assert candidates == []
        mock_catalog.find_scenes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fill_dedupes_and_excludes_base(self, mock_catalog, favorites) -> None:
        shared = make_scene("shared", engagement=2, size=10)
        mock_catalog.find_scenes.side_effect = [
            [shared, make_scene("base", engagement=1, size=10)],
            [shared],
            [make_scene("tagged", engagement=1, size=10)],
        ]
        service = SpaceFillerService(mock_catalog)

        result = await service.fill(
            1000, already_included=[make_scene("base")], favorites=favorites
        )

        assert [s.id for s in result.added] == ["shared", "tagged"]
        assert result.duplicates_removed == 2
        assert result.pool_size == 20
        assert result.was_reduced is False

    @pytest.mark.asyncio
    async def test_fill_respects_budget(self, mock_catalog, favorites) -> None:
        mock_catalog.find_scenes.side_effect = [
            [make_scene(str(i), engagement=1, size=2_000_000_000) for i in range(3)],
            [],
            [],
        ]
        service = SpaceFillerService(mock_catalog)

        result = await service.fill(5_000_000_000, favorites=favorites)

        assert len(result.added) == 2
        assert result.added_size <= 5_000_000_000
        assert result.was_reduced is True

    @pytest.mark.asyncio
    async def test_load_favorites(self, mock_catalog) -> None:
        mock_catalog.find_performers.side_effect = [
            [make_performer("f", favorite=True), make_performer("g")],
            [make_performer("m", gender=Gender.MALE)],
        ]
        mock_catalog.find_studios.return_value = [Studio(id="s", favorite=True)]
        service = SpaceFillerService(mock_catalog)

        favorites = await service.load_favorites()

        assert [p.id for p in favorites.female_performers] == ["f"]
        assert favorites.male_performers == ()
        assert [s.id for s in favorites.studios] == ["s"]
