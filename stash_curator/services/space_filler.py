"""
Selection de scenes favorites sous contrainte d'espace disque.

A partir d'un budget en octets et des scenes deja choisies par
l'utilisateur, propose des scenes supplementaires liees aux favoris
(performers, studios, tags) et ayant un engagement positif.

Quand tout le pool ne tient pas, chaque scene recoit un score
personnalise puis un remplissage glouton est applique (sans retour
arriere : le resultat peut sous-remplir le budget).
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from loguru import logger

from stash_curator.core.entities import Gender, Performer, Scene, Studio, Tag
from stash_curator.core.ports import ICatalogService
from stash_curator.core.value_objects import SceneFilter

# Bonus par studio favori et par tag favori
FAVORITE_STUDIO_BONUS = 5
FAVORITE_TAG_BONUS = 5


@dataclass(frozen=True)
class FavoriteSet:
    """Entites marquees favorites, unicite par ID."""

    female_performers: tuple[Performer, ...] = ()
    male_performers: tuple[Performer, ...] = ()
    studios: tuple[Studio, ...] = ()
    tags: tuple[Tag, ...] = ()

    @classmethod
    def from_artifacts(
        cls,
        female_performers: Iterable[Performer] = (),
        male_performers: Iterable[Performer] = (),
        studios: Iterable[Studio] = (),
        tags: Iterable[Tag] = (),
    ) -> "FavoriteSet":
        """Ne conserve que les entites favorites, sans doublon d'ID."""
        return cls(
            female_performers=_unique_favorites(female_performers),
            male_performers=_unique_favorites(male_performers),
            studios=_unique_favorites(studios),
            tags=_unique_favorites(tags),
        )


def _unique_favorites(items):
    seen: set[str] = set()
    favorites = []
    for item in items:
        if item.favorite and item.id not in seen:
            seen.add(item.id)
            favorites.append(item)
    return tuple(favorites)


@dataclass(frozen=True)
class GenderWeights:
    """Poids de l'engagement d'un performer favori selon son genre."""

    female: float = 1
    male: float = 1

    @classmethod
    def from_favorites(cls, favorites: FavoriteSet) -> "GenderWeights":
        """
        Reduit le poids du genre surrepresente dans les favoris.

        female = min(1, favoris feminins / favoris masculins), et inversement.
        Un denominateur nul donne un poids de 1.
        """
        female_count = len(favorites.female_performers)
        male_count = len(favorites.male_performers)
        return cls(
            female=min(1, female_count / male_count) if male_count else 1,
            male=min(1, male_count / female_count) if female_count else 1,
        )

    def for_gender(self, gender) -> float:
        if gender == Gender.FEMALE:
            return self.female
        if gender == Gender.MALE:
            return self.male
        return 0


def total_size(scenes: Iterable[Scene]) -> int:
    """Taille cumulee des fichiers principaux."""
    return sum(scene.size for scene in scenes)


def dedupe_scenes(scenes: Iterable[Scene]) -> list[Scene]:
    """Supprime les doublons par ID en gardant la premiere occurrence."""
    seen: set[str] = set()
    unique = []
    for scene in scenes:
        if scene.id not in seen:
            seen.add(scene.id)
            unique.append(scene)
    return unique


def score_scene(scene: Scene, weights: GenderWeights) -> float:
    """
    Score personnalise d'une scene.

    engagement + somme(engagement performer favori * poids du genre)
    + 5 si studio favori + 5 par tag favori.
    """
    performer_score = sum(
        performer.engagement * weights.for_gender(performer.gender)
        for performer in scene.performers
        if performer.favorite
    )
    studio_score = FAVORITE_STUDIO_BONUS if scene.studio and scene.studio.favorite else 0
    tag_score = FAVORITE_TAG_BONUS * sum(1 for tag in scene.tags if tag.favorite)
    return scene.engagement + performer_score + studio_score + tag_score


def sort_by_score(scenes: Sequence[Scene], weights: GenderWeights) -> list[Scene]:
    """Tri stable par score personnalise decroissant."""
    return sorted(scenes, key=lambda scene: score_scene(scene, weights), reverse=True)


def reduce_to_size(scenes: Sequence[Scene], available_bytes: int) -> list[Scene]:
    """
    Remplissage glouton : accepte une scene tant que budget - taille > 0.

    Une scene qui deborde est definitivement ignoree.
    """
    remaining = available_bytes
    accepted = []
    for scene in scenes:
        if remaining - scene.size > 0:
            remaining -= scene.size
            accepted.append(scene)
    return accepted


def select_scenes(
    pool: Sequence[Scene],
    available_bytes: int,
    favorites: FavoriteSet,
) -> list[Scene]:
    """
    Choisit les scenes du pool tenant dans le budget.

    Args:
        pool: Pool de candidats deja dedoublonne.
        available_bytes: Budget en octets.
        favorites: Favoris servant a ponderer le score.

    Returns:
        Le pool entier s'il tient dans le budget, sinon la selection gloutonne
        par score decroissant.
    """
    if total_size(pool) <= available_bytes:
        return list(pool)
    weights = GenderWeights.from_favorites(favorites)
    return reduce_to_size(sort_by_score(pool, weights), available_bytes)


def compute_available_budget(
    free_bytes: int,
    reserved_bytes: int,
    selected_bytes: int = 0,
) -> int:
    """
    Budget restant apres la marge de securite et la selection de base.

    Peut etre negatif si la selection de base ne tient pas.
    """
    return free_bytes - reserved_bytes - selected_bytes


@dataclass
class SelectionResult:
    """Resultat du remplissage par les favoris."""

    added: list[Scene] = field(default_factory=list)
    candidates: list[Scene] = field(default_factory=list)
    duplicates_removed: int = 0
    pool_size: int = 0
    added_size: int = 0
    was_reduced: bool = False

    def combined(self, already_included: Sequence[Scene]) -> list[Scene]:
        """Selection de base suivie des scenes ajoutees."""
        return [*already_included, *self.added]


class SpaceFillerService:
    """
    Service de remplissage de l'espace libre avec des scenes favorites.

    Les pools de candidats sont interroges via le port catalogue :
    performers favoris, studios favoris puis tags favoris, chacun
    restreint aux scenes avec engagement positif.
    """

    def __init__(self, catalog: ICatalogService) -> None:
        """
        Initialise le service.

        Args:
            catalog: Port d'acces au catalogue
        """
        self._catalog = catalog

    async def load_favorites(self) -> FavoriteSet:
        """Charge les artefacts et ne garde que les favoris."""
        female = await self._catalog.find_performers(gender=Gender.FEMALE)
        male = await self._catalog.find_performers(gender=Gender.MALE)
        studios = await self._catalog.find_studios()
        tags = await self._catalog.find_tags()
        return FavoriteSet.from_artifacts(female, male, studios, tags)

    async def find_candidates(self, favorites: FavoriteSet) -> list[Scene]:
        """
        Interroge les trois pools de scenes favorites, dans l'ordre
        performers, studios, tags (doublons conserves).
        """
        candidates: list[Scene] = []
        if favorites.female_performers or favorites.male_performers:
            candidates += await self._catalog.find_scenes(
                SceneFilter(performer_favorite=True, engagement_above=0)
            )
        if favorites.studios:
            candidates += await self._catalog.find_scenes(
                SceneFilter(
                    studio_ids=tuple(s.id for s in favorites.studios),
                    engagement_above=0,
                )
            )
        if favorites.tags:
            candidates += await self._catalog.find_scenes(
                SceneFilter(
                    tag_ids=tuple(t.id for t in favorites.tags),
                    engagement_above=0,
                )
            )
        return candidates

    async def fill(
        self,
        available_bytes: int,
        already_included: Sequence[Scene] = (),
        favorites: Optional[FavoriteSet] = None,
    ) -> SelectionResult:
        """
        Propose des scenes favorites tenant dans le budget.

        Args:
            available_bytes: Budget restant en octets
            already_included: Scenes deja choisies (exclues du pool)
            favorites: Favoris deja charges ; charges depuis le catalogue si None

        Returns:
            SelectionResult avec les scenes ajoutees (sans la selection de base)

        Raises:
            CatalogFetchError: Si un chargement echoue
        """
        if favorites is None:
            favorites = await self.load_favorites()

        candidates = await self.find_candidates(favorites)
        included_ids = {scene.id for scene in already_included}
        pool = [s for s in dedupe_scenes(candidates) if s.id not in included_ids]

        pool_size = total_size(pool)
        logger.info(
            f"{len(pool)} scenes favorites candidates "
            f"({len(candidates) - len(pool)} doublons retires), {pool_size} octets"
        )

        added = select_scenes(pool, available_bytes, favorites)
        was_reduced = len(added) != len(pool)
        if was_reduced:
            logger.info(f"Pool reduit a {len(added)} scenes pour tenir dans {available_bytes} octets")

        return SelectionResult(
            added=added,
            candidates=candidates,
            duplicates_removed=len(candidates) - len(pool),
            pool_size=pool_size,
            added_size=total_size(added),
            was_reduced=was_reduced,
        )
