"""
Service de reorganisation de la bibliotheque.

Pour chaque scene, calcule le chemin cible (repertoires + nom de fichier
genere), met de cote les scenes dont le chemin cible entre en collision
avec celui d'une scene precedente, puis deplace le fichier principal et
ses fichiers compagnons avant d'ecrire le fichier NFO.

Une erreur sur une scene (chemin incomplet, deplacement refuse) est
journalisee et comptee ; le traitement continue avec la scene suivante.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Sequence
from xml.parsers.expat import ExpatError

from loguru import logger

from stash_curator.core.entities import Gender, Scene, Studio
from stash_curator.core.ports import CatalogError, ICatalogService, IFileSystem
from stash_curator.core.value_objects import (
    MissingPathComponentError,
    OrganizationPlan,
    SceneFilter,
)
from stash_curator.services.nfo_builder import build_scene_nfo
from stash_curator.services.organizer import resolve_folders
from stash_curator.services.renamer import build_filename

NFO_SUFFIX = ".nfo"


class OrganizeOutcome(Enum):
    """Resultat de l'organisation d'une scene."""

    MOVED = "moved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class OrganizeResult:
    """Resultat detaille pour une scene."""

    scene_id: str
    outcome: OrganizeOutcome
    message: str = ""


@dataclass
class ScenePlan:
    """
    Decision de chemin pour une scene.

    Attributs :
        scene : Scene concernee
        current_path : Chemin local actuel du fichier principal
        target_path : Chemin local cible du fichier principal
        nfo_xml : Contenu du fichier NFO a ecrire
    """

    scene: Scene
    current_path: Path
    target_path: Path
    nfo_xml: str

    @property
    def target_dir(self) -> Path:
        return self.target_path.parent

    @property
    def target_stem(self) -> str:
        return self.target_path.stem

    @property
    def nfo_path(self) -> Path:
        return self.target_dir / f"{self.target_stem}{NFO_SUFFIX}"


@dataclass
class LibraryPlan:
    """Plan complet : scenes a deplacer, doublons et scenes en echec."""

    to_organize: list[ScenePlan] = field(default_factory=list)
    duplicates: list[ScenePlan] = field(default_factory=list)
    failures: list[OrganizeResult] = field(default_factory=list)


@dataclass
class OrganizeSummary:
    """Compteurs par resultat."""

    moved: int = 0
    skipped: int = 0
    failed: int = 0
    duplicates: int = 0

    @classmethod
    def from_results(
        cls, results: Sequence[OrganizeResult], duplicates: int = 0
    ) -> "OrganizeSummary":
        summary = cls(duplicates=duplicates)
        for result in results:
            if result.outcome == OrganizeOutcome.MOVED:
                summary.moved += 1
            elif result.outcome == OrganizeOutcome.SKIPPED:
                summary.skipped += 1
            else:
                summary.failed += 1
        return summary


def filter_scenes_by_performer_gender(
    scenes: Sequence[Scene],
    require_male: bool = False,
    require_female: bool = False,
) -> list[Scene]:
    """
    Ne garde que les scenes contenant les genres de performers demandes.

    Sans filtre, toutes les scenes sont conservees ; avec les deux, la scene
    doit contenir au moins un performer de chaque genre.
    """
    if not require_male and not require_female:
        return list(scenes)
    return [
        scene
        for scene in scenes
        if (not require_male or scene.has_performer_of_gender(Gender.MALE))
        and (not require_female or scene.has_performer_of_gender(Gender.FEMALE))
    ]


def map_catalog_path(catalog_path: str, catalog_prefix: str, data_dir: Path) -> Path:
    """
    Traduit un chemin du catalogue (ex: /data/Studio/x.mp4) en chemin local.

    Seul le prefixe de tete est remplace ; un chemin hors prefixe est
    conserve tel quel.
    """
    prefix = catalog_prefix.rstrip("/")
    if prefix and (catalog_path == prefix or catalog_path.startswith(prefix + "/")):
        relative = catalog_path[len(prefix):].lstrip("/")
        return data_dir / PurePosixPath(relative) if relative else data_dir
    return Path(catalog_path)


def plan_scene(
    scene: Scene,
    plan: OrganizationPlan,
    studios: Sequence[Studio] = (),
) -> ScenePlan:
    """
    Calcule chemins actuel et cible d'une scene.

    Raises:
        MissingPathComponentError: Si la scene n'a pas de fichier, de studio
            ou de performer du genre choisi.
    """
    filename = build_filename(scene, plan.template)
    folders = resolve_folders(scene, plan, studios)
    current_path = map_catalog_path(
        scene.main_file.path, plan.catalog_data_prefix, plan.data_dir
    )
    return ScenePlan(
        scene=scene,
        current_path=current_path,
        target_path=plan.data_dir.joinpath(*folders, filename),
        nfo_xml=build_scene_nfo(scene),
    )


def build_plan(
    scenes: Sequence[Scene],
    plan: OrganizationPlan,
    studios: Sequence[Studio] = (),
) -> LibraryPlan:
    """
    Construit le plan de reorganisation.

    Les scenes sont filtrees par genre de performers, puis la premiere
    scene d'un chemin cible est retenue et les suivantes sont mises de cote
    comme doublons. Une scene sans chemin calculable, ou dont le chemin
    cible est le fichier actuel d'une autre scene, devient un echec.

    Args:
        scenes: Scenes du catalogue.
        plan: Plan d'organisation choisi.
        studios: Liste complete des studios (politique imbriquee).

    Returns:
        LibraryPlan avec scenes a organiser, doublons et echecs.
    """
    library_plan = LibraryPlan()
    seen_targets: set[Path] = set()
    planned: list[ScenePlan] = []

    for scene in filter_scenes_by_performer_gender(
        scenes, plan.require_male, plan.require_female
    ):
        try:
            scene_plan = plan_scene(scene, plan, studios)
        except (ValueError, ExpatError) as e:
            logger.warning(f"Scene {scene.id} ignoree : {e}")
            library_plan.failures.append(
                OrganizeResult(scene.id, OrganizeOutcome.FAILED, str(e))
            )
            continue

        if scene_plan.target_path in seen_targets:
            library_plan.duplicates.append(scene_plan)
            continue
        seen_targets.add(scene_plan.target_path)
        planned.append(scene_plan)

    occupants = {p.current_path: p.scene.id for p in planned}
    for scene_plan in planned:
        occupant = occupants.get(scene_plan.target_path)
        if occupant is not None and occupant != scene_plan.scene.id:
            message = (
                f"Chemin cible {scene_plan.target_path} occupe par la scene {occupant}"
            )
            logger.warning(f"Scene {scene_plan.scene.id} ignoree : {message}")
            library_plan.failures.append(
                OrganizeResult(scene_plan.scene.id, OrganizeOutcome.FAILED, message)
            )
            continue
        library_plan.to_organize.append(scene_plan)

    return library_plan


class LibraryOrganizerService:
    """
    Service d'execution du plan de reorganisation.

    Les deplacements d'une scene sont tout ou rien : si un fichier
    compagnon ne peut pas etre deplace, les fichiers deja deplaces pour
    cette scene sont remis en place.
    """

    def __init__(self, file_system: IFileSystem, catalog: ICatalogService) -> None:
        """
        Initialise le service.

        Args:
            file_system: Adaptateur du systeme de fichiers
            catalog: Port d'acces au catalogue (scan apres organisation)
        """
        self._file_system = file_system
        self._catalog = catalog

    async def load(
        self, scene_filter: Optional[SceneFilter] = None
    ) -> tuple[list[Scene], list[Studio]]:
        """
        Charge les scenes correspondant au filtre et tous les studios.

        Raises:
            CatalogFetchError: Si un chargement echoue (fatal)
        """
        scenes = await self._catalog.find_scenes(scene_filter)
        studios = await self._catalog.find_studios()
        logger.info(f"{len(scenes)} scenes et {len(studios)} studios charges")
        return scenes, studios

    def _move_scene_files(self, scene_plan: ScenePlan, dry_run: bool) -> None:
        sources = [scene_plan.current_path, *self._file_system.list_siblings(scene_plan.current_path)]
        moved: list[tuple[Path, Path]] = []

        for source in sources:
            destination = scene_plan.target_dir / f"{scene_plan.target_stem}{source.suffix}"
            if dry_run:
                logger.info(f"[Dry run] Deplacement : {source} -> {destination}")
                continue
            try:
                if destination != source and self._file_system.exists(destination):
                    raise FileExistsError(f"Destination deja existante : {destination}")
                self._file_system.move(source, destination)
            except OSError:
                self._rollback(moved)
                raise
            moved.append((source, destination))
            logger.info(f"Deplace : {source} -> {destination}")

    def _rollback(self, moved: list[tuple[Path, Path]]) -> None:
        for source, destination in reversed(moved):
            try:
                self._file_system.move(destination, source)
            except OSError as e:
                logger.error(f"Impossible de remettre {destination} en place : {e}")

    def organize_scene(self, scene_plan: ScenePlan, dry_run: bool = False) -> OrganizeResult:
        """
        Deplace les fichiers d'une scene puis ecrit son fichier NFO.

        Si le fichier principal est deja a sa place, aucun deplacement
        n'a lieu mais le NFO est reecrit.

        Args:
            scene_plan: Decision de chemin pour la scene
            dry_run: Journalise les actions sans toucher au disque

        Returns:
            OrganizeResult (moved, skipped ou failed)
        """
        scene_id = scene_plan.scene.id
        already_in_place = scene_plan.current_path == scene_plan.target_path

        try:
            if already_in_place:
                logger.info(f"Scene {scene_id} deja a sa place, deplacement ignore")
            else:
                self._move_scene_files(scene_plan, dry_run)

            if dry_run:
                logger.info(f"[Dry run] Ecriture NFO : {scene_plan.nfo_path}")
            else:
                self._file_system.write_text(scene_plan.nfo_path, scene_plan.nfo_xml)
        except OSError as e:
            logger.error(f"Echec de l'organisation de la scene {scene_id}: {e}")
            return OrganizeResult(
                scene_id, OrganizeOutcome.FAILED, f"Erreur pour la scene {scene_id}: {e}"
            )

        if already_in_place:
            return OrganizeResult(scene_id, OrganizeOutcome.SKIPPED, "Deja a sa place")
        return OrganizeResult(
            scene_id, OrganizeOutcome.MOVED, str(scene_plan.target_path)
        )

    async def organize(
        self,
        library_plan: LibraryPlan,
        dry_run: bool = False,
        on_progress: Optional[Callable[[OrganizeResult], None]] = None,
    ) -> tuple[list[OrganizeResult], OrganizeSummary]:
        """
        Execute le plan de reorganisation.

        Apres une execution reelle, le catalogue est invite a rescanner
        ses metadonnees.

        Returns:
            Resultats par scene (echecs du plan inclus) et resume
        """
        results = list(library_plan.failures)
        for scene_plan in library_plan.to_organize:
            result = self.organize_scene(scene_plan, dry_run)
            results.append(result)
            if on_progress:
                on_progress(result)

        summary = OrganizeSummary.from_results(results, len(library_plan.duplicates))
        logger.info(
            f"Organisation terminee : {summary.moved} deplacee(s), "
            f"{summary.skipped} ignoree(s), {summary.failed} en echec, "
            f"{summary.duplicates} doublon(s)"
        )

        if not dry_run:
            try:
                await self._catalog.trigger_metadata_scan()
            except CatalogError as e:
                logger.warning(f"Scan des metadonnees non declenche : {e}")

        return results, summary
