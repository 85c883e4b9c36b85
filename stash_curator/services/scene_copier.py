"""
Service de copie de scenes vers un autre support (disque externe, cle USB).

Chaque scene est copiee dans un repertoire par studio, sous un nom
"<titre> - <performers>" lisible par un lecteur multimedia, avec son
fichier NFO et son affiche. Les photos des performers peuvent etre
exportees au format "People" d'Emby/Jellyfin.

Une copie n'ecrase jamais un fichier deja present : relancer la copie
sur le meme support complete ce qui manque.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Sequence

from loguru import logger

from stash_curator.core.entities import Performer, Scene
from stash_curator.core.ports import CatalogError, ICatalogService, IFileSystem
from stash_curator.services.library_organizer import NFO_SUFFIX, map_catalog_path
from stash_curator.services.nfo_builder import build_scene_nfo
from stash_curator.services.renamer import sanitize_for_filesystem
from stash_curator.utils.constants import (
    MAX_FILENAME_LENGTH,
    MAX_NAMED_PERFORMERS,
    NFO_UNKNOWN_STUDIO,
    PEOPLE_IMAGE_NAME,
    PEOPLE_METADATA_DIR,
    POSTER_SUFFIX,
)


class CopyOutcome(Enum):
    """Resultat de la copie d'une scene."""

    COPIED = "copied"
    EXISTING = "existing"
    FAILED = "failed"


@dataclass
class CopyResult:
    """Resultat detaille pour une scene."""

    scene_id: str
    outcome: CopyOutcome
    message: str = ""
    poster_saved: bool = False


@dataclass
class CopySummary:
    """Compteurs de la copie."""

    copied: int = 0
    existing: int = 0
    failed: int = 0
    posters: int = 0

    @classmethod
    def from_results(cls, results: Sequence[CopyResult]) -> "CopySummary":
        summary = cls()
        for result in results:
            if result.outcome == CopyOutcome.COPIED:
                summary.copied += 1
            elif result.outcome == CopyOutcome.EXISTING:
                summary.existing += 1
            else:
                summary.failed += 1
            if result.poster_saved:
                summary.posters += 1
        return summary


def sort_performers_for_name(performers: Sequence[Performer]) -> list[Performer]:
    """Tri par genre (genre inconnu en dernier) puis engagement decroissant."""
    return sorted(
        performers,
        key=lambda p: (p.gender is None, p.gender.value if p.gender else "", -p.engagement),
    )


def build_copy_stem(scene: Scene) -> str:
    """
    Nom sans extension de la copie : "<titre> - <performers>".

    Sans titre, le nom du fichier source est repris ; sans performer,
    l'ID de la scene. Au plus cinq performers sont cites.
    """
    title = scene.title or PurePosixPath(scene.main_file.path).stem
    names = ", ".join(
        p.name for p in sort_performers_for_name(scene.performers)[:MAX_NAMED_PERFORMERS]
    )
    stem = sanitize_for_filesystem(f"{title} - {names or scene.id}")
    # L'affiche "<nom>-poster.jpg" est le plus long des fichiers ecrits
    return stem[: MAX_FILENAME_LENGTH - len(POSTER_SUFFIX)]


def copy_target_dir(scene: Scene, destination: Path) -> Path:
    """Repertoire de la copie : un sous-repertoire par studio."""
    studio_name = scene.studio.name if scene.studio and scene.studio.name else ""
    return destination / (sanitize_for_filesystem(studio_name) or NFO_UNKNOWN_STUDIO)


def unique_performers(scenes: Sequence[Scene]) -> list[Performer]:
    """Performers des scenes sans doublon, dans l'ordre de premiere apparition."""
    seen: dict[str, Performer] = {}
    for scene in scenes:
        for performer in scene.performers:
            seen.setdefault(performer.id, performer)
    return list(seen.values())


def people_image_path(destination: Path, performer: Performer) -> Path:
    """Chemin de la photo : People/<Initiale>/<Nom>/folder.jpg."""
    name = sanitize_for_filesystem(performer.name)
    return destination.joinpath(*PEOPLE_METADATA_DIR, name[:1].upper(), name, PEOPLE_IMAGE_NAME)


class SceneCopierService:
    """
    Service de copie des scenes selectionnees.

    Les echecs sont isoles scene par scene ; une affiche ou une photo
    impossible a telecharger n'empeche pas la copie de la video.
    """

    def __init__(self, file_system: IFileSystem, catalog: ICatalogService) -> None:
        """
        Initialise le service.

        Args:
            file_system: Adaptateur du systeme de fichiers
            catalog: Port d'acces au catalogue (telechargement des images)
        """
        self._file_system = file_system
        self._catalog = catalog

    async def _save_image(self, url: str, path: Path) -> bool:
        try:
            content = await self._catalog.download_image(url)
            self._file_system.write_bytes(path, content)
        except (CatalogError, OSError) as e:
            logger.warning(f"Image {url} non enregistree : {e}")
            return False
        return True

    async def copy_scene(
        self,
        scene: Scene,
        destination: Path,
        catalog_prefix: str,
        source_dir: Path,
    ) -> CopyResult:
        """
        Copie le fichier principal d'une scene, son NFO et son affiche.

        Args:
            scene: Scene a copier
            destination: Racine du support de destination
            catalog_prefix: Prefixe des chemins cote catalogue (ex: /data)
            source_dir: Repertoire local correspondant au prefixe

        Returns:
            CopyResult (copied, existing ou failed)
        """
        if scene.main_file is None:
            return CopyResult(scene.id, CopyOutcome.FAILED, "Aucun fichier")

        source = map_catalog_path(scene.main_file.path, catalog_prefix, source_dir)
        target_dir = copy_target_dir(scene, destination)
        stem = build_copy_stem(scene)
        target = target_dir / f"{stem}{source.suffix}"

        try:
            copied = self._file_system.copy(source, target)
            self._file_system.write_text(target_dir / f"{stem}{NFO_SUFFIX}", build_scene_nfo(scene))
        except OSError as e:
            logger.error(f"Echec de la copie de la scene {scene.id}: {e}")
            return CopyResult(scene.id, CopyOutcome.FAILED, f"Erreur pour la scene {scene.id}: {e}")

        if copied:
            logger.info(f"Copie : {source} -> {target}")
        else:
            logger.info(f"Deja present, copie ignoree : {target}")

        poster_saved = False
        if scene.screenshot_url:
            poster_saved = await self._save_image(
                scene.screenshot_url, target_dir / f"{stem}{POSTER_SUFFIX}"
            )

        return CopyResult(
            scene.id,
            CopyOutcome.COPIED if copied else CopyOutcome.EXISTING,
            str(target),
            poster_saved,
        )

    async def copy_scenes(
        self,
        scenes: Sequence[Scene],
        destination: Path,
        catalog_prefix: str,
        source_dir: Path,
        on_progress: Optional[Callable[[CopyResult], None]] = None,
    ) -> tuple[list[CopyResult], CopySummary]:
        """
        Copie toutes les scenes.

        Returns:
            Resultats par scene et resume
        """
        results = []
        for scene in scenes:
            result = await self.copy_scene(scene, destination, catalog_prefix, source_dir)
            results.append(result)
            if on_progress:
                on_progress(result)

        summary = CopySummary.from_results(results)
        logger.info(
            f"Copie terminee : {summary.copied} copiee(s), {summary.existing} deja presente(s), "
            f"{summary.failed} en echec, {summary.posters} affiche(s)"
        )
        return results, summary

    async def export_people_metadata(self, scenes: Sequence[Scene], destination: Path) -> int:
        """
        Exporte les photos des performers au format "People" d'Emby/Jellyfin.

        Les performers sans photo ou sans nom sont ignores.

        Returns:
            Nombre de photos enregistrees
        """
        saved = 0
        for performer in unique_performers(scenes):
            if not performer.image_url or not sanitize_for_filesystem(performer.name):
                continue
            if await self._save_image(
                performer.image_url, people_image_path(destination, performer)
            ):
                saved += 1
        logger.info(f"{saved} photo(s) de performers exportee(s) vers {destination}")
        return saved
