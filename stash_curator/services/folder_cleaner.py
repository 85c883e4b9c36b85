"""
Nettoyage des dossiers sans video.

Apres une reorganisation, les anciens repertoires ne contiennent souvent
plus que des vignettes, des NFO orphelins ou des sous-dossiers vides.
Un dossier est considere vide s'il ne contient, recursivement, aucun
fichier video. Les dossiers dont le nom evoque un repertoire systeme
sont signales avant toute suppression.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from stash_curator.utils.constants import IMPORTANT_FOLDER_NAMES, VIDEO_EXTENSIONS


@dataclass
class EmptyFolder:
    """Dossier sans video trouve par le scan."""

    path: Path
    has_subfolders: bool = False

    @property
    def parent(self) -> Path:
        return self.path.parent

    @property
    def is_important(self) -> bool:
        return is_important_folder(self.path)


@dataclass
class CleanupResult:
    """Resultat de la suppression des dossiers."""

    removed: int = 0
    errors: list[str] = field(default_factory=list)


def is_important_folder(path: Path) -> bool:
    """
    Verifie si le nom du dossier evoque un repertoire sensible.

    Le nom (en minuscules) contient un nom sensible, ou en fait partie.
    """
    name = path.name.lower()
    return any(important in name or name in important for important in IMPORTANT_FOLDER_NAMES)


def has_video_files(directory: Path) -> bool:
    """
    Verifie recursivement si un dossier contient au moins une video.

    Un dossier illisible est considere comme contenant des videos.
    """
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Dossier illisible, conserve : {directory} ({e})")
        return True

    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            if has_video_files(entry):
                return True
        elif entry.suffix.lower() in VIDEO_EXTENSIONS:
            return True
    return False


def find_empty_folders(root: Path) -> list[EmptyFolder]:
    """
    Detecte les dossiers sans video sous root (root exclu).

    Le parcours est en profondeur, parents avant enfants ; un dossier
    vide et ses sous-dossiers vides sont tous listes.

    Args:
        root: Repertoire a scanner.

    Returns:
        Liste des dossiers sans video.
    """
    empty: list[EmptyFolder] = []

    def scan(directory: Path) -> None:
        try:
            subfolders = sorted(
                entry for entry in directory.iterdir()
                if entry.is_dir() and not entry.is_symlink()
            )
        except OSError as e:
            logger.warning(f"Scan impossible : {directory} ({e})")
            return

        if directory != root and not has_video_files(directory):
            empty.append(EmptyFolder(path=directory, has_subfolders=bool(subfolders)))

        for subfolder in subfolders:
            scan(subfolder)

    scan(root)
    logger.info(f"{len(empty)} dossier(s) sans video sous {root}")
    return empty


def delete_folder(path: Path) -> None:
    """
    Supprime un dossier sans video et tout son contenu.

    Raises:
        OSError: Si la suppression echoue (permissions...)
    """
    shutil.rmtree(path)
    logger.info(f"Dossier supprime : {path}")


def delete_folders(folders: list[EmptyFolder]) -> CleanupResult:
    """
    Supprime les dossiers, les plus profonds d'abord.

    Un dossier deja absent est ignore.

    Args:
        folders: Dossiers a supprimer.

    Returns:
        CleanupResult avec le nombre de dossiers supprimes.
    """
    result = CleanupResult()

    # Trier par profondeur decroissante pour supprimer les plus profonds d'abord
    for folder in sorted(folders, key=lambda f: len(f.path.parts), reverse=True):
        if not folder.path.exists():
            continue
        try:
            delete_folder(folder.path)
            result.removed += 1
        except OSError as e:
            logger.error(f"Suppression echouee {folder.path}: {e}")
            result.errors.append(f"Suppression echouee {folder.path}: {e}")

    return result
