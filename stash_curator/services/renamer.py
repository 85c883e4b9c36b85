"""
Service de generation des noms de fichiers.

Ce module rend le modele de nom de fichier pour une scene et garantit
une longueur maximale de 255 caracteres. En cas de depassement, les champs
sont tronques par la fin dans un ordre fixe :

    tags -> performers masculins -> performers feminins -> titre

L'extension n'est jamais tronquee.
"""

from pathlib import PurePosixPath
from typing import Optional

from pathvalidate import sanitize_filename

from stash_curator.core.entities import Gender, Scene, VideoFile
from stash_curator.core.value_objects import (
    FilenameField,
    FilenameTemplate,
    MissingPathComponentError,
)
from stash_curator.utils.constants import MAX_FILENAME_LENGTH, RESOLUTION_LABELS

# Ordre de troncature en cas de depassement
TRUNCATION_ORDER = (
    FilenameField.TAGS,
    FilenameField.PERFORMERS_MALE,
    FilenameField.PERFORMERS_FEMALE,
    FilenameField.TITLE,
)


def sanitize_for_filesystem(text: Optional[str]) -> str:
    """
    Nettoie une chaine pour l'utiliser dans un nom de fichier ou de repertoire.

    Supprime les caracteres \\ / : * ? " < > | (et les caracteres de controle).

    Args:
        text: Texte a nettoyer.

    Returns:
        Texte valide pour un nom de fichier, vide si text est vide.
    """
    if not text:
        return ""
    return sanitize_filename(text, platform="universal", replacement_text="")


def get_resolution_label(video_file: Optional[VideoFile]) -> str:
    """
    Libelle de resolution a partir de la hauteur du fichier.

    8K >= 4320, 4K >= 2160, 2K >= 1440, puis 1080p, 720p, 480p, 360p, 240p ;
    toute autre hauteur positive donne "<hauteur>p", sinon "unknown".
    """
    height = video_file.height if video_file else 0
    for minimum, label in RESOLUTION_LABELS:
        if height >= minimum:
            return label
    if height > 0:
        return f"{height}p"
    return "unknown"


def get_extension(video_file: VideoFile) -> str:
    """Extension du fichier, sans le point."""
    return PurePosixPath(video_file.path).suffix.lstrip(".")


def _performer_names(scene: Scene, gender: Gender) -> str:
    return " ".join(p.name for p in scene.performers if p.gender == gender)


def build_field_values(scene: Scene) -> dict[FilenameField, str]:
    """
    Valeur de chaque champ du modele pour une scene.

    Les noms de performers (filtres par genre) et de tags sont joints par
    un espace. Une valeur absente vaut une chaine vide.
    """
    values = {
        FilenameField.ID: scene.id,
        FilenameField.TITLE: scene.title or "",
        FilenameField.DATE: scene.date or "",
        FilenameField.PERFORMERS_MALE: _performer_names(scene, Gender.MALE),
        FilenameField.PERFORMERS_FEMALE: _performer_names(scene, Gender.FEMALE),
        FilenameField.RESOLUTION: get_resolution_label(scene.main_file),
        FilenameField.STUDIO: scene.studio.name if scene.studio else "",
        FilenameField.TAGS: " ".join(tag.name for tag in scene.tags),
    }
    return {field: sanitize_for_filesystem(value) for field, value in values.items()}


def fit_filename(
    template: FilenameTemplate,
    values: dict[FilenameField, str],
    extension: str,
    max_length: int = MAX_FILENAME_LENGTH,
) -> str:
    """
    Rend le modele en respectant la longueur maximale.

    Chaque etape de la cascade retire le depassement restant de la fin du
    champ concerne puis deduit la longueur initiale de ce champ. S'il reste
    un depassement, le nom est coupe juste avant l'extension.

    Args:
        template: Modele de nom de fichier.
        values: Valeurs des champs (deja nettoyees).
        extension: Extension sans le point.
        max_length: Longueur maximale du nom complet.

    Returns:
        Nom de fichier de longueur <= max_length, extension intacte.
    """
    filename = template.render(values, extension)
    overflow = len(filename) - max_length
    if overflow <= 0:
        return filename

    truncated = dict(values)
    for field in TRUNCATION_ORDER:
        if overflow <= 0:
            break
        if not template.has_field(field):
            continue
        original = truncated.get(field, "")
        truncated[field] = original[:-overflow]
        overflow -= len(original)

    filename = template.render(truncated, extension)
    if len(filename) <= max_length:
        return filename

    suffix = f".{extension}" if extension else ""
    stem = filename[: len(filename) - len(suffix)]
    return stem[: max(max_length - len(suffix), 0)] + suffix


def build_filename(scene: Scene, template: FilenameTemplate) -> str:
    """
    Genere le nom de fichier d'une scene.

    Args:
        scene: Scene a nommer.
        template: Modele de nom de fichier.

    Returns:
        Nom de fichier de 255 caracteres maximum.

    Raises:
        MissingPathComponentError: Si la scene n'a aucun fichier.
    """
    main_file = scene.main_file
    if main_file is None:
        raise MissingPathComponentError(f"La scene {scene.id} n'a aucun fichier")

    extension = sanitize_for_filesystem(get_extension(main_file))
    return fit_filename(template, build_field_values(scene), extension)

