"""
Catalog entities.

Read-only snapshots of the records served by the remote catalog (Stash).
The curation engine never mutates them; it only derives ratings and
path decisions from them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Gender(str, Enum):
    """Performer gender as exposed by the catalog."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    TRANSGENDER_MALE = "TRANSGENDER_MALE"
    TRANSGENDER_FEMALE = "TRANSGENDER_FEMALE"
    INTERSEX = "INTERSEX"
    NON_BINARY = "NON_BINARY"


class ArtifactKind(str, Enum):
    """Kinds of rateable catalog entities other than scenes."""

    PERFORMER = "performer"
    STUDIO = "studio"
    TAG = "tag"


@dataclass
class Performer:
    """
    Performer of the catalog.

    Attributes:
        id: Catalog ID
        name: Display name
        gender: Gender, None when unknown
        favorite: True when marked as favorite by the user
        engagement: Engagement counter (o-counter)
        scene_count: Number of scenes referencing the performer
        image_url: URL of the performer picture served by the catalog
    """

    id: str
    name: str = ""
    gender: Optional[Gender] = None
    favorite: bool = False
    engagement: int = 0
    scene_count: int = 0
    image_url: Optional[str] = None


@dataclass
class Studio:
    """
    Studio of the catalog.

    Attributes:
        id: Catalog ID
        name: Display name
        favorite: True when marked as favorite by the user
        engagement: Engagement counter
        parent_id: ID of the parent studio, None for a root studio
        scene_count: Number of scenes of the studio
    """

    id: str
    name: str = ""
    favorite: bool = False
    engagement: int = 0
    parent_id: Optional[str] = None
    scene_count: int = 0


@dataclass
class Tag:
    """Tag of the catalog."""

    id: str
    name: str = ""
    favorite: bool = False
    engagement: int = 0
    scene_count: int = 0


@dataclass(frozen=True)
class VideoFile:
    """
    Video file attached to a scene.

    Attributes:
        path: Path as known by the catalog (e.g. /data/Studio/scene.mp4)
        size: Size in bytes
        width: Width in pixels (0 when unknown)
        height: Height in pixels (0 when unknown)
    """

    path: str
    size: int = 0
    width: int = 0
    height: int = 0


@dataclass
class Scene:
    """
    Media item of the catalog.

    Attributes:
        id: Catalog ID
        title: Title, may be empty
        date: Release date (YYYY-MM-DD), None when unknown
        details: Free text description
        engagement: Engagement counter (o-counter)
        rating: Rating stored in the catalog (0-100), None when unrated
        organized: Organized flag of the catalog
        studio: Studio of the scene (0 or 1)
        tags: Tags of the scene
        performers: Performers of the scene
        files: Video files, the first one is the main file
        screenshot_url: URL of the cover image served by the catalog
    """

    id: str
    title: str = ""
    date: Optional[str] = None
    details: Optional[str] = None
    engagement: int = 0
    rating: Optional[int] = None
    organized: bool = False
    studio: Optional[Studio] = None
    tags: list[Tag] = field(default_factory=list)
    performers: list[Performer] = field(default_factory=list)
    files: list[VideoFile] = field(default_factory=list)
    screenshot_url: Optional[str] = None

    @property
    def main_file(self) -> Optional[VideoFile]:
        """Retourne le fichier principal de la scene, None si aucun."""
        return self.files[0] if self.files else None

    @property
    def size(self) -> int:
        """Taille du fichier principal en octets (0 sans fichier)."""
        main_file = self.main_file
        return main_file.size if main_file else 0

    @property
    def is_liked(self) -> bool:
        """True si la scene a un engagement positif."""
        return self.engagement > 0

    def has_performer_of_gender(self, gender: Gender) -> bool:
        """Verifie si la scene contient au moins un performer du genre donne."""
        return any(p.gender == gender for p in self.performers)
