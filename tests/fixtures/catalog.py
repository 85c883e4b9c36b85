"""
Fabriques d'entites du catalogue pour les tests.
"""

from typing import Optional

from stash_curator.core.entities import Gender, Performer, Scene, Studio, Tag, VideoFile


def make_scene(
    id: str,
    engagement: int = 0,
    size: int = 0,
    title: str = "",
    studio: Optional[Studio] = None,
    tags: Optional[list[Tag]] = None,
    performers: Optional[list[Performer]] = None,
    path: Optional[str] = None,
    height: int = 1080,
    **kwargs,
) -> Scene:
    """Fabrique une scene avec un fichier principal."""
    return Scene(
        id=id,
        title=title,
        engagement=engagement,
        studio=studio,
        tags=tags or [],
        performers=performers or [],
        files=[VideoFile(path=path or f"/data/{id}.mp4", size=size, height=height)],
        **kwargs,
    )


def make_performer(
    id: str,
    gender: Gender = Gender.FEMALE,
    favorite: bool = False,
    engagement: int = 0,
    name: Optional[str] = None,
) -> Performer:
    """Fabrique un performer."""
    return Performer(
        id=id,
        name=name or f"Performer {id}",
        gender=gender,
        favorite=favorite,
        engagement=engagement,
    )
