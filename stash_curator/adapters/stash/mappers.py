"""
Conversions entre les reponses GraphQL Stash et les entites du domaine.

Les champs absents ou nuls sont remplaces par des valeurs neutres :
le moteur de curation travaille toujours sur des entites completes.
"""

from typing import Any, Optional

from stash_curator.core.entities import (
    Gender,
    Performer,
    Scene,
    Studio,
    Tag,
    VideoFile,
)
from stash_curator.core.value_objects import SceneFilter

# per_page=-1 : Stash renvoie tous les resultats en une seule page
FIND_ALL = {"per_page": -1}


def _parse_gender(value: Optional[str]) -> Optional[Gender]:
    if not value:
        return None
    try:
        return Gender(value)
    except ValueError:
        return None


def map_performer(data: dict[str, Any]) -> Performer:
    return Performer(
        id=str(data["id"]),
        name=data.get("name") or "",
        gender=_parse_gender(data.get("gender")),
        favorite=bool(data.get("favorite")),
        engagement=data.get("o_counter") or 0,
        scene_count=data.get("scene_count") or 0,
        image_url=data.get("image_path") or None,
    )


def map_studio(data: dict[str, Any]) -> Studio:
    parent = data.get("parent_studio") or {}
    return Studio(
        id=str(data["id"]),
        name=data.get("name") or "",
        favorite=bool(data.get("favorite")),
        engagement=data.get("o_counter") or 0,
        parent_id=str(parent["id"]) if parent.get("id") else None,
        scene_count=data.get("scene_count") or 0,
    )


def map_tag(data: dict[str, Any]) -> Tag:
    return Tag(
        id=str(data["id"]),
        name=data.get("name") or "",
        favorite=bool(data.get("favorite")),
        engagement=data.get("o_counter") or 0,
        scene_count=data.get("scene_count") or 0,
    )


def map_file(data: dict[str, Any]) -> VideoFile:
    return VideoFile(
        path=data.get("path") or "",
        size=int(data.get("size") or 0),
        width=data.get("width") or 0,
        height=data.get("height") or 0,
    )


def map_scene(data: dict[str, Any]) -> Scene:
    """Convertit une scene GraphQL et ses associations."""
    studio_data = data.get("studio")
    return Scene(
        id=str(data["id"]),
        title=data.get("title") or "",
        date=data.get("date") or None,
        details=data.get("details") or None,
        engagement=data.get("o_counter") or 0,
        rating=data.get("rating100"),
        organized=bool(data.get("organized")),
        studio=map_studio(studio_data) if studio_data else None,
        tags=[map_tag(t) for t in data.get("tags") or []],
        performers=[map_performer(p) for p in data.get("performers") or []],
        files=[map_file(f) for f in data.get("files") or []],
        screenshot_url=(data.get("paths") or {}).get("screenshot") or None,
    )


def _greater_than(value: int) -> dict[str, Any]:
    return {"value": value, "modifier": "GREATER_THAN"}


def _not_null() -> dict[str, Any]:
    return {"value": "", "modifier": "NOT_NULL"}


def scene_filter_to_graphql(scene_filter: Optional[SceneFilter]) -> dict[str, Any]:
    """
    Traduit un SceneFilter en `SceneFilterType` GraphQL.

    Args:
        scene_filter: Criteres du domaine, None pour aucun critere

    Returns:
        Dictionnaire des criteres (vide sans filtre)
    """
    if scene_filter is None:
        return {}

    criteria: dict[str, Any] = {}
    if scene_filter.studio_ids:
        criteria["studios"] = {
            "value": list(scene_filter.studio_ids),
            "modifier": "INCLUDES",
        }
    if scene_filter.tag_ids:
        criteria["tags"] = {
            "value": list(scene_filter.tag_ids),
            "modifier": "INCLUDES",
        }
    if scene_filter.performer_favorite:
        criteria["performer_favorite"] = True
    if scene_filter.engagement_above is not None:
        criteria["o_counter"] = _greater_than(scene_filter.engagement_above)
    if scene_filter.require_title:
        criteria["title"] = _not_null()
    if scene_filter.require_date:
        criteria["date"] = _not_null()
    if scene_filter.require_details:
        criteria["details"] = _not_null()
    if scene_filter.require_studio and not scene_filter.studio_ids:
        criteria["studios"] = {"value": [], "modifier": "NOT_NULL"}
    if scene_filter.performer_count_above is not None:
        criteria["performer_count"] = _greater_than(scene_filter.performer_count_above)
    if scene_filter.tag_count_above is not None:
        criteria["tag_count"] = _greater_than(scene_filter.tag_count_above)
    if scene_filter.organized is not None:
        criteria["organized"] = scene_filter.organized
    return criteria


def artifact_filter(
    gender: Optional[Gender] = None,
    scene_count_above: Optional[int] = None,
    engagement_above: Optional[int] = None,
    favorite: Optional[bool] = None,
    favorite_key: str = "favorite",
) -> dict[str, Any]:
    """
    Criteres communs aux filtres performer, studio et tag.

    Le drapeau favori porte un nom different selon le type d'entite
    (`filter_favorites` pour les performers).
    """
    criteria: dict[str, Any] = {}
    if gender is not None:
        criteria["gender"] = {"value": gender.value, "modifier": "EQUALS"}
    if scene_count_above is not None:
        criteria["scene_count"] = _greater_than(scene_count_above)
    if engagement_above is not None:
        criteria["o_counter"] = _greater_than(engagement_above)
    if favorite is not None:
        criteria[favorite_key] = favorite
    return criteria

