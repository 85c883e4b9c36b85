"""
Filtre de requete des scenes.

Objet valeur independant du schema du catalogue : l'adaptateur Stash
le traduit en `scene_filter` GraphQL.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SceneFilter:
    """
    Criteres de selection des scenes.

    Attributs :
        studio_ids : Scenes d'un de ces studios
        tag_ids : Scenes portant un de ces tags
        performer_favorite : Scenes avec au moins un performer favori
        engagement_above : Engagement strictement superieur a cette valeur
        require_title : Titre renseigne
        require_date : Date renseignee
        require_studio : Studio renseigne
        require_details : Description renseignee
        performer_count_above : Nombre de performers strictement superieur
        tag_count_above : Nombre de tags strictement superieur
        organized : Filtre sur le drapeau "organized" (None = indifferent)
    """

    studio_ids: tuple[str, ...] = ()
    tag_ids: tuple[str, ...] = ()
    performer_favorite: bool = False
    engagement_above: Optional[int] = None
    require_title: bool = False
    require_date: bool = False
    require_studio: bool = False
    require_details: bool = False
    performer_count_above: Optional[int] = None
    tag_count_above: Optional[int] = None
    organized: Optional[bool] = None
