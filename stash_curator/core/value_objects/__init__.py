"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- RatingResult : Note calculee et sa trace de formule
- Rated : Entite associee a sa note
- SceneFilter : Criteres de requete des scenes
- FilenameField, FilenameTemplate, TemplateSegment : Modele de nom de fichier
- OrganizationPlan, OrganizationType, StudioStructure : Plan d'organisation
- InvalidTemplateError : Modele de nom invalide
- MissingPathComponentError : Chemin cible impossible a construire
"""

from stash_curator.core.value_objects.organization import (
    FilenameField,
    FilenameTemplate,
    InvalidTemplateError,
    MissingPathComponentError,
    OrganizationPlan,
    OrganizationType,
    StudioStructure,
    TemplateSegment,
)
from stash_curator.core.value_objects.rating import Rated, RatingResult
from stash_curator.core.value_objects.scene_filter import SceneFilter

__all__ = [
    "FilenameField",
    "FilenameTemplate",
    "InvalidTemplateError",
    "MissingPathComponentError",
    "OrganizationPlan",
    "OrganizationType",
    "Rated",
    "RatingResult",
    "SceneFilter",
    "StudioStructure",
    "TemplateSegment",
]
