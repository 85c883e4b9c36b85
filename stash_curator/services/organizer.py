"""
Service de calcul des repertoires de destination des scenes.

Trois politiques :
- plate : un repertoire au nom du studio de la scene ;
- imbriquee : la chaine des studios parents, de la racine vers la feuille ;
- par performer : le performer du genre choisi le plus engage de la scene
  (favoris en priorite).

Le parcours des parents s'arrete sur un parent manquant ou deja visite :
une hierarchie mal formee (cycle) ne provoque jamais de boucle infinie.
"""

from typing import Sequence

from stash_curator.core.entities import Gender, Scene, Studio
from stash_curator.core.value_objects import (
    MissingPathComponentError,
    OrganizationPlan,
    OrganizationType,
    StudioStructure,
)
from stash_curator.services.renamer import sanitize_for_filesystem


def studio_chain(studio: Studio, studios: Sequence[Studio]) -> list[Studio]:
    """
    Remonte la chaine des studios parents.

    Args:
        studio: Studio de depart (celui de la scene).
        studios: Liste complete des studios du catalogue.

    Returns:
        Studios de la racine vers la feuille (au moins le studio de depart).
    """
    by_id = {s.id: s for s in studios}
    current = by_id.get(studio.id, studio)
    chain = [current]
    visited = {current.id}

    while current.parent_id is not None:
        parent = by_id.get(current.parent_id)
        if parent is None or parent.id in visited:
            break
        chain.append(parent)
        visited.add(parent.id)
        current = parent

    chain.reverse()
    return chain


def get_studio_folders(
    scene: Scene,
    studios: Sequence[Studio],
    structure: StudioStructure = StudioStructure.FLAT,
) -> list[str]:
    """Repertoires d'une scene organisee par studio (vide sans studio)."""
    if scene.studio is None:
        return []
    if structure == StudioStructure.FLAT:
        return [scene.studio.name]
    return [s.name for s in studio_chain(scene.studio, studios)]


def get_performer_folders(scene: Scene, gender: Gender) -> list[str]:
    """
    Repertoire d'une scene organisee par performer.

    Parmi les performers du genre choisi, les favoris sont preferes s'il y en
    a ; le plus engage l'emporte, l'ordre de la scene departage les ex aequo.
    """
    matching = [p for p in scene.performers if p.gender == gender]
    favorites = [p for p in matching if p.favorite]
    candidates = favorites or matching
    if not candidates:
        return []
    top = sorted(candidates, key=lambda p: p.engagement, reverse=True)[0]
    return [top.name]


def resolve_folders(
    scene: Scene,
    plan: OrganizationPlan,
    studios: Sequence[Studio] = (),
) -> list[str]:
    """
    Repertoires cibles (nettoyes) d'une scene selon le plan.

    Raises:
        MissingPathComponentError: Si aucun repertoire ne peut etre determine
            (pas de studio, pas de performer du genre choisi).
    """
    if plan.organization_type == OrganizationType.PERFORMER:
        folders = get_performer_folders(scene, plan.performer_gender)
        missing = f"aucun performer de genre {plan.performer_gender.value}"
    else:
        folders = get_studio_folders(scene, studios, plan.studio_structure)
        missing = "aucun studio"

    safe_folders = [f for f in (sanitize_for_filesystem(name) for name in folders) if f]
    if not safe_folders:
        raise MissingPathComponentError(f"Scene {scene.id} : {missing}")
    return safe_folders

