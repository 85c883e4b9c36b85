"""
Interfaces ports pour le catalogue distant.

Interface abstraite (port) définissant le contrat d'accès au catalogue
de médias (lecture des scènes et artefacts, écriture des notes,
déclenchement d'un scan, téléchargement des images). L'implémentation
concrète est le client GraphQL Stash.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stash_curator.core.entities import ArtifactKind, Gender, Performer, Scene, Studio, Tag
from stash_curator.core.value_objects import SceneFilter


class CatalogError(Exception):
    """Erreur de base des échanges avec le catalogue."""


class CatalogFetchError(CatalogError):
    """Lecture impossible (réseau, authentification, réponse invalide). Fatale pour la commande."""


class CatalogUpdateError(CatalogError):
    """Écriture d'une note refusée. Isolée à l'élément concerné."""


class ICatalogService(ABC):
    """
    Interface d'accès au catalogue de médias.

    Les méthodes de lecture retournent des instantanés complets
    (toutes les pages) ; l'appelant ne gère pas la pagination.
    """

    @abstractmethod
    async def find_scenes(self, scene_filter: Optional[SceneFilter] = None) -> list[Scene]:
        """
        Récupère les scènes correspondant au filtre.

        Args :
            scene_filter : Critères de sélection, None pour toutes les scènes

        Retourne :
            Liste des scènes avec studio, tags, performers et fichiers

        Lève :
            CatalogFetchError : Si le catalogue est injoignable ou répond une erreur
        """
        ...

    @abstractmethod
    async def find_performers(
        self,
        gender: Optional[Gender] = None,
        scene_count_above: Optional[int] = None,
        engagement_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Performer]:
        """
        Récupère les performers.

        Args :
            gender : Genre recherché, None pour tous
            scene_count_above : Nombre de scènes strictement supérieur (None = indifférent)
            engagement_above : Engagement strictement supérieur (None = indifférent)
            favorite : Filtre sur le drapeau favori (None = indifférent)

        Retourne :
            Liste des performers
        """
        ...

    @abstractmethod
    async def find_studios(
        self,
        scene_count_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Studio]:
        """
        Récupère les studios.

        Args :
            scene_count_above : Nombre de scènes strictement supérieur (None = indifférent)
            favorite : Filtre sur le drapeau favori (None = indifférent)
        """
        ...

    @abstractmethod
    async def find_tags(
        self,
        scene_count_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Tag]:
        """
        Récupère les tags.

        Args :
            scene_count_above : Nombre de scènes strictement supérieur (None = indifférent)
            favorite : Filtre sur le drapeau favori (None = indifférent)
        """
        ...

    @abstractmethod
    async def update_rating(self, kind: Optional[ArtifactKind], entity_id: str, rating: int) -> None:
        """
        Écrit la note (0-100) d'une entité.

        Args :
            kind : Type d'artefact, None pour une scène
            entity_id : ID de l'entité
            rating : Note entière sur 100

        Lève :
            CatalogUpdateError : Si le catalogue refuse la mise à jour
        """
        ...

    @abstractmethod
    async def trigger_metadata_scan(self) -> Optional[str]:
        """
        Demande au catalogue de rescanner la bibliothèque.

        Retourne :
            ID du job de scan, ou None si le catalogue n'en fournit pas
        """
        ...

    @abstractmethod
    async def download_image(self, url: str) -> bytes:
        """
        Télécharge une image servie par le catalogue (capture, photo de performer).

        Args :
            url : URL de l'image fournie par le catalogue

        Retourne :
            Contenu binaire de l'image

        Lève :
            CatalogFetchError : Si le téléchargement échoue
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Libère les ressources réseau."""
        ...
