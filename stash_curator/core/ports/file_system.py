"""
Interfaces ports pour le système de fichiers.

Interface abstraite (port) définissant les opérations fichiers
nécessaires à la réorganisation de la bibliothèque et à la copie
de scènes vers un autre support.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IFileSystem(ABC):
    """
    Interface pour les opérations de base sur les fichiers.

    Les opérations d'écriture lèvent OSError en cas d'échec :
    l'appelant décide de l'isolation de l'erreur.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    def list_siblings(self, path: Path) -> list[Path]:
        """
        Liste les fichiers du même répertoire partageant le même nom sans extension.

        Args :
            path : Fichier principal

        Retourne :
            Fichiers compagnons (sous-titres, images...), sans le fichier principal
        """
        ...

    @abstractmethod
    def move(self, source: Path, destination: Path) -> None:
        """
        Déplace un fichier de la source vers la destination.

        Crée les répertoires parents si nécessaire. Une destination
        existante n'est jamais écrasée.

        Args :
            source : Chemin actuel du fichier
            destination : Chemin cible du fichier

        Lève :
            FileExistsError : Si la destination existe déjà
            OSError : Si le déplacement échoue
        """
        ...

    @abstractmethod
    def copy(self, source: Path, destination: Path) -> bool:
        """
        Copie un fichier sans jamais écraser la destination.

        Crée les répertoires parents si nécessaire.

        Args :
            source : Fichier à copier
            destination : Chemin de la copie

        Retourne :
            True si le fichier a été copié, False si la destination existait déjà

        Lève :
            OSError : Si la copie échoue
        """
        ...

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """
        Écrit un fichier texte UTF-8, en créant les répertoires parents.

        Lève :
            OSError : Si l'écriture échoue
        """
        ...

    @abstractmethod
    def write_bytes(self, path: Path, content: bytes) -> None:
        """
        Écrit un fichier binaire (image), en créant les répertoires parents.

        Lève :
            OSError : Si l'écriture échoue
        """
        ...

    @abstractmethod
    def free_space(self, path: Path) -> int:
        """
        Espace libre en octets sur le volume contenant le chemin.

        Args :
            path : Répertoire existant du volume
        """
        ...
