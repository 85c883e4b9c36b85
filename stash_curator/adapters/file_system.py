"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem pour les operations fichiers reelles.
Les erreurs d'ecriture sont propagees (OSError) : le service appelant
les isole scene par scene.
"""

import shutil
from pathlib import Path

from stash_curator.core.ports.file_system import IFileSystem


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Fournit les operations utilisees par la reorganisation de la
    bibliotheque, la copie de scenes et le calcul de l'espace disponible.
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def list_siblings(self, path: Path) -> list[Path]:
        """
        Liste les fichiers compagnons du fichier principal.

        Un compagnon est un fichier du meme repertoire dont le nom sans
        extension est identique (sous-titres, vignettes, ancien NFO...).
        Retourne une liste triee, vide si le repertoire n'existe pas.
        """
        directory = path.parent
        if not directory.is_dir():
            return []
        return sorted(
            entry
            for entry in directory.iterdir()
            if entry.is_file() and entry.stem == path.stem and entry.name != path.name
        )

    def move(self, source: Path, destination: Path) -> None:
        """
        Deplace un fichier de la source vers la destination.

        Cree les repertoires parents si necessaire ; refuse d'ecraser
        un fichier existant.
        """
        if destination.exists():
            raise FileExistsError(f"Destination deja existante : {destination}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))

    def copy(self, source: Path, destination: Path) -> bool:
        """
        Copie un fichier de la source vers la destination.

        Cree les repertoires parents si necessaire. Une destination deja
        presente est conservee telle quelle.
        """
        if destination.exists():
            return False
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(str(source), str(destination))
        return True

    def write_text(self, path: Path, content: str) -> None:
        """Ecrit un fichier texte UTF-8, en creant les repertoires parents."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def write_bytes(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def free_space(self, path: Path) -> int:
        """Espace libre en octets sur le volume du chemin."""
        return shutil.disk_usage(path).free
