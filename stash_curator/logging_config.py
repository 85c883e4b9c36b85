"""
Configuration du logging de Stash Curator via loguru.

Deux sorties :
- Console : lisible, colorée, préfixée par la commande en cours
- Fichier : journal d'audit JSON avec rotation ; chaque enregistrement
  porte la commande et l'identifiant d'exécution, ce qui permet de
  retrouver toutes les notes écrites ou tous les fichiers déplacés
  par une exécution donnée.
"""

import sys
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger

# Valeurs des champs d'audit hors d'une commande
NO_COMMAND = "-"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[command]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/stash_curator.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du journal d'audit JSON
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
    """
    logger.remove()
    logger.configure(extra={"command": NO_COMMAND, "run_id": NO_COMMAND})

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    # Le journal d'audit garde tout, DEBUG compris (notes écrites une à une)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)


def command_name(func_name: str) -> str:
    """Nom CLI d'une implémentation async : `_analyze_studios_async` -> `analyze-studios`."""
    name = func_name.strip("_")
    if name.endswith("_async"):
        name = name[: -len("_async")]
    return name.replace("_", "-")


@contextmanager
def command_context(command: str) -> Iterator[str]:
    """
    Rattache les logs émis pendant une commande à cette commande.

    Un identifiant d'exécution court est généré et ajouté aux champs
    `extra` de chaque enregistrement, y compris à travers les `await`.

    Args :
        command : Nom de la commande CLI (ex: "organize")

    Retourne :
        L'identifiant d'exécution
    """
    run_id = uuid.uuid4().hex[:8]
    with logger.contextualize(command=command, run_id=run_id):
        logger.info(f"Commande {command} demarree")
        try:
            yield run_id
        finally:
            logger.info(f"Commande {command} terminee")
