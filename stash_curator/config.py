"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe STASHCURATOR_,
et peut optionnellement être fournie via un fichier .env.

La clé API Stash est optionnelle : un serveur sans authentification l'ignore.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de stash_curator/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe STASHCURATOR_.
    Exemple : STASHCURATOR_STASH_URL=http://nas:9999

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="STASHCURATOR_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Serveur Stash
    stash_url: str = Field(default="http://localhost:9999")
    stash_api_key: Optional[str] = Field(default=None)
    request_timeout: float = Field(default=30.0, gt=0)

    # Chemins : préfixe des chemins vus par Stash et dossier local correspondant
    stash_data_prefix: str = Field(default="/data")
    library_dir: Path = Field(default=Path("~/stash/data"))

    # Notation
    update_delay_seconds: float = Field(default=0.2, ge=0)

    # Sélection (en Mo)
    reserved_space_mb: int = Field(default=2048, ge=0)
    smart_fill_threshold_mb: int = Field(default=20480, ge=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/stash_curator.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("library_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def stash_auth_enabled(self) -> bool:
        """Vérifie si une clé API Stash est configurée."""
        return bool(self.stash_api_key)
