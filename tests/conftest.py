"""
Fixtures pytest partagees pour les tests Stash Curator.

Ce module contient les fixtures communes utilisees dans les tests:
- Mocks des ports (ICatalogService, IFileSystem)
- Settings de test avec chemins temporaires
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from stash_curator.config import Settings
from stash_curator.core.ports import ICatalogService, IFileSystem


@pytest.fixture
def mock_catalog() -> AsyncMock:
    """
    Mock de ICatalogService pour les tests.

    Toutes les lectures retournent une liste vide par defaut.
    Configurer le mock dans chaque test pour des comportements specifiques.
    """
    mock = AsyncMock(spec=ICatalogService)
    mock.find_scenes.return_value = []
    mock.find_performers.return_value = []
    mock.find_studios.return_value = []
    mock.find_tags.return_value = []
    mock.update_rating.return_value = None
    mock.trigger_metadata_scan.return_value = "1"
    mock.download_image.return_value = b"\xff\xd8image"
    return mock


@pytest.fixture
def mock_file_system() -> MagicMock:
    """
    Mock de IFileSystem pour les tests.

    Aucun fichier compagnon et 100 Go libres par defaut.
    """
    mock = MagicMock(spec=IFileSystem)
    mock.exists.return_value = True
    mock.list_siblings.return_value = []
    mock.move.return_value = None
    mock.copy.return_value = True
    mock.write_text.return_value = None
    mock.write_bytes.return_value = None
    mock.free_space.return_value = 100 * 1024**3
    return mock


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler la bibliotheque et les logs.
    """
    library_dir = tmp_path / "library"
    library_dir.mkdir(parents=True)

    return Settings(
        stash_url="http://stash.test:9999",
        stash_api_key="test_key",
        library_dir=library_dir,
        log_file=tmp_path / "logs" / "test.log",
    )
