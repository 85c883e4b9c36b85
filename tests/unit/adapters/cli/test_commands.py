"""
Tests unitaires pour les commandes CLI principales.

Tests couvrant:
- rate: affichage des classements et ecriture des notes
- select: budget d'espace et liste des chemins
- organize: dry run et erreurs de configuration
- analyze-studios: classements des studios
- analyze-performers: part de performers engageants et favoris
- clean-folders: liste et suppression des dossiers sans video
- select --copy: copie de la selection
- codes de sortie sur erreur du catalogue
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from stash_curator.adapters.cli.helpers import console
from stash_curator.config import Settings
from stash_curator.core.entities import Gender, Studio, Tag
from stash_curator.core.ports.catalog import CatalogFetchError
from stash_curator.main import app
from stash_curator.services.library_organizer import LibraryOrganizerService
from stash_curator.services.rating import RatingEngine
from stash_curator.services.rating_updater import RatingsUpdaterService
from stash_curator.services.scene_copier import SceneCopierService
from stash_curator.services.space_filler import SpaceFillerService
from tests.fixtures.catalog import make_performer, make_scene

runner = CliRunner()

GIB = 1024**3


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Console Rich large : les tableaux ne replient pas les noms."""
    monkeypatch.setattr(console, "_width", 200)


@pytest.fixture
def cli_settings(test_settings: Settings) -> Settings:
    """Settings sans pause entre les ecritures."""
    return test_settings.model_copy(update={"update_delay_seconds": 0})


@pytest.fixture
def mock_container(mock_catalog, mock_file_system, cli_settings):
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container() l'importe et l'instancie. Les services sont reels,
    branches sur les mocks des ports.
    """
    with patch("stash_curator.adapters.cli.helpers.Container") as mock_cls:
        container_instance = mock_cls.return_value
        container_instance.config.return_value = cli_settings
        container_instance.stash_client.return_value = mock_catalog
        container_instance.file_system.return_value = mock_file_system
        container_instance.rating_engine.return_value = RatingEngine(mock_catalog)
        container_instance.ratings_updater_service.return_value = RatingsUpdaterService(
            mock_catalog
        )
        container_instance.space_filler_service.return_value = SpaceFillerService(
            mock_catalog
        )
        container_instance.library_organizer_service.return_value = LibraryOrganizerService(
            mock_file_system, mock_catalog
        )
        container_instance.scene_copier_service.return_value = SceneCopierService(
            mock_file_system, mock_catalog
        )
        yield container_instance


@pytest.fixture
def studio() -> Studio:
    return Studio(id="s1", name="Blue Label", engagement=3, scene_count=2)


@pytest.fixture
def catalog_with_scenes(mock_catalog, studio):
    """Catalogue minimal : deux scenes d'un studio, un tag, une performer."""
    performer = make_performer("p1", name="Alice", engagement=2)
    tag = Tag(id="t1", name="Outdoor", engagement=1)
    scenes = [
        make_scene(
            "1",
            engagement=2,
            size=GIB,
            title="First",
            date="2024-01-01",
            studio=studio,
            tags=[tag],
            performers=[performer],
        ),
        make_scene("2", engagement=1, size=GIB, title="Second", date="2024-02-01", studio=studio),
    ]
    mock_catalog.find_scenes.return_value = scenes
    mock_catalog.find_studios.return_value = [studio]
    mock_catalog.find_tags.return_value = [tag]

    async def find_performers(gender=None, **kwargs):
        return [performer] if gender == Gender.FEMALE else []

    mock_catalog.find_performers.side_effect = find_performers
    return mock_catalog


# ============================================================================
# Tests de l'application
# ============================================================================


class TestApp:
    """Tests pour l'application Typer."""

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in (
            "rate",
            "select",
            "organize",
            "analyze-studios",
            "analyze-performers",
            "clean-folders",
        ):
            assert command in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Stash Curator v" in result.output


# ============================================================================
# Tests rate
# ============================================================================


class TestRateCommand:
    """Tests pour la commande rate."""

    def test_rate_displays_rankings(self, mock_container, catalog_with_scenes) -> None:
        result = runner.invoke(app, ["rate"])

        assert result.exit_code == 0
        assert "Studios" in result.output
        assert "Blue Label" in result.output
        assert "--push" in result.output
        catalog_with_scenes.update_rating.assert_not_awaited()
        catalog_with_scenes.close.assert_awaited_once()

    def test_rate_push_writes_ratings(self, mock_container, catalog_with_scenes) -> None:
        result = runner.invoke(app, ["rate", "--push"])

        assert result.exit_code == 0
        kinds = {c.args[0] for c in catalog_with_scenes.update_rating.await_args_list}
        # Studios, performers et scenes ; jamais les tags
        assert None in kinds
        assert all(kind is None or kind.value != "tag" for kind in kinds)
        written_ids = {c.args[1] for c in catalog_with_scenes.update_rating.await_args_list}
        assert {"s1", "p1", "1", "2"} <= written_ids

    def test_catalog_error_exits_with_code_1(self, mock_container, mock_catalog) -> None:
        mock_catalog.find_scenes.side_effect = CatalogFetchError("connexion refusee")

        result = runner.invoke(app, ["rate"])

        assert result.exit_code == 1
        assert "connexion refusee" in result.output
        mock_catalog.close.assert_awaited_once()


# ============================================================================
# Tests select
# ============================================================================


class TestSelectCommand:
    """Tests pour la commande select."""

    def test_base_selection_written(
        self, mock_container, catalog_with_scenes, mock_file_system, tmp_path: Path
    ) -> None:
        output = tmp_path / "selection.txt"

        result = runner.invoke(
            app,
            ["select", str(tmp_path), "--tag", "t1", "--no-fill", "-o", str(output)],
        )

        assert result.exit_code == 0
        lines = output.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("1.mp4")
        mock_file_system.free_space.assert_called_once()

    def test_base_selection_too_large(
        self, mock_container, catalog_with_scenes, mock_file_system, tmp_path: Path
    ) -> None:
        mock_file_system.free_space.return_value = GIB

        result = runner.invoke(app, ["select", str(tmp_path), "--tag", "t1"])

        assert result.exit_code == 1

    def test_base_selection_filling_free_space_exactly(
        self, mock_container, catalog_with_scenes, mock_file_system, tmp_path: Path
    ) -> None:
        # Marge par defaut (2048 Mo) + selection de base (2 Gio) : budget nul
        mock_file_system.free_space.return_value = 2 * GIB + 2048 * 1024 * 1024

        result = runner.invoke(app, ["select", str(tmp_path), "--tag", "t1"])

        assert result.exit_code == 1
        assert "ne tient pas" in result.output

    def test_copy_selection(
        self, mock_container, catalog_with_scenes, mock_file_system, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            ["select", str(tmp_path), "--tag", "t1", "--no-fill", "--copy", "--people"],
        )

        assert result.exit_code == 0
        assert "Copiees" in result.output
        targets = [c.args[1] for c in mock_file_system.copy.call_args_list]
        assert targets[0] == tmp_path / "Blue Label" / "First - Alice.mp4"
        assert len(targets) == 2
        assert "0 photo(s) de performers" in result.output

    def test_people_requires_copy(self, mock_container, tmp_path: Path) -> None:
        result = runner.invoke(app, ["select", str(tmp_path), "--people"])

        assert result.exit_code == 2
        assert "--copy" in result.output

    def test_missing_destination(self, mock_container, mock_file_system) -> None:
        mock_file_system.exists.return_value = False

        result = runner.invoke(app, ["select", "/nowhere"])

        assert result.exit_code == 1
        assert "introuvable" in result.output

    def test_fill_adds_favorites(
        self, mock_container, mock_catalog, mock_file_system, tmp_path: Path
    ) -> None:
        favorite_studio = Studio(id="fav", name="Fav", favorite=True)
        liked = make_scene("9", engagement=3, size=GIB, studio=favorite_studio)
        mock_catalog.find_studios.return_value = [favorite_studio]
        mock_catalog.find_scenes.return_value = [liked]
        output = tmp_path / "selection.txt"

        result = runner.invoke(app, ["select", str(tmp_path), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_text().strip().endswith("9.mp4")


# ============================================================================
# Tests organize
# ============================================================================


class TestOrganizeCommand:
    """Tests pour la commande organize."""

    def test_dry_run(
        self, mock_container, catalog_with_scenes, mock_file_system, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "organize",
                "--template",
                "{date} - {title}.{ext}",
                "--data-dir",
                str(tmp_path),
                "--dry-run",
            ],
        )

        assert result.exit_code == 0
        assert "dry run" in result.output
        mock_file_system.move.assert_not_called()
        mock_file_system.write_text.assert_not_called()
        catalog_with_scenes.trigger_metadata_scan.assert_not_awaited()

    def test_invalid_template_exits_with_code_2(self, mock_container) -> None:
        result = runner.invoke(app, ["organize", "--template", "{title}.mp4"])

        assert result.exit_code == 2
        assert "Template invalide" in result.output

    def test_performer_without_gender_exits_with_code_2(self, mock_container) -> None:
        result = runner.invoke(app, ["organize", "--by", "performer"])

        assert result.exit_code == 2


# ============================================================================
# Tests analyze-studios
# ============================================================================


class TestAnalyzeStudiosCommand:
    """Tests pour la commande analyze-studios."""

    def test_rankings(self, mock_container, catalog_with_scenes) -> None:
        result = runner.invoke(app, ["analyze-studios", "--top", "5"])

        assert result.exit_code == 0
        assert "Blue Label" in result.output
        assert "Aucun studio candidat" in result.output


# ============================================================================
# Tests analyze-performers
# ============================================================================


class TestAnalyzePerformersCommand:
    """Tests pour la commande analyze-performers."""

    def test_engaged_share_and_favorites(self, mock_container, mock_catalog) -> None:
        loved = make_performer("p1", name="Alice", engagement=5)
        ignored = make_performer("p2", name="Beth")
        mock_catalog.find_performers.return_value = [loved, ignored]
        mock_catalog.find_scenes.return_value = [
            make_scene("1", engagement=2, performers=[loved]),
        ]

        result = runner.invoke(app, ["analyze-performers", "--min-scenes", "4"])

        assert result.exit_code == 0
        assert "50.00%" in result.output
        assert "Alice" in result.output
        assert "Beth" not in result.output
        mock_catalog.find_performers.assert_awaited_once_with(
            gender=Gender.FEMALE, scene_count_above=3
        )

    def test_no_favorites_skips_scene_lookup(self, mock_container, mock_catalog) -> None:
        result = runner.invoke(
            app, ["analyze-performers", "--gender", "MALE", "--no-favorites"]
        )

        assert result.exit_code == 0
        mock_catalog.find_scenes.assert_not_awaited()


# ============================================================================
# Tests clean-folders
# ============================================================================


@pytest.fixture
def messy_tree(tmp_path: Path) -> Path:
    """Arborescence : un dossier avec video, deux dossiers sans video."""
    root = tmp_path / "videos"
    (root / "keep").mkdir(parents=True)
    (root / "keep" / "scene.mp4").write_bytes(b"")
    (root / "old" / "thumbs").mkdir(parents=True)
    (root / "old" / "scene.nfo").write_text("<movie/>")
    return root


class TestCleanFoldersCommand:
    """Tests pour la commande clean-folders."""

    def test_lists_without_deleting(self, messy_tree: Path) -> None:
        result = runner.invoke(app, ["clean-folders", str(messy_tree)])

        assert result.exit_code == 0
        assert "Dossiers sans video (2)" in result.output
        assert (messy_tree / "old").exists()

    def test_delete_with_yes(self, messy_tree: Path) -> None:
        result = runner.invoke(app, ["clean-folders", str(messy_tree), "--delete", "--yes"])

        assert result.exit_code == 0
        assert not (messy_tree / "old").exists()
        assert (messy_tree / "keep" / "scene.mp4").exists()

    def test_delete_cancelled_at_final_confirmation(self, messy_tree: Path) -> None:
        result = runner.invoke(app, ["clean-folders", str(messy_tree), "--delete"], input="n\n")

        assert result.exit_code == 0
        assert "annulee" in result.output
        assert (messy_tree / "old").exists()

    def test_interactive_removes_confirmed_folder(self, messy_tree: Path) -> None:
        result = runner.invoke(
            app, ["clean-folders", str(messy_tree), "--interactive"], input="y\n"
        )

        assert result.exit_code == 0
        assert not (messy_tree / "old").exists()
        assert "Deja supprime avec son parent" in result.output

    def test_clean_tree(self, tmp_path: Path) -> None:
        (tmp_path / "scene.mkv").write_bytes(b"")

        result = runner.invoke(app, ["clean-folders", str(tmp_path)])

        assert result.exit_code == 0
        assert "propre" in result.output

    def test_missing_root_exits_with_code_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["clean-folders", str(tmp_path / "absent")])

        assert result.exit_code == 1
        assert "introuvable" in result.output
