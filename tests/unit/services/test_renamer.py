"""
Tests unitaires pour la generation des noms de fichiers.

Verifie :
- Les valeurs des champs (performers par genre, tags, resolution)
- Le nettoyage des caracteres interdits
- La longueur maximale de 255 caracteres et la cascade de troncature
"""

import pytest

from stash_curator.core.entities import Gender, Scene, Studio, Tag, VideoFile
from stash_curator.core.value_objects import (
    FilenameField,
    FilenameTemplate,
    MissingPathComponentError,
)
from stash_curator.services.renamer import (
    build_field_values,
    build_filename,
    fit_filename,
    get_extension,
    get_resolution_label,
    sanitize_for_filesystem,
)
from tests.fixtures.catalog import make_performer, make_scene


class TestSanitize:
    """Tests pour sanitize_for_filesystem."""

    def test_removes_forbidden_characters(self) -> None:
        assert sanitize_for_filesystem('a\\b/c:d*e?f"g<h>i|j') == "abcdefghij"

    def test_empty(self) -> None:
        assert sanitize_for_filesystem(None) == ""
        assert sanitize_for_filesystem("") == ""


class TestResolutionLabel:
    """Tests pour get_resolution_label."""

    @pytest.mark.parametrize(
        "height,label",
        [
            (4320, "8K"),
            (2160, "4K"),
            (1440, "2K"),
            (1080, "1080p"),
            (1079, "720p"),
            (480, "480p"),
            (240, "240p"),
            (144, "144p"),
            (0, "unknown"),
        ],
    )
    def test_labels(self, height: int, label: str) -> None:
        assert get_resolution_label(VideoFile(path="/x.mp4", height=height)) == label

    def test_no_file(self) -> None:
        assert get_resolution_label(None) == "unknown"


class TestFieldValues:
    """Tests pour build_field_values."""

    def test_values(self) -> None:
        scene = make_scene(
            "42",
            title="A: Title",
            date="2024-01-31",
            studio=Studio(id="s", name="Studio"),
            tags=[Tag(id="1", name="one"), Tag(id="2", name="two")],
            performers=[
                make_performer("f1", name="Alice"),
                make_performer("m1", gender=Gender.MALE, name="Bob"),
                make_performer("f2", name="Carol"),
            ],
            height=2160,
        )

        values = build_field_values(scene)

        assert values[FilenameField.ID] == "42"
        assert values[FilenameField.TITLE] == "A Title"
        assert values[FilenameField.PERFORMERS_FEMALE] == "Alice Carol"
        assert values[FilenameField.PERFORMERS_MALE] == "Bob"
        assert values[FilenameField.TAGS] == "one two"
        assert values[FilenameField.RESOLUTION] == "4K"
        assert values[FilenameField.STUDIO] == "Studio"

    def test_missing_values_are_empty(self) -> None:
        values = build_field_values(make_scene("1"))
        assert values[FilenameField.DATE] == ""
        assert values[FilenameField.STUDIO] == ""


class TestFitFilename:
    """Tests pour la troncature."""

    @pytest.fixture
    def template(self) -> FilenameTemplate:
        return FilenameTemplate.parse(
            "{title} - {performers_female} - {performers_male} - {tags}.{ext}"
        )

    def test_short_name_unchanged(self, template: FilenameTemplate) -> None:
        values = {
            FilenameField.TITLE: "T",
            FilenameField.PERFORMERS_FEMALE: "F",
            FilenameField.PERFORMERS_MALE: "M",
            FilenameField.TAGS: "X",
        }
        assert fit_filename(template, values, "mp4") == "T - F - M - X.mp4"

    def test_tags_truncated_first(self, template: FilenameTemplate) -> None:
        values = {
            FilenameField.TITLE: "Title",
            FilenameField.PERFORMERS_FEMALE: "Alice",
            FilenameField.PERFORMERS_MALE: "Bob",
            FilenameField.TAGS: "t" * 300,
        }

        name = fit_filename(template, values, "mp4")

        assert len(name) == 255
        assert name.startswith("Title - Alice - Bob - ")
        assert name.endswith("t.mp4")

    def test_cascade_reaches_title(self, template: FilenameTemplate) -> None:
        values = {
            FilenameField.TITLE: "T" * 300,
            FilenameField.PERFORMERS_FEMALE: "F" * 10,
            FilenameField.PERFORMERS_MALE: "M" * 10,
            FilenameField.TAGS: "X" * 10,
        }

        name = fit_filename(template, values, "mkv")

        assert len(name) <= 255
        assert name.endswith(".mkv")
        assert "X" not in name
        assert "M" not in name
        assert "F" not in name

    def test_extension_kept_when_fixed_parts_overflow(self) -> None:
        template = FilenameTemplate.parse("{id} {studio}.{ext}")
        values = {FilenameField.ID: "1", FilenameField.STUDIO: "S" * 400}

        name = fit_filename(template, values, "mp4")

        assert len(name) == 255
        assert name.endswith(".mp4")


class TestBuildFilename:
    """Tests pour build_filename."""

    def test_build(self) -> None:
        scene = make_scene(
            "7", title="Title", date="2024-02-01", path="/data/old name.MP4"
        )
        template = FilenameTemplate.parse("{date} - {title}.{ext}")

        assert build_filename(scene, template) == "2024-02-01 - Title.MP4"

    def test_scene_without_file(self) -> None:
        template = FilenameTemplate.parse("{id}.{ext}")
        with pytest.raises(MissingPathComponentError):
            build_filename(Scene(id="1"), template)

    def test_extension(self) -> None:
        assert get_extension(VideoFile(path="/data/a.b.mkv")) == "mkv"
