"""
Objets valeur pour l'organisation de la bibliotheque.

Un plan d'organisation decrit la structure de repertoires voulue
(par studio ou par performer) et le modele de nommage des fichiers.
Le modele est une liste ordonnee de champs, chacun suivi d'un separateur
optionnel ; l'extension est toujours ajoutee a la fin.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Sequence

from stash_curator.core.entities.catalog import Gender

# Caracteres autorises dans les separateurs
VALID_SEPARATOR_CHARS = frozenset("-_. ()[]{}+=")


class InvalidTemplateError(ValueError):
    """Modele de nom de fichier invalide (champ inconnu, separateur interdit, non unique)."""


class MissingPathComponentError(ValueError):
    """Une scene ne fournit pas les elements necessaires a son chemin cible."""


class FilenameField(str, Enum):
    """Vocabulaire fixe des champs utilisables dans un nom de fichier."""

    ID = "id"
    TITLE = "title"
    DATE = "date"
    PERFORMERS_MALE = "performers_male"
    PERFORMERS_FEMALE = "performers_female"
    RESOLUTION = "resolution"
    STUDIO = "studio"
    TAGS = "tags"


class OrganizationType(str, Enum):
    """Critere de choix du repertoire d'une scene."""

    STUDIO = "studio"
    PERFORMER = "performer"


class StudioStructure(str, Enum):
    """Structure des repertoires de studios."""

    FLAT = "flat"
    NESTED = "nested"


_EXT_SUFFIX = ".{ext}"
_PLACEHOLDER_RE = re.compile(
    r"\{(" + "|".join(f.value for f in FilenameField) + r")\}"
)


@dataclass(frozen=True)
class TemplateSegment:
    """Champ du modele suivi de son separateur (eventuellement vide)."""

    field: FilenameField
    separator: str = ""


@dataclass(frozen=True)
class FilenameTemplate:
    """
    Modele de nom de fichier.

    Exemple : "{date} - {title} [{resolution}].{ext}" donne les segments
    (date, " - "), (title, " ["), (resolution, "]").

    Regles de validation :
    - au moins un champ, chaque champ au plus une fois
    - separateurs limites a VALID_SEPARATOR_CHARS
    - unicite : le champ id, ou le titre plus au moins un autre champ
    """

    segments: tuple[TemplateSegment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise InvalidTemplateError("Le modele doit contenir au moins un champ")

        fields = [segment.field for segment in self.segments]
        if len(set(fields)) != len(fields):
            raise InvalidTemplateError("Chaque champ ne peut apparaitre qu'une fois")

        for segment in self.segments:
            invalid = set(segment.separator) - VALID_SEPARATOR_CHARS
            if invalid:
                raise InvalidTemplateError(
                    f"Separateur invalide {segment.separator!r} : "
                    f"caracteres autorises {' '.join(sorted(VALID_SEPARATOR_CHARS))}"
                )

        has_id = FilenameField.ID in fields
        has_title = FilenameField.TITLE in fields
        if not has_id and (not has_title or len(fields) < 2):
            raise InvalidTemplateError(
                "Pour garantir l'unicite, le modele doit contenir {id}, "
                "ou {title} plus au moins un autre champ"
            )

    @classmethod
    def from_fields(
        cls,
        fields: Sequence[FilenameField],
        separators: Sequence[str] = (),
        final_separator: str = "",
    ) -> "FilenameTemplate":
        """
        Construit un modele a partir d'une liste ordonnee de champs.

        Args:
            fields: Champs dans l'ordre d'apparition.
            separators: Separateurs entre champs consecutifs (len(fields) - 1).
                Un separateur manquant vaut chaine vide.
            final_separator: Separateur ajoute apres le dernier champ.

        Returns:
            Modele valide.
        """
        if len(separators) > max(len(fields) - 1, 0):
            raise InvalidTemplateError("Trop de separateurs pour le nombre de champs")

        padded = list(separators) + [""] * (len(fields) - 1 - len(separators))
        padded.append(final_separator)
        return cls(
            segments=tuple(
                TemplateSegment(field=FilenameField(f), separator=sep)
                for f, sep in zip(fields, padded)
            )
        )

    @classmethod
    def parse(cls, text: str) -> "FilenameTemplate":
        """
        Parse un modele textuel du type "{date} - {title}.{ext}".

        Le modele doit commencer par un champ et se terminer par ".{ext}".
        """
        if not text.endswith(_EXT_SUFFIX):
            raise InvalidTemplateError(f"Le modele doit se terminer par {_EXT_SUFFIX}")
        body = text[: -len(_EXT_SUFFIX)]

        matches = list(_PLACEHOLDER_RE.finditer(body))
        if not matches or matches[0].start() != 0:
            raise InvalidTemplateError("Le modele doit commencer par un champ")

        segments: list[TemplateSegment] = []
        for index, match in enumerate(matches):
            end = matches[index + 1].start() if index + 1 < len(matches) else len(body)
            segments.append(
                TemplateSegment(
                    field=FilenameField(match.group(1)),
                    separator=body[match.end():end],
                )
            )
        return cls(segments=tuple(segments))

    @property
    def fields(self) -> tuple[FilenameField, ...]:
        """Champs du modele dans l'ordre."""
        return tuple(segment.field for segment in self.segments)

    def has_field(self, field: FilenameField) -> bool:
        """Verifie si le modele contient le champ."""
        return field in self.fields

    def render(self, values: Mapping[FilenameField, str], extension: str) -> str:
        """
        Concatene les valeurs des champs et leurs separateurs, puis l'extension.

        Args:
            values: Valeur de chaque champ (chaine vide si absente).
            extension: Extension sans le point ; omise si vide.
        """
        name = "".join(
            f"{values.get(segment.field, '')}{segment.separator}"
            for segment in self.segments
        )
        return f"{name}.{extension}" if extension else name

    def __str__(self) -> str:
        body = "".join(f"{{{s.field.value}}}{s.separator}" for s in self.segments)
        return f"{body}{_EXT_SUFFIX}"


@dataclass(frozen=True)
class OrganizationPlan:
    """
    Plan d'organisation de la bibliotheque choisi par l'utilisateur.

    Attributs :
        template : Modele de nom de fichier
        data_dir : Repertoire local correspondant au repertoire de donnees du catalogue
        organization_type : Par studio ou par performer
        studio_structure : Plat ou imbrique (organisation par studio)
        performer_gender : Genre du performer choisi (organisation par performer)
        require_male : Ne garder que les scenes avec au moins un performer masculin
        require_female : Ne garder que les scenes avec au moins un performer feminin
        catalog_data_prefix : Prefixe des chemins cote catalogue (ex: /data)
    """

    template: FilenameTemplate
    data_dir: Path
    organization_type: OrganizationType = OrganizationType.STUDIO
    studio_structure: StudioStructure = StudioStructure.FLAT
    performer_gender: Optional[Gender] = None
    require_male: bool = False
    require_female: bool = False
    catalog_data_prefix: str = "/data"

    def __post_init__(self) -> None:
        if (
            self.organization_type == OrganizationType.PERFORMER
            and self.performer_gender is None
        ):
            raise ValueError("L'organisation par performer necessite un genre")
