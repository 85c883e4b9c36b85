"""
Objets valeur pour les notes calculees.

Une note n'est jamais persistee entre deux executions : elle est recalculee
a chaque passage a partir de l'instantane du catalogue.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RatingResult:
    """
    Note calculee pour une entite du catalogue.

    Attributs :
        score : Note sur 100 (entier pour les artefacts)
        engagement : Engagement retenu pour le classement (departage des ex aequo)
        formula : Trace numerique de la formule (ex: "0.5 * 0.5333 * 0.5 * 1.1 * 100")
        formula_explained : Formule symbolique correspondante
    """

    score: float
    engagement: int
    formula: str
    formula_explained: str


@dataclass(frozen=True)
class Rated(Generic[T]):
    """
    Entite associee a sa note.

    Remplace la fusion ad hoc des champs de note dans l'entite :
    l'entite source reste intacte dans `base`.
    """

    base: T
    rating: RatingResult

    @property
    def id(self) -> str:
        """ID de l'entite notee."""
        return self.base.id

    @property
    def name(self) -> str:
        """Nom (ou titre pour une scene) de l'entite notee."""
        return getattr(self.base, "name", None) or getattr(self.base, "title", "")

    @property
    def score(self) -> float:
        """Raccourci vers la note."""
        return self.rating.score
