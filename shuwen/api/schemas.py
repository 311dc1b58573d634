# Schémas Pydantic exposés par l'API (requêtes et réponses).

from datetime import date

from pydantic import BaseModel

from shuwen.domain.entities import BirthRecord, DerivedFacts


class FactsResponse(BaseModel):
    """Faits dérivés d'un lien de partage.

    Champs:
    - record: enregistrement reconstruit depuis les paramètres du lien
    - facts: faits dérivés (libellés normalisés)
    - effective_date: jour rituel utilisé pour le 虛歲
    - errors: codes de validation (GENDER_REQUIRED, BIRTH_INVALID, ...)
    - handprint_hint: rappel 男左女右 adapté au genre
    """

    record: BirthRecord
    facts: DerivedFacts
    effective_date: date
    errors: list[str]
    handprint_hint: str


class SessionResponse(BaseModel):
    """État d'une session de formulaire.

    Champs:
    - session_id: identifiant de la session
    - record: brouillon courant
    - notices: avis non bloquants (ex: URL_INVALID)
    - errors: codes de validation du brouillon
    - persistent: False si la session est passée en mémoire seule
    """

    session_id: str
    record: BirthRecord
    notices: list[str]
    errors: list[str]
    persistent: bool


class FieldEdit(BaseModel):
    """Édition d'un champ (clé snake_case ou camelCase)."""

    key: str
    value: str | None = None


class ShareRequest(BaseModel):
    include_birth: bool = False


class ShareResponse(BaseModel):
    url: str
    params: dict[str, str]


class SubmitResponse(BaseModel):
    """Résultat d'une soumission: forme de partage et faits de l'enregistrement validé."""

    params: dict[str, str]
    facts: DerivedFacts
    effective_date: date
    loading: bool
