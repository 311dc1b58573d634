"""
Entités du domaine métier.

Ce module définit l'enregistrement de naissance édité par l'utilisateur, la
représentation explicite de l'heure de naissance (type somme) et les faits
dérivés présentés pour remplir un 疏文.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shuwen.domain.effective_day import DEFAULT_TZ, parse_birth_date

Gender = Literal["male", "female"]
BirthMode = Literal["solar", "lunar"]
TimeMode = Literal["unknown", "branch", "exact"]

# Valeur affichée quand une donnée requise manque (date, genre)
UNAVAILABLE = "--"
# Valeur affichée quand le moteur calendaire a échoué pour un champ précis
DERIVATION_FAILED = "（無法計算）"

_CLOCK_RE = re.compile(r"(\d{2}):(\d{2})", re.ASCII)


@dataclass(frozen=True)
class UnknownTime:
    """Heure de naissance inconnue (吉時)."""


@dataclass(frozen=True)
class BranchTime:
    """Heure connue sous forme de 時辰 (code de branche, ex: "zi")."""

    code: str


@dataclass(frozen=True)
class ClockTime:
    """Heure d'horloge; None signale une saisie mal formée."""

    hour: int | None
    minute: int | None

    @classmethod
    def from_text(cls, text: str | None) -> ClockTime:
        """Analyse un texte strict `HH:MM` (les bornes sont vérifiées plus tard)."""
        matched = _CLOCK_RE.fullmatch(text or "")
        if not matched:
            return cls(hour=None, minute=None)
        return cls(hour=int(matched.group(1)), minute=int(matched.group(2)))


TimeIndicator = UnknownTime | BranchTime | ClockTime


class BirthRecord(BaseModel):
    """Enregistrement de naissance de travail (formulaire).

    Les champs `time_branch` / `time_exact` sont la surface éditable et
    persistée; le calcul ne lit l'heure qu'au travers de `time_indicator`,
    construit à partir du seul mode actif.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    gender: Gender | None = None
    birth_mode: BirthMode = "solar"
    birth_solar: str | None = None
    time_mode: TimeMode = "unknown"
    time_branch: str | None = None
    time_exact: str | None = None
    tz: str = DEFAULT_TZ

    @property
    def time_indicator(self) -> TimeIndicator:
        """Heure de naissance sous forme de type somme (une seule variante active)."""
        if self.time_mode == "branch":
            return BranchTime(code=self.time_branch or "")
        if self.time_mode == "exact":
            return ClockTime.from_text(self.time_exact)
        return UnknownTime()

    @property
    def birth_date(self) -> date | None:
        """Date solaire validée, ou None si absente ou invalide."""
        return parse_birth_date(self.birth_solar, self.tz)


DEFAULT_RECORD = BirthRecord()


class DerivedFacts(BaseModel):
    """Faits dérivés d'un enregistrement validé (jamais persistés)."""

    lunar_year: str = UNAVAILABLE
    lunar_birthday: str = UNAVAILABLE
    zodiac: str = UNAVAILABLE
    nominal_age: int | None = None
    nominal_age_formula: str = ""
    time_branch_label: str = UNAVAILABLE
    handedness: str = UNAVAILABLE
    failures: dict[str, str] = Field(default_factory=dict)


class TodayFacts(BaseModel):
    """Faits calendaires du jour effectif (jour rituel)."""

    effective_date: date
    lunar_month_day: str = UNAVAILABLE
    ganzhi_year: str = UNAVAILABLE
    zodiac: str = UNAVAILABLE
    failures: dict[str, str] = Field(default_factory=dict)
