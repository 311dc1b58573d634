"""Interface de base pour les moteurs de conversion solaire/lunaire."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class LunarDate:
    """Date lunaire telle que renvoyée par le moteur calendaire.

    `month` est négatif pour un mois intercalaire (閏月). Les libellés
    (`year_in_ganzhi`, `year_sheng_xiao`, ...) peuvent être en chinois
    simplifié: ils sont normalisés par l'appelant.
    """

    year: int
    month: int
    day: int
    year_in_ganzhi: str
    year_sheng_xiao: str
    month_in_chinese: str
    day_in_chinese: str

    @property
    def is_leap_month(self) -> bool:
        return self.month < 0


class CalendarOracle(ABC):
    """Interface abstraite du moteur calendaire (collaborateur externe)."""

    name: str = "abstract"

    @abstractmethod
    def from_solar(self, year: int, month: int, day: int) -> LunarDate:
        """Convertit une date solaire (grégorienne) en date lunaire."""
        ...

    @abstractmethod
    def from_lunar(self, year: int, month: int, day: int) -> LunarDate:
        """Construit une date lunaire (utilisé pour le 生肖 d'une année lunaire)."""
        ...
