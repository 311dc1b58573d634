"""Composition des faits dérivés pour le 疏文.

Responsabilités:
- Projeter un `BirthRecord` validé en `DerivedFacts` (année 干支 + année 民國,
  anniversaire lunaire, 生肖, 虛歲, 時辰, main du sceau).
- Produire les faits du jour effectif (`TodayFacts`).
- Isoler les échecs du moteur calendaire champ par champ.

Tous les libellés passent par `zh.normalize` avant d'être renvoyés.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import structlog

from shuwen.domain.entities import (
    DERIVATION_FAILED,
    UNAVAILABLE,
    BirthRecord,
    DerivedFacts,
    Gender,
    TodayFacts,
)
from shuwen.domain.time_branches import resolve_branch
from shuwen.domain.zh import normalize
from shuwen.infra.calendar.base import CalendarOracle, LunarDate

log = structlog.get_logger(__name__)

# Année 1 de la République de Chine = 1912
ROC_YEAR_OFFSET = 1911

MONTH_NUMERALS = ["", "一", "二", "三", "四", "五", "六", "七", "八", "九", "十", "十一", "十二"]
DAY_DIGITS = ["零", "一", "二", "三", "四", "五", "六", "七", "八", "九"]
LEAP_PREFIX = "閏"

HANDEDNESS: dict[str, str] = {"male": "左手", "female": "右手"}

NOMINAL_AGE_PENDING = "虛歲 = 今年年分 - 出生年 + 1（需先填生日）"


def month_label(month: int) -> str:
    """Libellé du mois lunaire, préfixé de 閏 pour un mois intercalaire."""
    month_abs = abs(month)
    numeral = MONTH_NUMERALS[month_abs] if month_abs < len(MONTH_NUMERALS) else str(month_abs)
    prefix = LEAP_PREFIX if month < 0 else ""
    return f"{prefix}{numeral}月"


def day_label(day: int) -> str:
    """Libellé du jour lunaire (10 -> 十, 11-19 -> 十X, 20 -> 二十, 21-29 -> 二十X, 30 -> 三十)."""
    if day <= 10:
        return "十" if day == 10 else DAY_DIGITS[day]
    if day < 20:
        return f"十{DAY_DIGITS[day - 10]}"
    if day == 20:
        return "二十"
    if day < 30:
        return f"二十{DAY_DIGITS[day - 20]}"
    return "三十"


def format_lunar_birthday(lunar: LunarDate) -> str:
    return normalize(f"{month_label(lunar.month)}{day_label(lunar.day)}日")


def format_lunar_year(lunar: LunarDate) -> str:
    """Ex: 庚午年（79年）."""
    roc_year = lunar.year - ROC_YEAR_OFFSET
    return normalize(f"{lunar.year_in_ganzhi}年（{roc_year}年）")


def nominal_age(birth: date | None, effective_year: int) -> int | None:
    """虛歲 = année effective - année solaire de naissance + 1.

    Différence d'années solaires (convention affichée à l'utilisateur), pas un
    décompte exact en années lunaires.
    """
    if birth is None:
        return None
    return effective_year - birth.year + 1


def nominal_age_formula(birth: date | None, effective_year: int) -> str:
    age = nominal_age(birth, effective_year)
    if birth is None or age is None:
        return NOMINAL_AGE_PENDING
    return f"虛歲 = {effective_year} - {birth.year} + 1 = {age}"


def handedness(gender: Gender | None) -> str:
    """男左女右: main utilisée pour le sceau, ou UNAVAILABLE si genre non choisi."""
    if gender is None:
        return UNAVAILABLE
    return normalize(HANDEDNESS.get(gender, UNAVAILABLE))


class RitualFactsService:
    """Service métier de dérivation des faits calendaires.

    Responsabilités:
    - Interroger le moteur calendaire (`oracle`) pour la date de naissance et le jour effectif.
    - Garantir qu'un échec du moteur n'affecte que le champ concerné.
    """

    def __init__(self, oracle: CalendarOracle):
        """Initialise le service avec le moteur calendaire à utiliser."""
        self.oracle = oracle

    def _guarded(
        self, field: str, failures: dict[str, str], compute: Callable[[], str]
    ) -> str:
        try:
            return normalize(compute())
        except Exception as exc:
            log.warning("oracle_derivation_failed", field=field, error=repr(exc))
            failures[field] = str(exc) or exc.__class__.__name__
            return DERIVATION_FAILED

    def _lunar_of(self, day: date) -> LunarDate:
        return self.oracle.from_solar(day.year, day.month, day.day)

    def derive(self, record: BirthRecord, today: date) -> DerivedFacts:
        """Calcule les faits dérivés d'un enregistrement validé.

        Paramètres:
        - record: enregistrement validé (committed).
        - today: jour effectif (voir `effective_today`), dont seule l'année sert au 虛歲.

        Retour: `DerivedFacts`; les champs nécessitant la date valent UNAVAILABLE
        si elle est absente ou invalide, DERIVATION_FAILED si le moteur a échoué.
        """
        birth = record.birth_date
        failures: dict[str, str] = {}
        facts = DerivedFacts(
            nominal_age=nominal_age(birth, today.year),
            nominal_age_formula=normalize(nominal_age_formula(birth, today.year)),
            time_branch_label=resolve_branch(record.time_indicator),
            handedness=handedness(record.gender),
            failures=failures,
        )
        if birth is None:
            return facts
        return facts.model_copy(
            update={
                "lunar_year": self._guarded(
                    "lunar_year", failures, lambda: format_lunar_year(self._lunar_of(birth))
                ),
                "lunar_birthday": self._guarded(
                    "lunar_birthday",
                    failures,
                    lambda: format_lunar_birthday(self._lunar_of(birth)),
                ),
                "zodiac": self._guarded(
                    "zodiac", failures, lambda: self._lunar_of(birth).year_sheng_xiao
                ),
                "failures": failures,
            }
        )

    def today_facts(self, today: date) -> TodayFacts:
        """Faits du jour effectif: 月日 lunaire, année 干支 et 生肖 de l'année lunaire."""
        failures: dict[str, str] = {}

        def zodiac() -> str:
            lunar_year = self._lunar_of(today).year
            return f"屬{self.oracle.from_lunar(lunar_year, 1, 1).year_sheng_xiao}"

        return TodayFacts(
            effective_date=today,
            lunar_month_day=self._guarded(
                "lunar_month_day",
                failures,
                lambda: "{0.month_in_chinese}月{0.day_in_chinese}".format(self._lunar_of(today)),
            ),
            ganzhi_year=self._guarded(
                "ganzhi_year", failures, lambda: f"{self._lunar_of(today).year_in_ganzhi}年"
            ),
            zodiac=self._guarded("zodiac", failures, zodiac),
            failures=failures,
        )


def derive_facts(record: BirthRecord, today: date, oracle: CalendarOracle) -> DerivedFacts:
    """Raccourci fonctionnel de `RitualFactsService(oracle).derive(record, today)`."""
    return RitualFactsService(oracle).derive(record, today)
