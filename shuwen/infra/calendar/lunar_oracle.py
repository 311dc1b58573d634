"""
Moteur calendaire adossé à la bibliothèque `lunar_python`.

Implémente `CalendarOracle` en déléguant la conversion solaire/lunaire, le
cycle sexagésimal et le 生肖 à `lunar_python` (sorties en chinois simplifié).
"""

from __future__ import annotations

from lunar_python import Lunar, Solar

from shuwen.infra.calendar.base import CalendarOracle, LunarDate


def _to_lunar_date(lunar) -> LunarDate:
    return LunarDate(
        year=lunar.getYear(),
        month=lunar.getMonth(),
        day=lunar.getDay(),
        year_in_ganzhi=lunar.getYearInGanZhi(),
        year_sheng_xiao=lunar.getYearShengXiao(),
        month_in_chinese=lunar.getMonthInChinese(),
        day_in_chinese=lunar.getDayInChinese(),
    )


class LunarPythonOracle(CalendarOracle):
    """Moteur calendaire réel (proleptique, précision de `lunar_python`)."""

    name = "lunar"

    def from_solar(self, year: int, month: int, day: int) -> LunarDate:
        """Convertit une date grégorienne via `Solar.fromYmd(...).getLunar()`."""
        return _to_lunar_date(Solar.fromYmd(year, month, day).getLunar())

    def from_lunar(self, year: int, month: int, day: int) -> LunarDate:
        """Construit une date lunaire via `Lunar.fromYmd`."""
        return _to_lunar_date(Lunar.fromYmd(year, month, day))
