"""Moteur calendaire déterministe pour les tests et le développement.

Ce module implémente un moteur factice qui renvoie des dates lunaires
prévisibles sans dépendance externe: des fixtures explicites si fournies,
sinon une règle simple (année/mois/jour recopiés, cycle sexagésimal calculé
sur l'année). Les libellés sont volontairement en chinois simplifié, comme
ceux du moteur réel.
"""

from __future__ import annotations

from shuwen.infra.calendar.base import CalendarOracle, LunarDate

STEMS = "甲乙丙丁戊己庚辛壬癸"
BRANCHES = "子丑寅卯辰巳午未申酉戌亥"
SHENG_XIAO = "鼠牛虎兔龙蛇马羊猴鸡狗猪"
MONTH_NAMES = ["", "正", "二", "三", "四", "五", "六", "七", "八", "九", "十", "冬", "腊"]
DAY_NAMES = [
    "",
    "初一", "初二", "初三", "初四", "初五", "初六", "初七", "初八", "初九", "初十",
    "十一", "十二", "十三", "十四", "十五", "十六", "十七", "十八", "十九", "二十",
    "廿一", "廿二", "廿三", "廿四", "廿五", "廿六", "廿七", "廿八", "廿九", "三十",
]


def _ganzhi(year: int) -> str:
    # 1984 = 甲子
    offset = year - 1984
    return STEMS[offset % 10] + BRANCHES[offset % 12]


def make_lunar_date(year: int, month: int, day: int) -> LunarDate:
    """Construit une `LunarDate` cohérente (libellés simplifiés) pour une année lunaire."""
    month_name = ("闰" if month < 0 else "") + MONTH_NAMES[abs(month)]
    return LunarDate(
        year=year,
        month=month,
        day=day,
        year_in_ganzhi=_ganzhi(year),
        year_sheng_xiao=SHENG_XIAO[(year - 1984) % 12],
        month_in_chinese=month_name,
        day_in_chinese=DAY_NAMES[day],
    )


class FakeCalendarOracle(CalendarOracle):
    """Moteur calendaire factice et déterministe.

    Args:
        fixtures: Dates lunaires imposées, indexées par (année, mois, jour) solaires.
    """

    name = "fake"

    def __init__(self, fixtures: dict[tuple[int, int, int], LunarDate] | None = None):
        self.fixtures = dict(fixtures or {})
        self.calls: list[tuple[str, int, int, int]] = []

    def from_solar(self, year: int, month: int, day: int) -> LunarDate:
        self.calls.append(("solar", year, month, day))
        fixture = self.fixtures.get((year, month, day))
        if fixture is not None:
            return fixture
        return make_lunar_date(year, month, min(day, 30))

    def from_lunar(self, year: int, month: int, day: int) -> LunarDate:
        self.calls.append(("lunar", year, month, day))
        return make_lunar_date(year, month, day)
