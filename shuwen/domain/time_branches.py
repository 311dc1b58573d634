"""Résolution du 時辰 (double-heure) à partir de l'heure de naissance.

Les douze 時辰 découpent la journée en fenêtres de deux heures alignées sur les
heures impaires (丑 01:00-02:59, ..., 亥 21:00-22:59). Le 子時 chevauche minuit:
23:00-23:59 est nommé 夜子時 et 00:00-00:59 早子時 lorsque l'heure exacte est
connue.
"""

from __future__ import annotations

from dataclasses import dataclass

from shuwen.domain.entities import BranchTime, ClockTime, TimeIndicator, UnknownTime
from shuwen.domain.zh import to_traditional

LABEL_AUSPICIOUS = "吉時"
LABEL_UNKNOWN = "未知"
LABEL_LATE_ZI = "夜子時"
LABEL_EARLY_ZI = "早子時"

MINUTES_PER_DAY = 24 * 60
LATE_ZI_HOUR = 23
EARLY_ZI_HOUR = 0


@dataclass(frozen=True)
class TimeBranch:
    """Définition d'un 時辰: libellé, plage affichée et bornes incluses."""

    glyph: str
    label: str
    range: str
    start: str
    end: str

    @property
    def start_minute(self) -> int:
        return _to_minutes(self.start)

    @property
    def end_minute(self) -> int:
        """Borne exclusive (minute suivant `end`), modulo 24h."""
        return (_to_minutes(self.end) + 1) % MINUTES_PER_DAY

    def contains(self, minute_of_day: int) -> bool:
        start, end = self.start_minute, self.end_minute
        if start < end:
            return start <= minute_of_day < end
        return minute_of_day >= start or minute_of_day < end


def _to_minutes(hhmm: str) -> int:
    hour, minute = hhmm.split(":")
    return int(hour) * 60 + int(minute)


TIME_BRANCHES: dict[str, TimeBranch] = {
    "zi": TimeBranch("子", "子時", "23:00–00:59", "23:00", "00:59"),
    "chou": TimeBranch("丑", "丑時", "01:00–02:59", "01:00", "02:59"),
    "yin": TimeBranch("寅", "寅時", "03:00–04:59", "03:00", "04:59"),
    "mao": TimeBranch("卯", "卯時", "05:00–06:59", "05:00", "06:59"),
    "chen": TimeBranch("辰", "辰時", "07:00–08:59", "07:00", "08:59"),
    "si": TimeBranch("巳", "巳時", "09:00–10:59", "09:00", "10:59"),
    "wu": TimeBranch("午", "午時", "11:00–12:59", "11:00", "12:59"),
    "wei": TimeBranch("未", "未時", "13:00–14:59", "13:00", "14:59"),
    "shen": TimeBranch("申", "申時", "15:00–16:59", "15:00", "16:59"),
    "you": TimeBranch("酉", "酉時", "17:00–18:59", "17:00", "18:59"),
    "xu": TimeBranch("戌", "戌時", "19:00–20:59", "19:00", "20:59"),
    "hai": TimeBranch("亥", "亥時", "21:00–22:59", "21:00", "22:59"),
}

BRANCH_CODES: tuple[str, ...] = tuple(TIME_BRANCHES)


def is_branch_code(value: object) -> bool:
    """Indique si `value` est l'un des douze codes de 時辰."""
    return isinstance(value, str) and value in TIME_BRANCHES


def _clock_part(value: object, upper: int) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            return None
        value = int(value)
    if not isinstance(value, int) or not 0 <= value <= upper:
        return None
    return value


def branch_for_clock(hour: object, minute: object) -> str:
    """Retourne le code du 時辰 contenant l'heure donnée, ou "" si mal formée."""
    h = _clock_part(hour, 23)
    m = _clock_part(minute, 59)
    if h is None or m is None:
        return ""
    minute_of_day = h * 60 + m
    for code, branch in TIME_BRANCHES.items():
        if branch.contains(minute_of_day):
            return code
    return ""


def parse_clock(text: str | None) -> tuple[int, int] | None:
    """Analyse un texte `HH:MM` strict et borné (00:00-23:59), sinon None."""
    clock = ClockTime.from_text(text)
    if not branch_for_clock(clock.hour, clock.minute):
        return None
    return clock.hour, clock.minute


def resolve_branch(indicator: TimeIndicator) -> str:
    """Calcule le libellé de 時辰 pour une heure de naissance.

    - `UnknownTime` -> 吉時 (aucune branche affirmée)
    - `BranchTime` -> "{branche}時", ou 未知 pour un code non reconnu
    - `ClockTime` -> 夜子時 (23h), 早子時 (0h), sinon la fenêtre de deux heures;
      une heure mal formée donne 未知

    Ne lève jamais d'exception.
    """
    if isinstance(indicator, BranchTime):
        branch = TIME_BRANCHES.get(indicator.code) if is_branch_code(indicator.code) else None
        if branch is None:
            return to_traditional(LABEL_UNKNOWN)
        return to_traditional(branch.label)

    if isinstance(indicator, ClockTime):
        code = branch_for_clock(indicator.hour, indicator.minute)
        if not code:
            return to_traditional(LABEL_UNKNOWN)
        hour = _clock_part(indicator.hour, 23)
        if hour == LATE_ZI_HOUR:
            return to_traditional(LABEL_LATE_ZI)
        if hour == EARLY_ZI_HOUR:
            return to_traditional(LABEL_EARLY_ZI)
        return to_traditional(TIME_BRANCHES[code].label)

    if isinstance(indicator, UnknownTime):
        return to_traditional(LABEL_AUSPICIOUS)
    return to_traditional(LABEL_UNKNOWN)
