"""Jour calendaire effectif et validation des dates de naissance.

Dans la tradition rituelle, le jour change à 23h (heure locale) et non à
minuit: tous les faits « du jour » utilisent donc ce jour décalé.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TZ = "Asia/Taipei"
DEFAULT_BOUNDARY_HOUR = 23

_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def effective_today(
    boundary_hour: int = DEFAULT_BOUNDARY_HOUR,
    timezone: str = DEFAULT_TZ,
    clock: Clock | None = None,
) -> date:
    """Retourne le jour calendaire en vigueur dans `timezone`.

    Args:
        boundary_hour: Heure locale (0-23) à partir de laquelle on passe au lendemain.
        timezone: Identifiant IANA du fuseau de référence.
        clock: Source d'instant courant (aware). Défaut: horloge système UTC.

    Returns:
        date: Jour local, avancé d'un jour si l'heure locale >= `boundary_hour`.

    Raises:
        ValueError: si `boundary_hour` est hors de 0-23.
    """
    if not 0 <= boundary_hour <= 23:
        raise ValueError(f"boundary_hour must be within 0-23, got {boundary_hour}")
    now = (clock or _utc_now)()
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local = now.astimezone(ZoneInfo(timezone))
    today = local.date()
    if local.hour >= boundary_hour:
        today += timedelta(days=1)
    return today


def is_known_timezone(name: str) -> bool:
    """Indique si `name` est un fuseau IANA chargeable."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def parse_birth_date(value: str | None, timezone: str = DEFAULT_TZ) -> date | None:
    """Valide une date de naissance `YYYY-MM-DD`.

    La date doit exister dans le calendrier grégorien (pas de 30 février) et
    garder la même identité de jour une fois projetée à midi dans le fuseau.
    Toute valeur invalide renvoie None (jamais d'exception).
    """
    if not value:
        return None
    matched = _ISO_DATE_RE.fullmatch(value)
    if not matched:
        return None
    year, month, day = (int(part) for part in matched.groups())
    try:
        parsed = date(year, month, day)
        tzinfo = ZoneInfo(timezone)
    except (ValueError, ZoneInfoNotFoundError):
        return None
    noon = datetime.combine(parsed, time(12), tzinfo=tzinfo)
    if noon.astimezone(UTC).astimezone(tzinfo).date() != parsed:
        return None
    return parsed
