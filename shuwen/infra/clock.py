"""Sources d'instant courant injectables (horloge système ou figée)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class SystemClock:
    """Horloge système (instant UTC aware)."""

    def __call__(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Horloge figée pour les tests; `advance` déplace l'instant."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires an aware datetime")
        self.instant = instant

    def __call__(self) -> datetime:
        return self.instant

    def advance(self, **delta) -> None:
        self.instant = self.instant + timedelta(**delta)
