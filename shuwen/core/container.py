"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur calendaire, dépôt de
formulaires, horloge) et expose un singleton `container` utilisé par le reste
de l'application.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from datetime import date
from typing import Any

import structlog

from shuwen.core.settings import get_settings
from shuwen.domain.derivation import RitualFactsService
from shuwen.domain.effective_day import effective_today
from shuwen.domain.entities import BirthRecord
from shuwen.domain.reconciliation import FormSession, read_link_params
from shuwen.domain.submission import LoadingIndicator
from shuwen.infra.calendar.base import CalendarOracle
from shuwen.infra.calendar.fake_oracle import FakeCalendarOracle
from shuwen.infra.calendar.lunar_oracle import LunarPythonOracle
from shuwen.infra.clock import SystemClock
from shuwen.infra.record_store import InMemoryRecordStore, RedisRecordStore


def build_oracle(kind: str) -> CalendarOracle:
    """Retourne le moteur calendaire configuré ("lunar" par défaut)."""
    if kind == "fake":
        return FakeCalendarOracle()
    return LunarPythonOracle()


class Container:
    def __init__(self):
        self.settings = get_settings()
        self.oracle = build_oracle(self.settings.CALENDAR_ORACLE)
        self.facts_service = RitualFactsService(self.oracle)
        self.clock = SystemClock()
        self.defaults = BirthRecord(tz=self.settings.CALENDAR_TZ)
        self.timer_factory = threading.Timer
        self.sessions: dict[str, FormSession] = {}
        self._sessions_lock = threading.Lock()

        if self.settings.REDIS_URL:
            try:
                self.record_store = RedisRecordStore(self.settings.REDIS_URL)
                self.storage_backend = "redis"
            except Exception as err:
                if self.settings.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                structlog.get_logger(__name__).warning(
                    "record_store_memory_fallback", error=repr(err)
                )
                self.record_store = InMemoryRecordStore()
                self.storage_backend = "memory-fallback"
        else:
            if self.settings.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            self.record_store = InMemoryRecordStore()
            self.storage_backend = "memory"

    def effective_today(self) -> date:
        """Jour rituel en vigueur selon l'heure de bascule et le fuseau configurés."""
        return effective_today(
            self.settings.DAY_BOUNDARY_HOUR, self.settings.CALENDAR_TZ, self.clock
        )

    def _new_loading(self) -> LoadingIndicator:
        return LoadingIndicator(
            self.settings.LOADING_DELAY_MS / 1000, timer_factory=self.timer_factory
        )

    def open_session(
        self, session_id: str, link_params: Mapping[str, Any] | None = None
    ) -> FormSession:
        """Ouvre (ou rouvre) la session `session_id` depuis le lien ou le stockage.

        Une session passée en mémoire seule est conservée tant que le lien ne
        porte aucun champ décisif. L'indicateur de chargement est celui de la
        session précédente, de sorte qu'une nouvelle soumission annule la fin
        encore en attente.
        """
        with self._sessions_lock:
            live = self.sessions.get(session_id)
            if (
                live is not None
                and not live.persistent
                and not read_link_params(link_params).is_authoritative
            ):
                return live
            session = FormSession(
                self.record_store,
                link_params,
                storage_key=f"{self.settings.RECORD_STORAGE_KEY}:{session_id}",
                defaults=self.defaults,
                loading=live.loading if live is not None else self._new_loading(),
            )
            self.sessions[session_id] = session
        return session

    def session(self, session_id: str) -> FormSession:
        """Retourne la session vivante `session_id`, ouverte au besoin."""
        with self._sessions_lock:
            live = self.sessions.get(session_id)
        if live is not None:
            return live
        return self.open_session(session_id)


container = Container()
