"""Indicateur de chargement temporisé et annulable pour les soumissions.

Il ne s'agit pas d'un calcul asynchrone: la soumission est synchrone, seul
l'état « en cours » est maintenu un court instant. Une nouvelle soumission
annule la fin programmée de la précédente, de sorte qu'une seule fin soit
signalée par soumission.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

DEFAULT_DELAY_SECONDS = 0.9


class LoadingIndicator:
    """Transition temporisée « chargement -> terminé ».

    Args:
        delay_seconds: Durée de l'état de chargement.
        timer_factory: Fabrique de minuteur compatible `threading.Timer`
            (`factory(interval, function, args=...)` avec `start()`/`cancel()`).
        on_complete: Rappel exécuté à la fin de chaque soumission non annulée.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        timer_factory: Callable[..., object] = threading.Timer,
        on_complete: Callable[[], None] | None = None,
    ):
        self.delay_seconds = delay_seconds
        self._timer_factory = timer_factory
        self.on_complete = on_complete
        self.is_loading = False
        self.completions = 0
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def start(self) -> None:
        """Démarre une soumission en annulant la fin encore en attente."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self.is_loading = True
            timer = self._timer_factory(
                self.delay_seconds, self._complete, args=(self._generation,)
            )
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        """Annule la fin programmée et sort de l'état de chargement."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self.is_loading = False

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _complete(self, generation: int) -> None:
        with self._lock:
            # minuteur d'une soumission remplacée ou annulée
            if generation != self._generation:
                return
            self._timer = None
            self.is_loading = False
            self.completions += 1
            callback = self.on_complete
        if callback is not None:
            callback()
