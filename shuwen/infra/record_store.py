"""
Dépôts de persistance pour l'enregistrement de formulaire.

Ce module fournit des implémentations d'un stockage clé -> blob JSON, avec une
version en mémoire (dev/tests) et une version Redis.
"""

from __future__ import annotations

from typing import Protocol

import redis


class RecordStore(Protocol):
    """Port de stockage: un blob texte par clé."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, raw: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryRecordStore:
    """
    Dépôt en mémoire (utilisé pour dev/tests).

    Stocke les blobs dans un dict local, non persistant.
    """

    backend = "memory"

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        """Retourne le blob stocké sous `key`, ou None s'il est absent."""
        return self._db.get(key)

    def set(self, key: str, raw: str) -> None:
        """Enregistre/écrase le blob."""
        self._db[key] = raw

    def delete(self, key: str) -> None:
        """Supprime le blob s'il existe."""
        self._db.pop(key, None)


class RedisRecordStore:
    """Dépôt adossé à Redis (clé: `{prefix}{key}`)."""

    backend = "redis"

    def __init__(self, url: str | None = None, client=None, prefix: str = "shuwen:"):
        """Crée un client Redis à partir de l'URL fournie (ou réutilise `client`)."""
        if client is None:
            if not url:
                raise ValueError("RedisRecordStore requires a url or a client")
            client = redis.Redis.from_url(url, decode_responses=True)
        self.client = client
        self.prefix = prefix

    def get(self, key: str) -> str | None:
        """Charge le blob `{prefix}{key}`, si présent."""
        raw = self.client.get(f"{self.prefix}{key}")
        return raw if raw else None

    def set(self, key: str, raw: str) -> None:
        """Stocke le blob sous `{prefix}{key}`."""
        self.client.set(f"{self.prefix}{key}", raw)

    def delete(self, key: str) -> None:
        """Supprime `{prefix}{key}`."""
        self.client.delete(f"{self.prefix}{key}")
