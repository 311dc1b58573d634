"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement des settings à partir d'un fichier .env
personnalisé et les bornes de validation du calendrier.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import pytest
from pydantic import ValidationError

EXPECTED_BOUNDARY_HOUR = 22
EXPECTED_LOADING_DELAY_MS = 300


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """
    Teste que les settings lisent correctement les fichiers d'environnement.

    Vérifie que les variables définies dans un fichier .env personnalisé sont
    correctement chargées et appliquées aux settings.
    """
    env = tmp_path / ".env.custom"
    env.write_text(
        "CALENDAR_TZ=Asia/Hong_Kong\nDAY_BOUNDARY_HOUR=22\nLOADING_DELAY_MS=300\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_FILE", str(env))
    for key in ("CALENDAR_TZ", "DAY_BOUNDARY_HOUR", "LOADING_DELAY_MS"):
        monkeypatch.delenv(key, raising=False)

    # Reload settings module to pick up new ENV_FILE
    settings_mod = importlib.import_module("shuwen.core.settings")
    importlib.reload(settings_mod)

    try:
        s = settings_mod.get_settings()
        assert s.CALENDAR_TZ == "Asia/Hong_Kong"
        assert s.DAY_BOUNDARY_HOUR == EXPECTED_BOUNDARY_HOUR
        assert s.LOADING_DELAY_MS == EXPECTED_LOADING_DELAY_MS
    finally:
        monkeypatch.delenv("ENV_FILE")
        importlib.reload(settings_mod)


def test_settings_reject_out_of_range_boundary(monkeypatch) -> None:
    from shuwen.core.settings import Settings

    monkeypatch.setenv("DAY_BOUNDARY_HOUR", "24")
    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize("zone", ["Mars/Base", "", "../etc/passwd"])
def test_settings_reject_unknown_timezone(monkeypatch, zone: str) -> None:
    """Teste qu'un fuseau inconnu est refusé au chargement plutôt qu'à la première requête."""
    from shuwen.core.settings import Settings

    with pytest.raises(ValidationError):
        Settings(CALENDAR_TZ=zone)
