"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shuwen.domain.effective_day import is_known_timezone

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "shuwen-helper"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Calendrier: le changement de jour rituel se fait à 23h (heure locale)
    CALENDAR_TZ: str = "Asia/Taipei"
    DAY_BOUNDARY_HOUR: int = Field(default=23, ge=0, le=23)
    CALENDAR_ORACLE: Literal["lunar", "fake"] = "lunar"

    # Stockage du formulaire
    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False
    RECORD_STORAGE_KEY: str = "lunar-ritual-form"

    # Présentation
    LOADING_DELAY_MS: int = Field(default=900, ge=0)
    SHARE_BASE_PATH: str = "/"

    @field_validator("CALENDAR_TZ")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if not is_known_timezone(value):
            raise ValueError(f"Unknown IANA time zone: {value!r}")
        return value


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
