"""
Application principale FastAPI.

Ce module assemble le shell HTTP autour du moteur de faits calendaires.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter le middleware d'identifiant de requête
- Monter les routers (santé et formulaire rituel)
"""

from __future__ import annotations

from fastapi import FastAPI

from shuwen.api.routes_health import router as health_router
from shuwen.api.routes_ritual import router as ritual_router
from shuwen.core.container import container
from shuwen.core.logging import setup_logging
from shuwen.middlewares.request_id import RequestIDMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute le middleware de corrélation des requêtes
    - Publie les routes de santé et du formulaire rituel
    """
    settings = container.settings
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(RequestIDMiddleware)
    app.include_router(health_router)
    app.include_router(ritual_router)
    return app


app = create_app()
