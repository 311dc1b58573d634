"""
Endpoint de santé pour vérifier la disponibilité de l'API et de ses dépendances.

Expose `/health` avec le backend de stockage et le moteur calendaire actifs.
"""

from fastapi import APIRouter

from shuwen.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API, du stockage et du moteur calendaire."""
    return {
        "status": "ok",
        "storage": getattr(container, "storage_backend", "unknown"),
        "oracle": getattr(container.oracle, "name", "unknown"),
        "calendar_tz": container.settings.CALENDAR_TZ,
    }
