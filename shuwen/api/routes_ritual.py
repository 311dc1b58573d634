"""
Routes du formulaire 疏文: faits du jour, faits d'un lien et sessions d'édition.

Ce module regroupe les endpoints `/ritual`. Les paramètres de requête des
endpoints de lecture sont ceux du lien de partage (`g`, `b`, `bm`, `tm`, `br`, `t`).
"""

from fastapi import APIRouter, HTTPException, Request, Response

from shuwen.api.schemas import (
    FactsResponse,
    FieldEdit,
    SessionResponse,
    ShareRequest,
    ShareResponse,
    SubmitResponse,
)
from shuwen.core.container import container
from shuwen.core.http_constants import HTTP_NO_CONTENT, HTTP_UNPROCESSABLE_ENTITY
from shuwen.domain.entities import TodayFacts
from shuwen.domain.messages import handprint_hint, validate_record
from shuwen.domain.reconciliation import FormSession, initialize, share_params

router = APIRouter(prefix="/ritual", tags=["ritual"])


def _session_response(session_id: str, session: FormSession) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        record=session.record,
        notices=session.notices,
        errors=validate_record(session.record),
        persistent=session.persistent,
    )


@router.get("/today", response_model=TodayFacts)
def get_today():
    """Retourne les faits du jour rituel (bascule à l'heure configurée)."""
    return container.facts_service.today_facts(container.effective_today())


@router.get("/facts", response_model=FactsResponse)
def get_facts(request: Request):
    """
    Calcule les faits à partir des seuls paramètres du lien (sans stockage).

    Retour: `FactsResponse` avec l'enregistrement reconstruit, les faits
    dérivés et les codes de validation.
    """
    record = initialize(request.query_params, None, container.defaults)
    today = container.effective_today()
    return FactsResponse(
        record=record,
        facts=container.facts_service.derive(record, today),
        effective_date=today,
        errors=validate_record(record),
        handprint_hint=handprint_hint(record.gender),
    )


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def open_session(session_id: str, request: Request):
    """Ouvre une session: le lien (s'il porte un champ reconnu) l'emporte sur la copie stockée."""
    session = container.open_session(session_id, request.query_params)
    return _session_response(session_id, session)


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
def edit_field(session_id: str, payload: FieldEdit):
    """Applique une édition de champ et persiste le brouillon."""
    session = container.session(session_id)
    try:
        session.update_field(payload.key, payload.value)
    except KeyError as err:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE_ENTITY, detail=f"Unknown field: {payload.key}"
        ) from err
    return _session_response(session_id, session)


@router.post("/sessions/{session_id}/submit", response_model=SubmitResponse)
def submit_session(session_id: str, payload: ShareRequest):
    """Valide le brouillon et retourne les faits de l'enregistrement validé."""
    session = container.session(session_id)
    params = session.submit(include_sensitive=payload.include_birth)
    if params is None:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE_ENTITY, detail=validate_record(session.record)
        )
    today = container.effective_today()
    return SubmitResponse(
        params=params,
        facts=session.facts(container.facts_service, today),
        effective_date=today,
        loading=session.loading is not None and session.loading.is_loading,
    )


@router.post("/sessions/{session_id}/share", response_model=ShareResponse)
def share_session(session_id: str, payload: ShareRequest):
    """Construit le lien de partage du brouillon (date de naissance en opt-in)."""
    session = container.session(session_id)
    return ShareResponse(
        url=session.share_url(
            include_birth=payload.include_birth, path=container.settings.SHARE_BASE_PATH
        ),
        params=share_params(session.record, payload.include_birth),
    )


@router.delete("/sessions/{session_id}", status_code=HTTP_NO_CONTENT)
def reset_session(session_id: str):
    """Réinitialise la session et supprime sa copie persistée."""
    container.session(session_id).reset()
    return Response(status_code=HTTP_NO_CONTENT)
