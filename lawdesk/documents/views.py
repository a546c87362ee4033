# module lawdesk.documents.views

"""API documents (/api/v1/documents).
- /user: liste des documents générés de l'utilisateur (MongoDB)
- /generate et /{id}: relais vers le backend applicatif
- /{id}/create-payment, /{id}/verify-payment: paiement qui débloque le téléchargement
- /{id}/export: téléchargement converti en PDF, DOCX ou TXT
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from lawdesk.utils.security import require_user
from . import backend_client, exporter, repository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/documents", tags=["Documents API"])

class PaymentVerification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")

def _require_user_id(userId: Optional[str], user: Dict[str, Any]) -> str:
    if not userId:
        raise HTTPException(status_code=400, detail="Missing userId")
    if userId != str(user.get("id")):
        raise HTTPException(status_code=403, detail="Forbidden")
    return userId

@router.get("/user")
def user_documents(userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    user_id = _require_user_id(userId, user)
    try:
        documents = repository.list_user_documents(user_id)
    except Exception:
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"success": True, "documents": documents}

@router.post("/generate")
def generate(payload: Dict[str, Any] = Body(...), user: Dict[str, Any] = Depends(require_user)):
    """Relais de la génération; userId forcé à l'utilisateur authentifié."""
    payload = {**payload, "userId": str(user.get("id"))}
    try:
        status, data = backend_client.generate_document(payload)
    except backend_client.DocumentServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.post("/{document_id}/create-payment")
def create_payment(document_id: str, payload: Dict[str, Any] = Body(default={}), user: Dict[str, Any] = Depends(require_user)):
    """Ouvre le paiement d'un document (403 "Payment required" à l'export tant qu'il n'est pas payé)."""
    payload = {**payload, "userId": str(user.get("id"))}
    try:
        status, data = backend_client.create_payment(document_id, payload)
    except backend_client.DocumentServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.post("/{document_id}/verify-payment")
def verify_payment(document_id: str, body: PaymentVerification, user: Dict[str, Any] = Depends(require_user)):
    if not body.session_id.strip():
        raise HTTPException(status_code=400, detail="Missing sessionId")
    try:
        status, data = backend_client.verify_payment(document_id, str(user.get("id")), body.session_id)
    except backend_client.DocumentServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.get("/{document_id}")
def get_document(document_id: str, userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    user_id = _require_user_id(userId, user)
    try:
        status, data = backend_client.get_document(document_id, user_id)
    except backend_client.DocumentServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.get("/{document_id}/export")
def export_document(
    document_id: str,
    userId: Optional[str] = None,
    format: str = "pdf",
    user: Dict[str, Any] = Depends(require_user),
):
    """
    Télécharge le contenu auprès du backend puis le convertit.
    - 403 amont (document non payé) -> 403 "Payment required"
    - autre échec amont -> 502 "Failed to download document"
    """
    user_id = _require_user_id(userId, user)
    fmt = (format or "").lower()
    if fmt not in exporter.FORMATS:
        raise HTTPException(status_code=400, detail="Unsupported format")

    try:
        status, data = backend_client.download_document(document_id, user_id, fmt)
    except backend_client.DocumentServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if status == 403:
        raise HTTPException(status_code=403, detail="Payment required")
    if not (200 <= status < 300):
        logger.warning("documents.views.export_document upstream status=%s id=%s", status, document_id)
        raise HTTPException(status_code=502, detail="Failed to download document")

    document = (data or {}).get("document") if isinstance(data, dict) else None
    if not isinstance(document, dict) or not isinstance(document.get("content"), str):
        raise HTTPException(status_code=502, detail="Failed to download document")

    content = document["content"]
    created_at = document.get("createdAt") or document.get("created_at") or datetime.now(timezone.utc)
    body = exporter.export_document(content, fmt)
    file_name = exporter.generate_file_name(content, fmt, created_at)
    headers = {"Content-Disposition": f'attachment; filename="{file_name}"'}
    if document.get("downloadCount") is not None:
        headers["X-Download-Count"] = str(document["downloadCount"])
    return Response(content=body, media_type=exporter.MEDIA_TYPES[fmt], headers=headers)
