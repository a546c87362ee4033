# module lawdesk.assistant.views

"""API de l'assistant IA (/api/v1/ai), relais vers le backend applicatif.
- /chat: question à l'assistant (session créée par le backend si sessionId absent)
- /sessions, /sessions/{id}: historique des conversations
- /upload-documents, /documents/{id}: pièces jointes d'une session
L'identifiant utilisateur envoyé au backend est toujours celui de la session.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from lawdesk.utils.security import require_user
from . import backend_client, uploads

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ai", tags=["Assistant API"])

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    has_documents: bool = Field(default=False, alias="hasDocuments")

def _require_user_id(userId: Optional[str], user: Dict[str, Any]) -> str:
    if not userId:
        raise HTTPException(status_code=400, detail="Missing userId")
    if userId != str(user.get("id")):
        raise HTTPException(status_code=403, detail="Forbidden")
    return userId

def _relay(call, *args: Any) -> JSONResponse:
    try:
        status, data = call(*args)
    except backend_client.AssistantServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.post("/chat")
def chat(body: ChatRequest, user: Dict[str, Any] = Depends(require_user)):
    if not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    payload: Dict[str, Any] = {"message": body.message, "userId": str(user.get("id"))}
    if body.session_id:
        payload["sessionId"] = body.session_id
    if body.has_documents:
        payload["hasDocuments"] = True
    return _relay(backend_client.chat, payload)

@router.get("/models")
def models(user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.list_models)

@router.get("/sessions")
def sessions(userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.list_sessions, _require_user_id(userId, user))

@router.get("/sessions/{session_id}")
def session_messages(session_id: str, userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.get_session, session_id, _require_user_id(userId, user))

@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.delete_session, session_id, _require_user_id(userId, user))

@router.post("/upload-documents")
def upload_documents(
    documents: List[UploadFile] = File(...),
    sessionId: Optional[str] = Form(default=None),
    user: Dict[str, Any] = Depends(require_user),
):
    """
    Envoi multipart de pièces (champ "documents", répété).
    Les fichiers hors PDF, DOCX, DOC ou TXT sont ignorés; 400 si rien ne reste ou si plus de 5 fichiers.
    """
    files = [(f.filename or "document", f.file.read(), f.content_type or "application/octet-stream") for f in documents]
    try:
        selected = uploads.select_files(files)
    except uploads.UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=e.message)
    logger.info("assistant.views.upload_documents user=%s files=%d", user.get("id"), len(selected))
    return _relay(backend_client.upload_documents, selected, str(user.get("id")), sessionId)

@router.get("/documents/{session_id}")
def session_documents(session_id: str, userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.session_documents, session_id, _require_user_id(userId, user))

@router.delete("/documents/{document_id}")
def delete_document(document_id: str, userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    return _relay(backend_client.delete_document, document_id, _require_user_id(userId, user))
