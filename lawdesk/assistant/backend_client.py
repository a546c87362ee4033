"""
Appels au service assistant IA du backend applicatif ({BACKEND_URL}/api/v1/ai).
Même contrat que documents.backend_client: (statut, JSON) relayés tels quels.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from lawdesk import config
from lawdesk.infra import http_client

logger = logging.getLogger(__name__)

class AssistantServiceError(RuntimeError):
    """Backend assistant injoignable."""

def _ai_url(*parts: str) -> str:
    base = f"{config.BACKEND_URL}/api/v1/ai"
    return "/".join([base] + [quote(p, safe="") for p in parts])

def _send(method: str, url: str, **kwargs: Any) -> Tuple[int, Any]:
    try:
        resp = http_client.get_http_client().request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.exception("assistant.backend_client %s %s failed", method, url)
        raise AssistantServiceError("Assistant service unavailable") from e
    return resp.status_code, http_client.read_json(resp)

def chat(payload: Dict[str, Any]) -> Tuple[int, Any]:
    """POST /chat {sessionId?, message, userId, hasDocuments?} -> {response, sessionId, tokensUsed, modelUsed}"""
    return _send("POST", _ai_url("chat"), json=payload)

def list_sessions(user_id: str) -> Tuple[int, Any]:
    return _send("GET", _ai_url("sessions"), params={"userId": user_id})

def get_session(session_id: str, user_id: str) -> Tuple[int, Any]:
    return _send("GET", _ai_url("sessions", session_id), params={"userId": user_id})

def delete_session(session_id: str, user_id: str) -> Tuple[int, Any]:
    return _send("DELETE", _ai_url("sessions", session_id), params={"userId": user_id})

def list_models() -> Tuple[int, Any]:
    return _send("GET", _ai_url("models"))

def upload_documents(files: List[Tuple[str, bytes, str]], user_id: str, session_id: Optional[str] = None) -> Tuple[int, Any]:
    """Multipart: champs userId/sessionId, un champ "documents" par fichier (nom, octets, type MIME)."""
    data = {"userId": user_id}
    if session_id:
        data["sessionId"] = session_id
    parts = [("documents", (name, content, content_type)) for name, content, content_type in files]
    return _send("POST", _ai_url("upload-documents"), data=data, files=parts)

def session_documents(session_id: str, user_id: str) -> Tuple[int, Any]:
    return _send("GET", _ai_url("documents", session_id), params={"userId": user_id})

def delete_document(document_id: str, user_id: str) -> Tuple[int, Any]:
    return _send("DELETE", _ai_url("documents", document_id), params={"userId": user_id})
