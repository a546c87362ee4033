"""
Appels au service documents du backend applicatif ({BACKEND_URL}/api/v1/documents).
Les réponses sont retournées telles quelles (statut + JSON) pour que les vues les relaient.
"""
import logging
from typing import Any, Dict, Tuple
from urllib.parse import quote

import httpx

from lawdesk import config
from lawdesk.infra import http_client

logger = logging.getLogger(__name__)

class DocumentServiceError(RuntimeError):
    """Backend documents injoignable."""

def _documents_url(*parts: str) -> str:
    base = f"{config.BACKEND_URL}/api/v1/documents"
    return "/".join([base] + [quote(p, safe="") for p in parts])

def _send(method: str, url: str, **kwargs: Any) -> Tuple[int, Any]:
    try:
        resp = http_client.get_http_client().request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.exception("documents.backend_client %s %s failed", method, url)
        raise DocumentServiceError("Document service unavailable") from e
    return resp.status_code, http_client.read_json(resp)

def generate_document(payload: Dict[str, Any]) -> Tuple[int, Any]:
    return _send("POST", f"{config.BACKEND_URL}/api/v1/documents/generate", json=payload)

def get_document(document_id: str, user_id: str) -> Tuple[int, Any]:
    return _send("GET", _documents_url(document_id), params={"userId": user_id})

def download_document(document_id: str, user_id: str, fmt: str) -> Tuple[int, Any]:
    """GET .../{id}/download?userId&format -> {"document": {"content", "downloadCount", ...}}"""
    return _send("GET", _documents_url(document_id, "download"), params={"userId": user_id, "format": fmt})

def create_payment(document_id: str, payload: Dict[str, Any]) -> Tuple[int, Any]:
    """POST .../{id}/create-payment: session de paiement pour débloquer le téléchargement."""
    return _send("POST", _documents_url(document_id, "create-payment"), json=payload)

def verify_payment(document_id: str, user_id: str, session_id: str) -> Tuple[int, Any]:
    return _send("POST", _documents_url(document_id, "verify-payment"), json={"userId": user_id, "sessionId": session_id})
