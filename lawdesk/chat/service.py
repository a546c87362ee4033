"""
Envoi d'un message de discussion: écho local puis POST {BACKEND_URL}/api/chat/messages.
Point d'intégration provisoire: le contrat du backend de messagerie n'est pas encore figé,
on attend {"message": {...}} ou directement le message confirmé en réponse.
"""
import logging
from typing import Any, Dict

import httpx

from lawdesk import config
from lawdesk.infra import http_client
from .thread import ChatMessage, LocalEchoThread

logger = logging.getLogger(__name__)

class ChatDeliveryError(RuntimeError):
    pass

def send_message(thread: LocalEchoThread, case_id: str, content: str, sender: str = "client") -> ChatMessage:
    """Retourne le message confirmé; en cas d'échec l'écho est retiré et ChatDeliveryError levée."""
    local = thread.echo(content, sender)
    url = f"{config.BACKEND_URL}/api/chat/messages"
    payload = {"caseId": case_id, "content": content, "sender": sender}
    try:
        resp = http_client.get_http_client().post(url, json=payload)
    except httpx.HTTPError as e:
        thread.rollback(local.id)
        logger.exception("chat.service.send_message failed case_id=%s", case_id)
        raise ChatDeliveryError("Failed to send message") from e

    data = http_client.read_json(resp)
    if not resp.is_success:
        thread.rollback(local.id)
        logger.warning("chat.service.send_message status=%s case_id=%s", resp.status_code, case_id)
        message = data.get("message") if isinstance(data, dict) and isinstance(data.get("message"), str) else None
        raise ChatDeliveryError(message or "Failed to send message")

    server_message: Dict[str, Any] = {}
    if isinstance(data, dict):
        server_message = data.get("message") if isinstance(data.get("message"), dict) else data
    return thread.reconcile(local.id, server_message) or local
