from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from lawdesk.utils.security import require_user
from .service import ChatDeliveryError, send_message
from .thread import chat_threads

router = APIRouter(prefix="/api/v1/chat", tags=["Chat API"])

class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

def _sender_for(user: Dict[str, Any]) -> str:
    return "lawyer" if user.get("role") == "freelancer" else "client"

@router.get("/{case_id}/messages")
def list_messages(case_id: str, user: Dict[str, Any] = Depends(require_user)):
    thread = chat_threads.get(str(user.get("id")), case_id)
    return {"caseId": case_id, "messages": [m.to_dict() for m in thread.messages]}

@router.post("/{case_id}/messages", status_code=201)
def post_message(case_id: str, body: SendMessageRequest, user: Dict[str, Any] = Depends(require_user)):
    """Écho local puis envoi au backend; 502 si l'envoi échoue (l'écho est retiré)."""
    content = body.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message is empty")
    thread = chat_threads.get(str(user.get("id")), case_id)
    try:
        message = send_message(thread, case_id, content, _sender_for(user))
    except ChatDeliveryError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return message.to_dict()
