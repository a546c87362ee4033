# module lawdesk.consultations.views

"""API des consultations et de l'annuaire des avocats.
- /api/consultations/my?userId=: consultations de l'utilisateur (plus récentes d'abord)
- /api/consultations/{id}: lecture, actions (PATCH), retour d'expérience (POST /feedback)
- /api/lawyers: annuaire
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from lawdesk.utils.security import require_user
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Consultations API"])

class ConsultationActionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Chaîne libre: une action inconnue doit donner 400 "Invalid action", pas 422
    action: str
    new_datetime: Optional[str] = Field(default=None, alias="newDatetime")

class FeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None

def _check_owner(user_id: str, user: Dict[str, Any]) -> None:
    if user_id != str(user.get("id")):
        raise HTTPException(status_code=403, detail="Forbidden")

@router.get("/consultations/my")
def my_consultations(userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    """Consultations de l'utilisateur, triées par date planifiée décroissante."""
    if not userId:
        raise HTTPException(status_code=400, detail="userId is required")
    _check_owner(userId, user)
    try:
        return service.list_my_consultations(userId)
    except Exception:
        raise HTTPException(status_code=500, detail="Failed to fetch consultations")

def _load_for(consultation_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    # Propriétaire ou avocat (freelancer) uniquement
    try:
        doc = service.get_consultation(consultation_id)
    except service.ConsultationNotFoundError:
        raise HTTPException(status_code=404, detail="Consultation not found")
    if doc.get("userId") and doc.get("userId") != str(user.get("id")) and user.get("role") != "freelancer":
        raise HTTPException(status_code=403, detail="Forbidden")
    return doc

@router.get("/consultations/{consultation_id}")
def get_consultation(consultation_id: str, user: Dict[str, Any] = Depends(require_user)):
    return _load_for(consultation_id, user)

@router.patch("/consultations/{consultation_id}")
def update_consultation(consultation_id: str, body: ConsultationActionRequest, user: Dict[str, Any] = Depends(require_user)):
    """
    Actions utilisateur:
    - {"action": "reschedule", "newDatetime": "..."} -> {"status": "rescheduled", "newDatetime": "..."}
    - {"action": "cancel"} -> {"status": "cancelled"}
    """
    _load_for(consultation_id, user)
    try:
        return service.apply_action(consultation_id, body.action, body.new_datetime)
    except service.InvalidActionError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except service.ConsultationNotFoundError:
        raise HTTPException(status_code=404, detail="Consultation not found")

@router.post("/consultations/{consultation_id}/feedback", status_code=201)
def post_feedback(consultation_id: str, body: FeedbackRequest, user: Dict[str, Any] = Depends(require_user)):
    _check_owner(body.user_id, user)
    try:
        return service.submit_feedback(consultation_id, body.user_id, body.rating, body.comment)
    except service.ConsultationNotFoundError:
        raise HTTPException(status_code=404, detail="Consultation not found")

@router.get("/lawyers")
def list_lawyers():
    try:
        return service.list_lawyers()
    except Exception:
        logger.exception("consultations.views.list_lawyers failed")
        raise HTTPException(status_code=500, detail="Failed to fetch lawyers")
