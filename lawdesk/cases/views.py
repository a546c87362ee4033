# module lawdesk.cases.views

"""API des affaires côté avocat (/api/v1/freelancer/cases), réservée au rôle freelancer."""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from lawdesk.utils.security import require_freelancer
from . import backend_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/freelancer/cases", tags=["Freelancer Cases API"])

class AnnotationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    annotated_document_url: str = Field(min_length=1, alias="annotatedDocumentUrl")
    notes: Optional[str] = None

def _relay(call, *args: Any) -> JSONResponse:
    try:
        status, data = call(*args)
    except backend_client.CaseServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=status, content=data)

@router.get("")
def my_cases(user: Dict[str, Any] = Depends(require_freelancer)):
    """Affaires assignées à l'avocat connecté."""
    return _relay(backend_client.list_cases, str(user.get("id")))

@router.post("/{case_id}/annotate")
def annotate(case_id: str, body: AnnotationRequest, user: Dict[str, Any] = Depends(require_freelancer)):
    payload: Dict[str, Any] = {
        "annotatedDocumentUrl": body.annotated_document_url,
        "freelancerId": str(user.get("id")),
    }
    if body.notes:
        payload["notes"] = body.notes
    return _relay(backend_client.annotate_case, case_id, payload)

@router.post("/{case_id}/{action}")
def case_action(case_id: str, action: str, user: Dict[str, Any] = Depends(require_freelancer)):
    """accept, decline ou complete; toute autre action -> 400."""
    if action not in backend_client.CASE_ACTIONS:
        raise HTTPException(status_code=400, detail="Invalid action")
    logger.info("cases.views.case_action case=%s action=%s freelancer=%s", case_id, action, user.get("id"))
    return _relay(backend_client.case_action, case_id, action, str(user.get("id")))
