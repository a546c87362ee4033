# module lawdesk.payment_history.views

"""API de l'historique des paiements (/api/v1/payment-history).
Les filtres à "all" ou vides ne sont pas transmis au backend.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from lawdesk.utils.security import require_user
from . import backend_client

router = APIRouter(prefix="/api/v1/payment-history", tags=["Payment History API"])

def _require_user_id(userId: Optional[str], user: Dict[str, Any]) -> str:
    if not userId:
        raise HTTPException(status_code=400, detail="Missing userId")
    if userId != str(user.get("id")):
        raise HTTPException(status_code=403, detail="Forbidden")
    return userId

def build_filters(**filters: Optional[str]) -> Dict[str, str]:
    return {k: v for k, v in filters.items() if v and v != "all"}

@router.get("")
def list_payments(
    userId: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    serviceType: Optional[str] = None,
    status: Optional[str] = None,
    user: Dict[str, Any] = Depends(require_user),
):
    params: Dict[str, Any] = {"userId": _require_user_id(userId, user), "page": page, "limit": limit}
    params.update(build_filters(startDate=startDate, endDate=endDate, serviceType=serviceType, status=status))
    try:
        code, data = backend_client.list_payments(params)
    except backend_client.PaymentHistoryServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=code, content=data)

@router.get("/stats")
def payment_stats(userId: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    try:
        code, data = backend_client.payment_stats(_require_user_id(userId, user))
    except backend_client.PaymentHistoryServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(status_code=code, content=data)
