# module lawdesk.users.views

"""API utilisateur: fin d'onboarding (centres d'intérêt juridiques)."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from lawdesk.utils.security import require_user
from .service import complete_onboarding

api_router = APIRouter(prefix="/api/v1", tags=["Users API"])

@api_router.post("/onboarding")
def onboarding(payload: Dict[str, Any] = Body(...), user: Dict[str, Any] = Depends(require_user)):
    """
    Corps: {"legalInterests": [str, ...]}
    - legalInterests absent ou non-liste -> 400
    - échec d'écriture user_profiles -> 500
    """
    legal_interests = payload.get("legalInterests")
    if not legal_interests or not isinstance(legal_interests, list):
        raise HTTPException(status_code=400, detail="Legal interests are required and must be an array")
    data = complete_onboarding(user, [str(i) for i in legal_interests])
    if data is None:
        raise HTTPException(status_code=500, detail="Failed to save onboarding data")
    return {"success": True, "message": "Onboarding completed successfully", "data": data}
