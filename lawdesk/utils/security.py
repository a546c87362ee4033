"""
Authentification des requêtes via la session Supabase.
- Jeton: en-tête Authorization: Bearer <jwt> en priorité, sinon cookie sb_access.
- Le jeton est résolu par supabase.auth.get_user (voir auth.service.get_user_from_token).
"""
from fastapi import Request, HTTPException, Depends
from fastapi.responses import Response
from typing import Dict, Any, Optional
from lawdesk.config import COOKIE_SECURE

COOKIE_NAME = "sb_access"

def set_session_cookie(response: Response, access_token: str):
    response.set_cookie(
        key=COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="Lax",
        max_age=60 * 60,
        path="/",
    )

def clear_session_cookie(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")

def extract_token(request: Request) -> str:
    # Hybride: priorité au Bearer, fallback cookie
    token = ""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME) or ""
    return token

def get_current_user(request: Request) -> Dict[str, Any]:
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        from lawdesk.auth.service import get_user_from_token as _svc_get_user_from_token
        user = _svc_get_user_from_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Session expired, please sign in again")
    if not user.get("id"):
        raise HTTPException(status_code=401, detail="Session expired, please sign in again")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """Utilisateur courant ou None (pas de jeton, jeton expiré): pour les routes ouvertes comme la déconnexion."""
    try:
        return get_current_user(request)
    except HTTPException:
        return None

def require_freelancer(user: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    if user.get("role") != "freelancer":
        raise HTTPException(status_code=403, detail="Freelancer access required")
    return user
