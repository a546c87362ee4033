from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Response, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, EmailStr
from starlette.status import HTTP_303_SEE_OTHER

from lawdesk.config import SIGNIN_PATH
from lawdesk.chat.thread import chat_threads
from lawdesk.payments.checkout_state import checkout_stores
from lawdesk.utils.security import require_user, optional_user, set_session_cookie, clear_session_cookie
from lawdesk.utils.rate_limit import optional_rate_limit
from lawdesk.utils.templates import templates
from .service import sign_in as svc_sign_in, handle_auth_callback

# --- API Router (/api/v1/auth) ---

api_router = APIRouter(prefix="/api/v1/auth", tags=["Auth API"])

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

@api_router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def api_login(req: LoginRequest, response: Response):
    """Point d'entrée de connexion (API JSON).
    - Applique un rate limit (5 requêtes par 60 secondes via la dépendance).
    - Délègue la connexion et la synchronisation backend au service (svc_sign_in).
    - Échec partiel (connecté mais non synchronisé): 502 avec le message dédié, sans cookie.
    - En cas de succès, pose le cookie de session (sb_access) et retourne {access_token, token_type, user}.
    """
    result = svc_sign_in(req.email, req.password)
    if not result.success:
        status = 502 if result.partial else 401
        raise HTTPException(status_code=status, detail=result.error or "Invalid email or password")

    if result.access_token:
        set_session_cookie(response, result.access_token)
    return {"access_token": result.access_token, "token_type": "bearer", "user": result.user}

@api_router.get("/me")
def api_me(user: Dict[str, Any] = Depends(require_user)):
    """Retourne l'utilisateur courant (id, email, rôle, metadata) après contrôle de session via require_user."""
    return {"id": user["id"], "email": user["email"], "role": user["role"], "metadata": user["metadata"]}

def _forget_session(user: Optional[Dict[str, Any]]) -> None:
    # Checkout en cours et fils de discussion locaux de l'utilisateur
    if user and user.get("id"):
        checkout_stores.discard(str(user["id"]))
        chat_threads.discard_user(str(user["id"]))

@api_router.post("/logout")
def api_logout(response: Response, user: Optional[Dict[str, Any]] = Depends(optional_user)):
    """Supprime le cookie de session (sb_access) et l'état en mémoire de l'utilisateur connu."""
    _forget_session(user)
    clear_session_cookie(response)
    return {"message": "Signed out"}

# --- Web Router (/auth) ---

web_router = APIRouter(prefix="/auth", tags=["Auth Web"])

def _no_store(resp: Response) -> Response:
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    resp.headers["Expires"] = "0"
    return resp

@web_router.get("/signin", response_class=HTMLResponse)
def signin_page(request: Request, error: Optional[str] = None, message: Optional[str] = None):
    return templates.TemplateResponse(request, "signin.html", {"error": error, "message": message})

@web_router.get("/callback", include_in_schema=False)
def auth_callback(code: Optional[str] = None):
    """Retour du fournisseur d'identité: session posée en cookie puis redirection selon le rôle."""
    outcome = handle_auth_callback(code)
    r = RedirectResponse(url=outcome["redirect"], status_code=HTTP_303_SEE_OTHER)
    if outcome.get("access_token"):
        set_session_cookie(r, outcome["access_token"])
    return _no_store(r)

@web_router.get("/logout", include_in_schema=False)
def auth_logout_get(user: Optional[Dict[str, Any]] = Depends(optional_user)):
    """Déconnexion via route web: efface le cookie et redirige vers la page de connexion."""
    _forget_session(user)
    r = RedirectResponse(url=SIGNIN_PATH, status_code=HTTP_303_SEE_OTHER)
    clear_session_cookie(r)
    return _no_store(r)
