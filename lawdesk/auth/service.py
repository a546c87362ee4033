import logging
from typing import Optional, Dict, Any

from lawdesk.config import DASHBOARD_PATH, FREELANCER_DASHBOARD_PATH
from lawdesk.auth.models import (
    AuthResponse,
    SYNC_FAILED_MESSAGE,
    determine_role,
    make_auth_response,
    handle_exception,
)
from .repository import (
    auth_sign_in_password as sign_in_password,
    auth_exchange_code as exchange_code,
    get_user_from_access_token as _repo_get_user_from_token,
    post_user_sync as _repo_post_user_sync,
)

logger = logging.getLogger(__name__)

# --- Cas d'usage Auth exposés ---

def sync_user_to_backend(user: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Miroir de l'utilisateur Supabase dans le backend; retourne la réponse du backend ou None si échec."""
    metadata = user.get("metadata") or user.get("user_metadata") or {}
    name = metadata.get("full_name") or ""
    return _repo_post_user_sync(user.get("id"), user.get("email"), name)

def sign_in(email: str, password: str) -> AuthResponse:
    """Connexion:
    - Délègue à supabase.auth.sign_in_with_password via repository
    - Synchronise ensuite l'utilisateur côté backend (/api/users/sync)
    - Sync en échec: réponse en échec partiel (session Supabase conservée, pas de rollback)
    """
    email = (email or "").strip()
    if not email or not (password or "").strip():
        return AuthResponse(False, error="Please fill in all fields")
    try:
        res = sign_in_password(email, password)
    except Exception as e:
        return handle_exception("sign_in", e)

    result = make_auth_response(res)
    if not result.success:
        return result

    if sync_user_to_backend(result.user or {}) is None:
        return AuthResponse(False, user=result.user, session=result.session, error=SYNC_FAILED_MESSAGE, partial=True)
    return result

def redirect_for_role(role: Optional[str]) -> str:
    return FREELANCER_DASHBOARD_PATH if role == "freelancer" else DASHBOARD_PATH

def handle_auth_callback(code: Optional[str]) -> Dict[str, Any]:
    """
    Retour OAuth / lien email:
    - échange le code contre une session, synchronise l'utilisateur
    - rôle backend "freelancer" -> tableau de bord freelance, sinon tableau de bord client
    - l'échec de synchronisation est journalisé sans bloquer la redirection
    Retour: {"redirect": <chemin>, "access_token": <jwt|None>}
    """
    outcome: Dict[str, Any] = {"redirect": DASHBOARD_PATH, "access_token": None}
    if not code:
        return outcome
    try:
        res = exchange_code(code)
    except Exception:
        logger.exception("auth.service.handle_auth_callback exchange failed")
        return outcome

    result = make_auth_response(res)
    if not result.success:
        return outcome
    outcome["access_token"] = result.access_token

    synced = sync_user_to_backend(result.user or {})
    if synced is None:
        logger.warning("auth.service.handle_auth_callback sync failed user_id=%s", (result.user or {}).get("id"))
        return outcome
    outcome["redirect"] = redirect_for_role(synced.get("role"))
    return outcome

# --- Intégration sécurité ---

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise user issu de supabase.auth.get_user(access_token):
    - Retourne {id, email, metadata, role, token}
    """
    raw = _repo_get_user_from_token(access_token)
    metadata = raw.get("user_metadata") or {}
    return {
        "id": raw.get("id"),
        "email": raw.get("email"),
        "metadata": metadata,
        "role": determine_role(metadata),
        "token": access_token,
    }
