from typing import Dict, Any, Optional
import logging

import httpx

from lawdesk import config
from lawdesk.infra import http_client
from lawdesk.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

# --- Auth (supabase.auth.*) ---

def auth_sign_in_password(email: str, password: str):
    """Wrapper Supabase Auth: connexion par email/mot de passe (GoTrue)."""
    client = get_supabase()
    return client.auth.sign_in_with_password({"email": email, "password": password})

def auth_exchange_code(code: str):
    """Wrapper Supabase Auth: échange du code OAuth/magic link contre une session."""
    client = get_supabase()
    return client.auth.exchange_code_for_session({"auth_code": code})

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l'utilisateur depuis supabase.auth.get_user(access_token)."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}

# --- Backend applicatif (miroir des utilisateurs) ---

def post_user_sync(supabase_id: str, email: Optional[str], name: str) -> Optional[Dict[str, Any]]:
    """
    POST {BASE_URL}/api/users/sync {supabaseId, email, name}.
    Retour: corps JSON (dict, éventuellement vide) si 2xx, None sinon (erreur réseau ou statut).
    """
    url = f"{config.BASE_URL}/api/users/sync"
    payload = {"supabaseId": supabase_id, "email": email, "name": name}
    try:
        resp = http_client.get_http_client().post(url, json=payload)
    except httpx.HTTPError:
        logger.exception("auth.repository.post_user_sync failed user_id=%s", supabase_id)
        return None
    if not resp.is_success:
        logger.warning("auth.repository.post_user_sync status=%s user_id=%s body=%s", resp.status_code, supabase_id, resp.text[:200])
        return None
    data = http_client.read_json(resp)
    return data if isinstance(data, dict) else {}
