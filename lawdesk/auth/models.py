from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

SYNC_FAILED_MESSAGE = "Sign in succeeded but failed to save user in database. Please contact support."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

def determine_role(metadata: Optional[Dict[str, Any]]) -> str:
    """Rôle applicatif: "freelancer" si déclaré dans user_metadata, sinon "user"."""
    role_lower = str((metadata or {}).get("role", "")).lower()
    if role_lower == "freelancer":
        return "freelancer"
    return "user"

class AuthResponse:
    """
    Résultat d'une opération d'authentification.
    partial=True: la connexion Supabase a réussi mais une étape suivante (sync backend) a échoué.
    """
    def __init__(
        self,
        success: bool,
        user: Optional[Dict[str, Any]] = None,
        session: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        partial: bool = False,
    ):
        self.success = success
        self.user = user
        self.session = session
        self.error = error
        self.partial = partial

    @property
    def access_token(self):
        return (self.session or {}).get("access_token")

    @property
    def refresh_token(self):
        return (self.session or {}).get("refresh_token")

def build_user_dict(user) -> Dict[str, Any]:
    user_dict = {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None),
        "metadata": getattr(user, "user_metadata", None) or {},
    }
    user_dict["role"] = determine_role(user_dict["metadata"])
    return user_dict

def build_session_dict(session) -> Dict[str, Any]:
    return {
        "access_token": getattr(session, "access_token", None),
        "refresh_token": getattr(session, "refresh_token", None),
    }

def make_auth_response(res, fallback_error: str = "Invalid email or password") -> AuthResponse:
    sess = getattr(res, "session", None)
    user = getattr(res, "user", None)
    if not sess or not getattr(sess, "access_token", None) or not user:
        return AuthResponse(False, error=fallback_error)
    return AuthResponse(True, user=build_user_dict(user), session=build_session_dict(sess))

def handle_exception(action: str, e: Exception) -> AuthResponse:
    logger.exception("auth.%s failed", action)
    # Les erreurs GoTrue portent un message lisible (ex. "Invalid login credentials")
    message = getattr(e, "message", None)
    return AuthResponse(False, error=message if isinstance(message, str) and message else UNEXPECTED_ERROR_MESSAGE)
