"""
Machine d'états de la page « payment-success »: IDLE -> VERIFYING -> {CONFIRMED, FAILED}.
- CONFIRMED et FAILED sont terminaux pour run(); retry() relance explicitement une tentative depuis FAILED.
- Chaque tentative porte un numéro de génération: une réponse arrivée pour une génération
  périmée (ou après close()) est ignorée.
- Aucune exception ne sort de run(): toute erreur mène à FAILED avec un lien vers la liste des consultations.
"""
import enum
import logging
from typing import Any, Callable, Dict, Optional

from lawdesk.config import CONSULTATIONS_PATH
from . import reconciler
from .models import ConsultationDetails, MissingSessionIdError, PaymentsError, VerifiedPayment
from .verifier import verify_payment_session

logger = logging.getLogger(__name__)

COULD_NOT_VERIFY = "We could not verify your payment details. Please contact support."
NO_SESSION = "No payment session found"

Verifier = Callable[[str], VerifiedPayment]

# module lawdesk.payments.success_page
class PageState(str, enum.Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    CONFIRMED = "confirmed"
    FAILED = "failed"

class PaymentSuccessPage:
    def __init__(self, verifier: Optional[Verifier] = None):
        self._verifier = verifier or verify_payment_session
        self.state = PageState.IDLE
        self.session_id: Optional[str] = None
        self.details: Optional[ConsultationDetails] = None
        self.error: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self.fallback_url = CONSULTATIONS_PATH
        self._generation = 0
        self._closed = False

    @property
    def is_terminal(self) -> bool:
        return self.state in (PageState.CONFIRMED, PageState.FAILED)

    def begin(self, session_id: Optional[str]) -> Optional[int]:
        """
        Lit le session_id et passe en VERIFYING; retourne le jeton de génération.
        Sans session_id: FAILED + redirection vers la liste, retourne None (aucun appel de vérification).
        """
        if self.state is not PageState.IDLE:
            raise RuntimeError(f"begin() depuis l'état {self.state.value}")
        session_id = (session_id or "").strip()
        self.session_id = session_id or None
        if not session_id:
            self._fail(NO_SESSION)
            self.redirect_to = CONSULTATIONS_PATH
            return None
        self._generation += 1
        self.state = PageState.VERIFYING
        return self._generation

    def complete(self, generation: int, verified: Optional[VerifiedPayment] = None, error: Optional[BaseException] = None) -> bool:
        """
        Applique le résultat d'une vérification. Retourne False si le résultat est périmé et ignoré.
        """
        if self._closed or generation != self._generation or self.state is not PageState.VERIFYING:
            logger.info("payments.success_page stale result ignored generation=%s current=%s", generation, self._generation)
            return False
        if error is not None:
            message = error.message if isinstance(error, PaymentsError) else COULD_NOT_VERIFY
            self._fail(message)
            return True
        details = reconciler.reconcile(verified)
        if details is None:
            self._fail(COULD_NOT_VERIFY)
            return True
        self.details = details
        self.error = None
        self.state = PageState.CONFIRMED
        return True

    def run(self, session_id: Optional[str]) -> "PaymentSuccessPage":
        """Parcours synchrone complet: begin -> vérification -> complete."""
        generation = self.begin(session_id)
        if generation is None:
            return self
        self._verify(generation)
        return self

    def retry(self) -> "PaymentSuccessPage":
        """Nouvelle tentative depuis FAILED (session_id connu uniquement)."""
        if self.state is not PageState.FAILED or not self.session_id:
            return self
        self.state = PageState.IDLE
        self.error = None
        return self.run(self.session_id)

    def close(self) -> None:
        """La page n'est plus active: tout résultat tardif sera ignoré."""
        self._closed = True

    def _verify(self, generation: int) -> None:
        try:
            verified = self._verifier(self.session_id)
        except MissingSessionIdError as e:
            self.complete(generation, error=e)
            self.redirect_to = CONSULTATIONS_PATH
        except PaymentsError as e:
            self.complete(generation, error=e)
        except Exception as e:
            logger.exception("payments.success_page verification crashed session=%s", self.session_id)
            self.complete(generation, error=e)
        else:
            self.complete(generation, verified=verified)

    def _fail(self, message: str) -> None:
        self.details = None
        self.error = message
        self.state = PageState.FAILED

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "state": self.state.value,
            "sessionId": self.session_id,
            "error": self.error,
            "fallbackUrl": self.fallback_url,
            "redirectTo": self.redirect_to,
            "consultation": None,
            "calendar": None,
        }
        if self.details is not None:
            data["consultation"] = self.details.model_dump(by_alias=True)
            data["calendar"] = reconciler.calendar_event(self.details)
        return data
