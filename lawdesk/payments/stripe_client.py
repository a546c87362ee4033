"""
Adaptateur Stripe: centralise la configuration et les appels SDK utilisés par le modal de paiement.
La création et la vérification des sessions passent par l'API paiements du backend (voir initiator/verifier);
seule la confirmation du PaymentIntent lié au client secret est faite ici.
"""
import stripe
from typing import Any, Dict, Optional

# module lawdesk.payments.stripe_client
def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    from lawdesk.config import STRIPE_SECRET_KEY
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def publishable_key() -> str:
    from lawdesk.config import STRIPE_PUBLISHABLE_KEY
    return STRIPE_PUBLISHABLE_KEY

def intent_id_from_client_secret(client_secret: str) -> Optional[str]:
    """
    Extrait l'identifiant du PaymentIntent d'un client secret ("pi_123_secret_abc" -> "pi_123").
    Retourne None si le format n'est pas reconnu.
    """
    if not client_secret or "_secret_" not in client_secret:
        return None
    intent_id = client_secret.split("_secret_", 1)[0]
    return intent_id or None

def confirm_payment_intent(*, client_secret: str, payment_method: str, return_url: str) -> Dict[str, Any]:
    """
    Confirme le PaymentIntent désigné par le client secret.
    - payment_method: identifiant pm_... collecté par le formulaire
    - return_url: URL de la page succès (utilisée si une action 3DS est requise)
    Retour: dict PaymentIntent (incluant "status").
    Lève stripe.StripeError en cas de refus (carte déclinée, etc.).
    """
    require_stripe()
    intent_id = intent_id_from_client_secret(client_secret)
    if not intent_id:
        raise ValueError("client secret invalide")
    intent = stripe.PaymentIntent.confirm(
        intent_id,
        payment_method=payment_method,
        return_url=return_url,
    )
    return {"id": getattr(intent, "id", intent_id), "status": getattr(intent, "status", None)}
