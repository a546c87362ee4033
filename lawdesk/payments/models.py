"""
Types partagés du flux de paiement (checkout → vérification → réconciliation).
Les modèles pydantic reprennent les noms JSON des contrats du collaborateur paiement (camelCase).
"""
from typing import Optional, Union, Literal
from pydantic import BaseModel, ConfigDict, Field

CHECKOUT_FALLBACK_ERROR = "Failed to create checkout session"
VERIFY_FALLBACK_ERROR = "Failed to verify payment session"

ConsultationMethod = Literal["video", "audio", "chat"]

# module lawdesk.payments.models
class CheckoutRequest(BaseModel):
    """Demande d'achat d'une consultation, immuable une fois envoyée."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    consultation_id: str = Field(alias="consultationId")
    lawyer_name: str = Field(alias="lawyerName")
    datetime: str
    method: ConsultationMethod
    # Validé uniquement à l'envoi (coercition type parseInt), le reste est délégué au collaborateur
    fee: Union[int, float, str]
    user_id: str = Field(alias="userId")
    customer_id: Optional[str] = Field(default=None, alias="customerId")

class CheckoutSession(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    client_secret: str = Field(default="", alias="clientSecret")
    url: Optional[str] = None

class PaymentMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    consultation_id: str = Field(alias="consultationId")
    lawyer_name: str = Field(alias="lawyerName")
    datetime: str
    method: str

class VerifiedPayment(BaseModel):
    """Résultat de la vérification; jamais persisté, recalculé à chaque arrivée sur la page succès."""
    model_config = ConfigDict(frozen=True)

    paid: bool
    metadata: Optional[PaymentMetadata] = None

class ConsultationDetails(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    lawyer_name: str = Field(alias="lawyerName")
    datetime: str
    method: str

# --- Erreurs ---

class PaymentsError(RuntimeError):
    """Erreur de base du flux paiement; message destiné à l'utilisateur."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class CheckoutSessionError(PaymentsError):
    pass

class InvalidFeeError(CheckoutSessionError):
    """Montant non convertible en entier: rejeté avant tout appel réseau."""
    def __init__(self, message: str = "Invalid consultation fee"):
        super().__init__(message)

class PaymentVerificationError(PaymentsError):
    pass

class MissingSessionIdError(PaymentsError):
    """Erreur d'entrée: aucun session_id dans l'URL de retour."""
    def __init__(self, message: str = "No payment session found"):
        super().__init__(message)
