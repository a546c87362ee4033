"""
État de checkout partagé entre l'initiateur (écrivain) et le modal de paiement (lecteurs).
- CheckoutState: instantané immuable.
- CheckoutStore: un seul contrat d'écriture (set/reset), abonnements pour les lecteurs.
- CheckoutStoreRegistry: un store par session navigateur (clé = user_id).
Une nouvelle session de checkout remplace entièrement la précédente (last-write-wins):
un seul checkout est en cours par onglet.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[["CheckoutState"], None]

# module lawdesk.payments.checkout_state
class CheckoutState:
    __slots__ = ("is_modal_open", "client_secret", "session_id", "amount", "title", "submitting")

    def __init__(
        self,
        is_modal_open: bool = False,
        client_secret: str = "",
        session_id: str = "",
        amount: int = 0,
        title: str = "",
        submitting: bool = False,
    ):
        object.__setattr__(self, "is_modal_open", is_modal_open)
        object.__setattr__(self, "client_secret", client_secret)
        object.__setattr__(self, "session_id", session_id)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "title", title)
        object.__setattr__(self, "submitting", submitting)

    def __setattr__(self, name, value):
        raise AttributeError("CheckoutState est immuable, passer par CheckoutStore.set()")

    def replace(self, **changes: Any) -> "CheckoutState":
        values = self.to_dict()
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Champs inconnus: {sorted(unknown)}")
        values.update(changes)
        return CheckoutState(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.__slots__}

    def __eq__(self, other):
        return isinstance(other, CheckoutState) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"CheckoutState(session_id={self.session_id!r}, open={self.is_modal_open}, submitting={self.submitting})"

class CheckoutStore:
    """
    Conteneur d'état explicite.
    - open_session(): écrit une nouvelle session (remplace tout l'état précédent).
    - set(): mise à jour partielle de l'état courant.
    - reset(): point de remise à zéro explicite (fermeture du modal, fin de parcours).
    - subscribe(): notifie chaque lecteur du nouvel instantané; retourne la fonction de désabonnement.
    """

    def __init__(self):
        self._state = CheckoutState()
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> CheckoutState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def open_session(self, *, client_secret: str, session_id: str, amount: int, title: str) -> CheckoutState:
        fresh = CheckoutState(
            is_modal_open=True,
            client_secret=client_secret,
            session_id=session_id,
            amount=amount,
            title=title,
        )
        return self._commit(fresh)

    def set(self, **changes: Any) -> CheckoutState:
        return self._commit(self._state.replace(**changes))

    def reset(self) -> CheckoutState:
        return self._commit(CheckoutState())

    def begin_submit(self) -> bool:
        """Marque une soumission en cours; False si une soumission est déjà en vol."""
        with self._lock:
            if self._state.submitting:
                return False
            self._state = self._state.replace(submitting=True)
            snapshot = self._state
        self._notify(snapshot)
        return True

    def end_submit(self) -> CheckoutState:
        return self.set(submitting=False)

    def _commit(self, new_state: CheckoutState) -> CheckoutState:
        with self._lock:
            self._state = new_state
        self._notify(new_state)
        return new_state

    def _notify(self, snapshot: CheckoutState) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("checkout_state listener failed")

class CheckoutStoreRegistry:
    """Un CheckoutStore par session navigateur (clé: user_id authentifié)."""

    def __init__(self):
        self._stores: Dict[str, CheckoutStore] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CheckoutStore:
        with self._lock:
            store = self._stores.get(key)
            if store is None:
                store = CheckoutStore()
                self._stores[key] = store
            return store

    def peek(self, key: str) -> Optional[CheckoutStore]:
        return self._stores.get(key)

    def discard(self, key: str) -> None:
        with self._lock:
            self._stores.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._stores.clear()

# Registre global du process
checkout_stores = CheckoutStoreRegistry()
