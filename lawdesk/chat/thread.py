"""
Fil de discussion d'une affaire avec écho local.
Un message envoyé est d'abord affiché en attente (pending), puis:
- remplacé par le message confirmé par le backend (reconcile)
- ou retiré si l'envoi échoue (rollback)
Aucune réponse simulée de l'avocat: seul le backend de messagerie fait foi.
"""
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

SENDERS = ("client", "lawyer")

class ChatMessage:
    __slots__ = ("id", "content", "sender", "timestamp", "pending")

    def __init__(self, id: str, content: str, sender: str, timestamp: str, pending: bool = False):
        self.id = id
        self.content = content
        self.sender = sender
        self.timestamp = timestamp
        self.pending = pending

    @classmethod
    def from_server(cls, data: Dict[str, Any], fallback: "ChatMessage") -> "ChatMessage":
        return cls(
            id=str(data.get("id") or data.get("_id") or fallback.id),
            content=data.get("content") if isinstance(data.get("content"), str) else fallback.content,
            sender=data.get("sender") if data.get("sender") in SENDERS else fallback.sender,
            timestamp=data.get("timestamp") or fallback.timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "sender": self.sender,
            "timestamp": self.timestamp,
            "pending": self.pending,
        }

class LocalEchoThread:
    def __init__(self, case_id: str):
        self.case_id = case_id
        self._messages: List[ChatMessage] = []
        self._lock = threading.Lock()

    @property
    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def echo(self, content: str, sender: str = "client") -> ChatMessage:
        """Ajoute le message en attente et retourne-le (son id sert de clé locale)."""
        if sender not in SENDERS:
            raise ValueError(f"Unknown sender: {sender}")
        message = ChatMessage(
            id=f"local-{uuid.uuid4().hex}",
            content=content,
            sender=sender,
            timestamp=datetime.now(timezone.utc).isoformat(),
            pending=True,
        )
        with self._lock:
            self._messages.append(message)
        return message

    def reconcile(self, local_id: str, server_message: Dict[str, Any]) -> Optional[ChatMessage]:
        """Remplace le message en attente par la version confirmée; None si local_id est inconnu."""
        with self._lock:
            index = self._index_of(local_id)
            if index is None:
                return None
            confirmed = ChatMessage.from_server(server_message or {}, self._messages[index])
            self._messages[index] = confirmed
            return confirmed

    def rollback(self, local_id: str) -> bool:
        with self._lock:
            index = self._index_of(local_id)
            if index is None:
                return False
            del self._messages[index]
            return True

    def _index_of(self, local_id: str) -> Optional[int]:
        for i, m in enumerate(self._messages):
            if m.id == local_id and m.pending:
                return i
        return None

class ThreadRegistry:
    """Un fil par (utilisateur, affaire), créé à la demande."""

    def __init__(self):
        self._threads: Dict[Tuple[str, str], LocalEchoThread] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, case_id: str) -> LocalEchoThread:
        key = (user_id, case_id)
        with self._lock:
            thread = self._threads.get(key)
            if thread is None:
                thread = LocalEchoThread(case_id)
                self._threads[key] = thread
            return thread

    def discard_user(self, user_id: str) -> None:
        with self._lock:
            for key in [k for k in self._threads if k[0] == user_id]:
                del self._threads[key]

    def clear(self) -> None:
        with self._lock:
            self._threads.clear()

chat_threads = ThreadRegistry()
