"""In-process message store. Contents live as long as the process does."""

import logging
import threading
import uuid
from datetime import datetime

from app.services.store.base import (
    Clock,
    Message,
    MessageStore,
    MessageType,
    NewMessage,
    NewUser,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)


class InMemoryMessageStore(MessageStore):
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or utcnow
        self._lock = threading.Lock()
        # dicts keep insertion order, which is also creation order
        self._messages: dict[str, Message] = {}
        self._users: dict[str, User] = {}
        self._last_timestamp: datetime | None = None

    def _now(self) -> datetime:
        now = self.clock()
        # Wall clock may step backwards; timestamps may not
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    def create(self, message: NewMessage) -> Message:
        with self._lock:
            stored = Message(
                id=str(uuid.uuid4()),
                session_id=message.session_id,
                role=message.role,
                content=message.content,
                timestamp=self._now(),
                image_url=message.image_url or None,
                message_type=message.message_type or MessageType.TEXT,
            )
            self._messages[stored.id] = stored
        logger.debug(f"Stored {stored.role.value} message {stored.id} in session {stored.session_id}")
        return stored

    def list_by_session(self, session_id: str) -> list[Message]:
        with self._lock:
            messages = [m for m in self._messages.values() if m.session_id == session_id]
        # sorted() is stable, so equal timestamps keep creation order
        return sorted(messages, key=lambda m: m.timestamp)

    def clear_session(self, session_id: str) -> None:
        with self._lock:
            doomed = [mid for mid, m in self._messages.items() if m.session_id == session_id]
            for mid in doomed:
                del self._messages[mid]
        logger.debug(f"Cleared {len(doomed)} messages from session {session_id}")

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, user: NewUser) -> User:
        created = User(id=str(uuid.uuid4()), username=user.username, password=user.password)
        with self._lock:
            self._users[created.id] = created
        return created
