"""Abstract message store interface and the records it hands out."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    IMAGE_GENERATION = "image_generation"


@dataclass(frozen=True)
class NewMessage:
    session_id: str
    role: Role
    content: str
    image_url: str | None = None
    message_type: MessageType | None = None


@dataclass(frozen=True)
class Message:
    id: str
    session_id: str
    role: Role
    content: str
    timestamp: datetime
    image_url: str | None = None
    message_type: MessageType = MessageType.TEXT


@dataclass(frozen=True)
class NewUser:
    username: str
    password: str


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password: str


class MessageStore(ABC):
    """Session-scoped, append-only message persistence.

    Messages are never updated. The only destructive operation is
    clear_session, which wipes every message of one session.
    """

    @abstractmethod
    def create(self, message: NewMessage) -> Message:
        """Assign id and timestamp, persist, and return the stored message."""
        ...

    @abstractmethod
    def list_by_session(self, session_id: str) -> list[Message]:
        """All messages of a session, oldest first. Empty list for unknown sessions."""
        ...

    @abstractmethod
    def clear_session(self, session_id: str) -> None:
        """Remove every message of a session. Unknown sessions are a no-op."""
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    def create_user(self, user: NewUser) -> User:
        ...
