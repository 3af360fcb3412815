"""Durable message store on top of SQLModel."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import StorageError
from app.models.message import MessageRecord, UserRecord
from app.services.store.base import (
    Clock,
    Message,
    MessageStore,
    MessageType,
    NewMessage,
    NewUser,
    Role,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)


def _to_message(record: MessageRecord) -> Message:
    timestamp = record.timestamp
    # SQLite drops tzinfo on the way back
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return Message(
        id=record.id,
        session_id=record.session_id,
        role=Role(record.role),
        content=record.content,
        timestamp=timestamp,
        image_url=record.image_url,
        message_type=MessageType(record.message_type),
    )


def _not_before(now: datetime, last: datetime | None) -> datetime:
    if last is None:
        return now
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    return max(now, last)


def _to_user(record: UserRecord) -> User:
    return User(id=record.id, username=record.username, password=record.password)


class SQLMessageStore(MessageStore):
    def __init__(self, engine: Engine, clock: Clock | None = None):
        self.engine = engine
        self.clock = clock or utcnow

    def create(self, message: NewMessage) -> Message:
        try:
            with Session(self.engine) as session:
                last = session.exec(
                    select(MessageRecord.timestamp)
                    .where(MessageRecord.session_id == message.session_id)
                    .order_by(MessageRecord.seq.desc())  # type: ignore
                ).first()
                record = MessageRecord(
                    id=str(uuid.uuid4()),
                    session_id=message.session_id,
                    role=Role(message.role).value,
                    content=message.content,
                    # Wall clock may step backwards; timestamps within a session may not
                    timestamp=_not_before(self.clock(), last),
                    image_url=message.image_url or None,
                    message_type=MessageType(message.message_type or MessageType.TEXT).value,
                )
                session.add(record)
                session.commit()
                session.refresh(record)
                return _to_message(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to store message for session {message.session_id}")
            raise StorageError(f"Failed to store message: {e}") from e

    def list_by_session(self, session_id: str) -> list[Message]:
        with Session(self.engine) as session:
            records = session.exec(
                select(MessageRecord)
                .where(MessageRecord.session_id == session_id)
                .order_by(MessageRecord.seq)  # type: ignore
            ).all()
            return [_to_message(r) for r in records]

    def clear_session(self, session_id: str) -> None:
        try:
            with Session(self.engine) as session:
                records = session.exec(
                    select(MessageRecord).where(MessageRecord.session_id == session_id)
                ).all()
                for record in records:
                    session.delete(record)
                session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to clear session {session_id}")
            raise StorageError(f"Failed to clear chat history: {e}") from e
        logger.debug(f"Cleared {len(records)} messages from session {session_id}")

    def get_user(self, user_id: str) -> User | None:
        with Session(self.engine) as session:
            record = session.get(UserRecord, user_id)
            return _to_user(record) if record else None

    def get_user_by_username(self, username: str) -> User | None:
        with Session(self.engine) as session:
            record = session.exec(select(UserRecord).where(UserRecord.username == username)).first()
            return _to_user(record) if record else None

    def create_user(self, user: NewUser) -> User:
        record = UserRecord(id=str(uuid.uuid4()), username=user.username, password=user.password)
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return _to_user(record)
