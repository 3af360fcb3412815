"""Table models for the durable message store."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class MessageRecord(SQLModel, table=True):
    __tablename__ = "message"

    # Insertion sequence; breaks ties between equal timestamps
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(index=True, unique=True)
    session_id: str = Field(index=True)
    role: str  # "user" | "assistant"
    content: str
    timestamp: datetime
    image_url: Optional[str] = None
    message_type: str = Field(default="text")  # "text" | "image" | "image_generation"


class UserRecord(SQLModel, table=True):
    __tablename__ = "user"

    id: str = Field(primary_key=True)
    username: str = Field(index=True, unique=True)
    password: str
