"""REST API for chat messages and per-session history."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_conversation_service
from app.core.config import settings
from app.services.conversation import ConversationService, Exchange
from app.services.images import ImageStore
from app.services.store.base import Message

router = APIRouter()


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1, max_length=settings.max_message_length)
    session_id: str = Field(alias="sessionId", min_length=1)


def serialize_message(m: Message, images: ImageStore) -> dict:
    return {
        "id": m.id,
        "sessionId": m.session_id,
        "role": m.role.value,
        "content": m.content,
        "timestamp": m.timestamp.isoformat(),
        "imageUrl": images.url_for(m.image_url) if m.image_url else None,
        "messageType": m.message_type.value,
    }


def serialize_exchange(exchange: Exchange, images: ImageStore) -> dict:
    return {
        "userMessage": serialize_message(exchange.user_message, images),
        "assistantMessage": serialize_message(exchange.assistant_message, images),
    }


@router.post("/chat")
async def send_message(body: ChatRequest, service: ConversationService = Depends(get_conversation_service)):
    exchange = await service.send_message(body.message, body.session_id)
    return serialize_exchange(exchange, service.images)


@router.get("/chat/{session_id}")
async def get_history(session_id: str, service: ConversationService = Depends(get_conversation_service)):
    return [serialize_message(m, service.images) for m in service.history(session_id)]


@router.delete("/chat/{session_id}")
async def clear_history(session_id: str, service: ConversationService = Depends(get_conversation_service)):
    service.clear(session_id)
    return {"message": "Chat history cleared"}
