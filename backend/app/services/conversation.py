"""Conversation orchestration - persist the user turn, call the model, persist the reply.

Every request persists either two messages (user + assistant) or, when the
model call fails, only the user message. Nothing is rolled back.
"""

import logging
from dataclasses import dataclass

from app.core.config import settings
from app.core.errors import ValidationError
from app.services.history import build_history
from app.services.images import ImageStore, suffix_for
from app.services.llm.base import BaseLLMProvider
from app.services.store.base import Message, MessageStore, MessageType, NewMessage, Role

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_MESSAGE = "I've uploaded an image for you to analyze."


@dataclass(frozen=True)
class Exchange:
    user_message: Message
    assistant_message: Message


def _require_text(value: str | None, name: str, max_length: int | None = None) -> str:
    if not value:
        raise ValidationError(f"{name} is required")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters")
    return value


class ConversationService:
    def __init__(self, store: MessageStore, llm: BaseLLMProvider, images: ImageStore):
        self.store = store
        self.llm = llm
        self.images = images

    def history(self, session_id: str) -> list[Message]:
        return self.store.list_by_session(session_id)

    def clear(self, session_id: str) -> None:
        self.store.clear_session(session_id)
        logger.info(f"Cleared chat history for session {session_id}")

    async def send_message(self, message: str, session_id: str) -> Exchange:
        _require_text(message, "Message", settings.max_message_length)
        _require_text(session_id, "Session ID")

        user_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.USER,
            content=message,
            message_type=MessageType.TEXT,
        ))

        history = build_history(self.store.list_by_session(session_id), self.images)
        logger.debug(f"Session {session_id}: sending {len(history)} turns to the model")
        reply = await self.llm.generate(history)

        assistant_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.ASSISTANT,
            content=reply,
            message_type=MessageType.TEXT,
        ))
        return Exchange(user_message, assistant_message)

    async def analyze_upload(
        self,
        session_id: str | None,
        image: bytes | None,
        content_type: str | None,
        message: str | None = None,
    ) -> Exchange:
        if not image:
            raise ValidationError("No image file provided")
        _require_text(session_id, "Session ID")
        if content_type not in settings.allowed_image_types:
            raise ValidationError("Only image files are allowed")
        if len(image) > settings.max_upload_bytes:
            raise ValidationError(
                f"Image is larger than the {settings.max_upload_bytes // (1024 * 1024)} MB limit"
            )
        if message and len(message) > settings.max_message_length:
            raise ValidationError(f"Message must be at most {settings.max_message_length} characters")

        prompt = message or None
        reference = self.images.store(image, prefix="upload", suffix=suffix_for(content_type))

        user_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.USER,
            content=message or DEFAULT_UPLOAD_MESSAGE,
            image_url=reference,
            message_type=MessageType.IMAGE,
        ))

        analysis = await self.llm.analyze_image(image, self.images.mime_type_for(reference), prompt)

        assistant_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.ASSISTANT,
            content=analysis,
            message_type=MessageType.TEXT,
        ))
        return Exchange(user_message, assistant_message)

    async def generate_image(self, prompt: str, session_id: str) -> Exchange:
        _require_text(prompt, "Prompt", settings.max_prompt_length)
        _require_text(session_id, "Session ID")

        user_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.USER,
            content=f"Generate an image: {prompt}",
            message_type=MessageType.TEXT,
        ))

        data = await self.llm.generate_image(prompt)
        reference = self.images.store(data, prefix="generated", suffix=".png")

        assistant_message = self.store.create(NewMessage(
            session_id=session_id,
            role=Role.ASSISTANT,
            content=f'I\'ve generated an image based on your prompt: "{prompt}"',
            image_url=reference,
            message_type=MessageType.IMAGE_GENERATION,
        ))
        return Exchange(user_message, assistant_message)
