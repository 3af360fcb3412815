"""Turns stored session messages into the context sent to the model."""

import base64
import logging

from app.core.errors import NotFoundError
from app.services.images import ImageStore
from app.services.llm.base import Content, ImagePart, Part, TextPart
from app.services.store.base import Message, Role

logger = logging.getLogger(__name__)


def _model_role(role: Role) -> str:
    return "model" if role == Role.ASSISTANT else "user"


def build_history(messages: list[Message], images: ImageStore) -> list[Content]:
    """Map messages (already in timestamp order) to model turns.

    Images still on disk are inlined as base64 parts after the text. A
    missing image file drops just that part; the turn is sent as text only.
    """
    history: list[Content] = []
    for msg in messages:
        parts: list[Part] = [TextPart(text=msg.content)]

        if msg.image_url:
            try:
                data = images.resolve(msg.image_url)
            except NotFoundError:
                logger.debug(f"Image {msg.image_url} for message {msg.id} is gone, sending text only")
            else:
                parts.append(ImagePart(
                    data=base64.b64encode(data).decode("ascii"),
                    mime_type=images.mime_type_for(msg.image_url),
                ))

        history.append(Content(role=_model_role(msg.role), parts=parts))
    return history
