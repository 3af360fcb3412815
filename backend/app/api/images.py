"""Image upload/analysis, image generation, and serving of stored images."""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field

from app.api.chat import serialize_exchange
from app.api.deps import get_conversation_service, get_image_store
from app.core.config import settings
from app.services.conversation import ConversationService
from app.services.images import ImageStore

router = APIRouter()
logger = logging.getLogger(__name__)


class ImageGenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(min_length=1, max_length=settings.max_prompt_length)
    session_id: str = Field(alias="sessionId", min_length=1)


@router.post("/upload-image")
async def upload_image(
    image: UploadFile | None = File(None),
    session_id: str | None = Form(None, alias="sessionId"),
    message: str | None = Form(None),
    service: ConversationService = Depends(get_conversation_service),
):
    data = None
    content_type = None
    if image is not None:
        # One byte past the limit is enough to know it's too big
        data = await image.read(settings.max_upload_bytes + 1)
        content_type = image.content_type
        logger.debug(f"Upload {image.filename}: {content_type}, {len(data)} bytes")

    exchange = await service.analyze_upload(session_id, data, content_type, message)
    return serialize_exchange(exchange, service.images)


@router.post("/generate-image")
async def generate_image(
    body: ImageGenerationRequest,
    service: ConversationService = Depends(get_conversation_service),
):
    exchange = await service.generate_image(body.prompt, body.session_id)
    return serialize_exchange(exchange, service.images)


@router.get("/images/{filename}")
async def get_image(filename: str, images: ImageStore = Depends(get_image_store)):
    path = images.path_for(filename)
    return FileResponse(path, media_type=images.mime_type_for(filename))
