"""FastAPI dependency providers. Instances live on app.state, built in the lifespan."""

from fastapi import Depends, Request

from app.services.conversation import ConversationService
from app.services.images import ImageStore
from app.services.llm import get_llm_provider
from app.services.llm.base import BaseLLMProvider
from app.services.store.base import MessageStore


def get_store(request: Request) -> MessageStore:
    return request.app.state.store


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.images


def get_llm(request: Request) -> BaseLLMProvider:
    llm = getattr(request.app.state, "llm", None)
    if llm is None:
        llm = request.app.state.llm = get_llm_provider()
    return llm


def get_conversation_service(
    store: MessageStore = Depends(get_store),
    llm: BaseLLMProvider = Depends(get_llm),
    images: ImageStore = Depends(get_image_store),
) -> ConversationService:
    return ConversationService(store, llm, images)
