"""Google Gemini LLM provider."""

import asyncio
import base64
import logging

from google import genai
from google.genai import types

from app.core.config import settings
from app.core.errors import ExternalServiceError
from app.services.llm.base import BaseLLMProvider, Content, ImagePart, TextPart

logger = logging.getLogger(__name__)

CHAT_FALLBACK = "I apologize, but I couldn't generate a response. Please try again."
ANALYSIS_FALLBACK = "I couldn't analyze this image. Please try again."
DEFAULT_ANALYSIS_PROMPT = (
    "Analyze this image in detail and describe its key elements, context, and any notable aspects."
)


def to_gemini_content(content: Content) -> types.Content:
    parts = []
    for part in content.parts:
        if isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
        elif isinstance(part, ImagePart):
            parts.append(types.Part.from_bytes(data=base64.b64decode(part.data), mime_type=part.mime_type))
    return types.Content(role=content.role, parts=parts)


class GeminiProvider(BaseLLMProvider):
    def __init__(self, client: genai.Client | None = None):
        self._client = client
        self.model = settings.chat_model
        self.image_model = settings.image_model
        self.timeout = settings.llm_timeout

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not settings.gemini_api_key:
                raise ExternalServiceError("Gemini API key not configured")
            self._client = genai.Client(api_key=settings.gemini_api_key)
        return self._client

    async def _generate_content(self, model: str, contents, config=None) -> types.GenerateContentResponse:
        client = self.client
        # Single attempt; the caller decides whether to resubmit
        try:
            return await asyncio.wait_for(
                client.aio.models.generate_content(model=model, contents=contents, config=config),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini call to {model} timed out after {self.timeout}s")
            raise ExternalServiceError("The model took too long to respond") from e
        except Exception as e:
            logger.exception(f"Gemini API error ({model})")
            raise ExternalServiceError("Failed to generate response from Gemini API") from e

    async def generate(self, history: list[Content]) -> str:
        contents = [to_gemini_content(c) for c in history]
        logger.info(f"Gemini chat call: model={self.model} turns={len(contents)}")
        response = await self._generate_content(self.model, contents)
        return response.text or CHAT_FALLBACK

    async def analyze_image(self, image: bytes, mime_type: str, prompt: str | None = None) -> str:
        contents = [
            types.Part.from_bytes(data=image, mime_type=mime_type),
            prompt or DEFAULT_ANALYSIS_PROMPT,
        ]
        logger.info(f"Gemini image analysis: model={self.model} size={len(image)} bytes")
        response = await self._generate_content(self.model, contents)
        return response.text or ANALYSIS_FALLBACK

    async def generate_image(self, prompt: str) -> bytes:
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=prompt)])]
        config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])
        logger.info(f"Gemini image generation: model={self.image_model}")
        response = await self._generate_content(self.image_model, contents, config)

        if not response.candidates:
            raise ExternalServiceError("No image generated")
        content = response.candidates[0].content
        if not content or not content.parts:
            raise ExternalServiceError("No image content generated")

        for part in content.parts:
            if part.inline_data and part.inline_data.data:
                return part.inline_data.data

        raise ExternalServiceError("No image data found in response")
