"""Abstract LLM provider interface. All providers must implement this."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True)
class TextPart:
    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class ImagePart:
    data: str  # base64-encoded image bytes
    mime_type: str = "image/jpeg"
    kind: Literal["image"] = "image"


Part = Union[TextPart, ImagePart]


@dataclass
class Content:
    role: str  # "user" | "model"
    parts: list[Part] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


class BaseLLMProvider(ABC):
    @abstractmethod
    async def generate(self, history: list[Content]) -> str:
        """Continue the conversation. Returns the reply text."""
        ...

    @abstractmethod
    async def analyze_image(self, image: bytes, mime_type: str, prompt: str | None = None) -> str:
        """Describe an image, optionally steered by a prompt."""
        ...

    @abstractmethod
    async def generate_image(self, prompt: str) -> bytes:
        """Render a prompt into image bytes."""
        ...
