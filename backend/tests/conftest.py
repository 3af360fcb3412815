"""Shared test fixtures for backend tests."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from app.api.deps import get_image_store, get_llm, get_store
from app.core.config import settings
from app.core.errors import ExternalServiceError
from app.services.conversation import ConversationService
from app.services.images import ImageStore
from app.services.llm.base import BaseLLMProvider, Content
from app.services.store.memory import InMemoryMessageStore
from app.services.store.sql import SQLMessageStore

# Smallest valid PNG header; content is never decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeLLM(BaseLLMProvider):
    """Records every call; raises `error` instead of answering when set."""

    def __init__(self):
        self.reply = "Hello from Gemini"
        self.analysis = "A picture of a cat"
        self.image = PNG_BYTES
        self.error: Exception | None = None
        self.histories: list[list[Content]] = []
        self.analyzed: list[tuple[bytes, str, str | None]] = []
        self.prompts: list[str] = []

    async def generate(self, history: list[Content]) -> str:
        self.histories.append(history)
        if self.error:
            raise self.error
        return self.reply

    async def analyze_image(self, image: bytes, mime_type: str, prompt: str | None = None) -> str:
        self.analyzed.append((image, mime_type, prompt))
        if self.error:
            raise self.error
        return self.analysis

    async def generate_image(self, prompt: str) -> bytes:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.image


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def failing_llm(llm):
    llm.error = ExternalServiceError("Failed to generate response from Gemini API")
    return llm


@pytest.fixture
def store():
    return InMemoryMessageStore()


@pytest.fixture
def sql_store():
    # In-memory SQLite with StaticPool so all connections share one DB
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import app.models.message  # noqa: F401 - register models
    SQLModel.metadata.create_all(engine)
    yield SQLMessageStore(engine)
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request):
    """Runs a test against every store backend."""
    if request.param == "memory":
        return InMemoryMessageStore()
    return request.getfixturevalue("sql_store")


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def images(upload_dir):
    return ImageStore(upload_dir)


@pytest.fixture
def service(store, llm, images):
    return ConversationService(store, llm, images)


@pytest.fixture
def client(store, llm, images, upload_dir):
    """FastAPI TestClient with the store, image directory and model swapped for test doubles."""
    with patch.object(settings, "upload_dir", upload_dir):
        from app.main import app

        app.dependency_overrides[get_store] = lambda: store
        app.dependency_overrides[get_image_store] = lambda: images
        app.dependency_overrides[get_llm] = lambda: llm

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()
