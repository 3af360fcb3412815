from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    app_name: str = "Gemini Chat"
    debug: bool = False

    # Paths
    data_dir: Path = BASE_DIR / "data"
    upload_dir: Path | None = None  # defaults to <data_dir>/uploads
    db_path: Path = BASE_DIR / "chat.db"

    # Storage
    store_backend: str = "memory"  # memory | sqlite

    # LLM
    llm_provider: str = "gemini"
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("CHAT_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_AI_API_KEY"),
    )
    chat_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.0-flash-preview-image-generation"
    llm_timeout: float = 60.0  # seconds, per call

    # Request limits
    max_message_length: int = 2000
    max_prompt_length: int = 1000
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_image_types: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    ]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    @model_validator(mode="after")
    def _default_upload_dir(self) -> "Settings":
        if self.upload_dir is None:
            self.upload_dir = self.data_dir / "uploads"
        return self

    model_config = {
        "env_file": str(BASE_DIR / ".env"),
        "env_prefix": "CHAT_",
        "extra": "ignore",
    }


settings = Settings()
