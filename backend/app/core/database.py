from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.core.config import settings


def create_db_engine(db_path: Path | None = None) -> Engine:
    path = db_path or settings.db_path
    return create_engine(
        f"sqlite:///{path}",
        echo=settings.debug,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    import app.models.message  # noqa: F401 - ensure models are registered
    SQLModel.metadata.create_all(engine)
