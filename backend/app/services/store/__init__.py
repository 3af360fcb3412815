"""Message store factory."""

from app.core.config import Settings
from app.services.store.base import MessageStore


def create_store(config: Settings) -> MessageStore:
    """Build the store backend named in settings."""
    if config.store_backend == "memory":
        from app.services.store.memory import InMemoryMessageStore
        return InMemoryMessageStore()
    elif config.store_backend == "sqlite":
        from app.core.database import create_db_engine, init_db
        from app.services.store.sql import SQLMessageStore

        engine = create_db_engine(config.db_path)
        init_db(engine)
        return SQLMessageStore(engine)
    else:
        raise ValueError(f"Unknown store backend: {config.store_backend}")
