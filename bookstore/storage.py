# bookstore/storage.py
import logging
from pathlib import Path
from typing import Optional

from .catalog.covers import CoverStore
from .catalog.service import BookService
from .catalog.sql_store import SqlBookStore
from .catalog.store import BookStore, JsonBookStore
from .config import Config

logger = logging.getLogger(__name__)

STORE_KINDS = ("json", "sql")


def build_store(config: Config) -> BookStore:
    """Create the one storage strategy this deployment uses."""
    if config.STORE == "json":
        logger.info("Using JSON book store at %s", config.DATA_FILE)
        return JsonBookStore(config.DATA_FILE)
    if config.STORE == "sql":
        if config.DATABASE_URL.startswith("sqlite:///"):
            db_path = config.DATABASE_URL[len("sqlite:///"):]
            if db_path and db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        logger.info("Using SQL book store")
        return SqlBookStore(config.DATABASE_URL)
    raise ValueError(
        f"Unknown BOOKSTORE_STORE {config.STORE!r}; expected one of {', '.join(STORE_KINDS)}"
    )


def build_service(config: Optional[Config] = None) -> BookService:
    config = config or Config()
    roots = config.image_roots
    if not roots:
        raise ValueError("BOOKSTORE_IMAGE_DIRS must name at least one directory")
    return BookService(build_store(config), CoverStore(roots))
