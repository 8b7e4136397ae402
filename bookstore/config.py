"""Configuration management."""
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration, read from the environment on creation."""

    def __init__(self) -> None:
        # Storage strategy: "json" or "sql"
        self.STORE = os.getenv("BOOKSTORE_STORE", "json").strip().lower()
        self.DATA_FILE = Path(os.getenv("BOOKSTORE_DATA_FILE", "data/books.json"))
        self.DATABASE_URL = os.getenv("BOOKSTORE_DATABASE_URL", "sqlite:///data/books.db")

        # Cover directories, primary (served) first
        self.IMAGE_DIRS = os.getenv("BOOKSTORE_IMAGE_DIRS", "static/image")

        self.HOST = os.getenv("BOOKSTORE_HOST", "127.0.0.1")
        # Parsed by main.run() so a bad value only fails when serving.
        self.PORT = os.getenv("BOOKSTORE_PORT", "8000")

        self.LOG_LEVEL = os.getenv("BOOKSTORE_LOG_LEVEL", "INFO").upper()

    @property
    def image_roots(self) -> List[Path]:
        """Split ``IMAGE_DIRS`` on ``os.pathsep`` into asset directories."""
        return [Path(p) for p in self.IMAGE_DIRS.split(os.pathsep) if p.strip()]
