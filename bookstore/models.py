# bookstore/models.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class BookForm(BaseModel):
    """Raw form fields of a create/update request, all still text."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    price: Optional[str] = None
    original_price: Optional[str] = Field(default=None, alias="originalPrice")
    rating: Optional[str] = None
    desc: Optional[str] = None
    keywords: Optional[str] = Field(
        default=None,
        description="Mots-clés séparés par virgules, points-virgules ou espaces.",
    )


class CoverFile(BaseModel):
    """An uploaded cover: its bytes and the filename the client sent."""

    content: bytes = b""
    filename: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.content
