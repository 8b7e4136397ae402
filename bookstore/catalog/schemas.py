"""
Pydantic schema definitions for the catalog module.

``Book`` is both the stored record and the API response body. Python
attributes use snake_case while the JSON names follow the front-end
(``originalPrice`` and ``desc``); ``to_json`` produces the wire form,
leaving out any optional field that has no value.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A single catalogue entry.

    ``id`` is ``None`` only for a record that has not been inserted yet;
    the store assigns it and it never changes afterwards. ``cover`` is a
    public path such as ``/image/book_3_1700000000000.png``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    title: str
    author: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = Field(default=None, alias="originalPrice")
    # Always within [0, 5] once normalised by the service.
    rating: Optional[float] = None
    description: Optional[str] = Field(default=None, alias="desc")
    keywords: List[str] = Field(default_factory=list)
    cover: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
