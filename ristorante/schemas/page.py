"""
Ristorante API: Page Content Schemas
=====================================
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PageResponse(BaseModel):
    """
    Content of one site page.

    An unknown slug is a valid empty page:
        {"slug": "about", "data": {}, "updated_at": null}
    """

    slug: str
    data: Dict[str, Any] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def empty(cls, slug: str) -> "PageResponse":
        return cls(slug=slug, data={}, updated_at=None)
