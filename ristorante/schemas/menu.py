"""
Ristorante API: Menu Schemas
=============================

What:  Request bodies for admin create/update and the public item shape.

Update semantics (MenuItemUpdate.to_update_values):
    - key absent or null    → column left unchanged
    - key present, non-null → column overwritten
    - allergens is the exception: present at all (even null or []) means
      "replace with the normalized list"; absent means unchanged.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, StrictInt, field_validator

from ristorante.enums import Allergen, normalize_allergens
from ristorante.schemas.base import PG_INT_MAX, PG_INT_MIN, RequestBody

NAME_PRICE_REQUIRED = "name and price_cents required"


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class MenuItemCreate(RequestBody):
    """Body of POST /api/admin/menu. Only name and price_cents are required."""

    required_message: ClassVar[str] = NAME_PRICE_REQUIRED

    name: str
    price_cents: StrictInt = Field(ge=0, le=PG_INT_MAX)
    name_en: Optional[str] = None
    description: str = ""
    description_en: Optional[str] = None
    category: str = ""
    category_en: Optional[str] = None
    position: int = Field(default=0, ge=PG_INT_MIN, le=PG_INT_MAX)
    is_available: bool = True
    image_url: Optional[str] = None
    allergens: List[Allergen] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(NAME_PRICE_REQUIRED)
        return v

    @field_validator("description", "category", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("allergens", mode="before")
    @classmethod
    def clean_allergens(cls, v: Any) -> List[Allergen]:
        return normalize_allergens(v)

    def to_values(self) -> Dict[str, Any]:
        """Column values for the INSERT (enums flattened to strings)."""
        return self.model_dump(mode="json")


class MenuItemUpdate(RequestBody):
    """Body of PUT /api/admin/menu/{id}. Every field is optional."""

    name: Optional[str] = None
    price_cents: Optional[StrictInt] = Field(default=None, ge=0, le=PG_INT_MAX)
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    category: Optional[str] = None
    category_en: Optional[str] = None
    position: Optional[int] = Field(default=None, ge=PG_INT_MIN, le=PG_INT_MAX)
    is_available: Optional[bool] = None
    image_url: Optional[str] = None
    allergens: Optional[List[Allergen]] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("allergens", mode="before")
    @classmethod
    def clean_allergens(cls, v: Any) -> List[Allergen]:
        # Runs only when the key is present; null clears the list
        return normalize_allergens(v)

    def to_update_values(self) -> Dict[str, Any]:
        """
        Columns to SET, honouring presence rather than value.

        Returns an empty dict when the body changes nothing.
        """
        data = self.model_dump(mode="json")
        values = {
            key: data[key]
            for key in self.model_fields_set
            if key != "allergens" and data[key] is not None
        }
        if "allergens" in self.model_fields_set:
            values["allergens"] = data["allergens"] or []
        return values


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MenuItemResponse(BaseModel):
    """One menu item with both language variants."""

    id: int
    name: str
    name_en: Optional[str] = None
    description: str = ""
    description_en: Optional[str] = None
    category: str = ""
    category_en: Optional[str] = None
    price_cents: int
    position: int = 0
    is_available: bool = True
    image_url: Optional[str] = None
    allergens: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class MenuListResponse(BaseModel):
    """GET /api/menu. Ordered by category, then position."""
    items: List[MenuItemResponse]


class MenuItemEnvelope(BaseModel):
    """Admin create/update result."""
    item: MenuItemResponse
