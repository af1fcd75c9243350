"""Pydantic schemas for the Restaurant domain."""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DELIVERY_TIME_RE = re.compile(r"^(\d+)-(\d+)$")


def _check_delivery_time(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    match = DELIVERY_TIME_RE.match(value.replace(" ", ""))
    if not match or int(match.group(1)) >= int(match.group(2)):
        raise ValueError('delivery_time must look like "min-max" with min < max')
    return f"{int(match.group(1))}-{int(match.group(2))}"


class RestaurantBase(BaseModel):
    category: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = None
    website: Optional[str] = None
    contact_phone: Optional[str] = None
    hours: Optional[str] = None
    price_range: Optional[str] = Field(default=None, max_length=10)
    min_price: Optional[int] = Field(default=None, ge=0)
    delivery_time: Optional[str] = None
    criteria: Optional[dict[str, Any]] = None

    @field_validator("delivery_time")
    @classmethod
    def check_delivery_time(cls, value: Optional[str]) -> Optional[str]:
        return _check_delivery_time(value)


class RestaurantCreate(RestaurantBase):
    name: str = Field(min_length=1, max_length=100)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value


class RestaurantUpdate(RestaurantBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class SlugUpdate(BaseModel):
    slug: str


class CriteriaUpdate(BaseModel):
    criteria: dict[str, Any]


class RestaurantRead(RestaurantBase):
    id: int
    name: str
    slug: str
    is_active: bool = True
    avg_rating: float = 0.0
    review_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
