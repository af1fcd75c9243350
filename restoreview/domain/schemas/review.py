"""Pydantic schemas for reviews, photos and votes."""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

SUB_RATINGS = (
    "food_rating",
    "service_rating",
    "atmosphere_rating",
    "price_rating",
    "cleanliness_rating",
    "delivery_speed_rating",
    "delivery_quality_rating",
)


def _clean_comment(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not 1 <= len(value) <= 1000:
        raise ValueError("comment must be 1-1000 characters")
    return value


class ReviewCreate(BaseModel):
    restaurant_id: Optional[int] = None
    restaurant_name: Optional[str] = Field(default=None, max_length=100)
    review_type: Literal["dine_in", "delivery"] = "dine_in"
    rating: int = Field(ge=1, le=5)
    food_rating: int = Field(default=0, ge=0, le=5)
    service_rating: int = Field(default=0, ge=0, le=5)
    atmosphere_rating: int = Field(default=0, ge=0, le=5)
    price_rating: int = Field(default=0, ge=0, le=5)
    cleanliness_rating: int = Field(default=0, ge=0, le=5)
    delivery_speed_rating: int = Field(default=0, ge=0, le=5)
    delivery_quality_rating: int = Field(default=0, ge=0, le=5)
    comment: Annotated[str, AfterValidator(_clean_comment)]

    @model_validator(mode="after")
    def check_restaurant(self):
        if self.restaurant_name is not None:
            self.restaurant_name = self.restaurant_name.strip() or None
        if self.restaurant_id is None and not self.restaurant_name:
            raise ValueError("restaurant_id or restaurant_name is required")
        return self


class ReviewUpdate(BaseModel):
    review_type: Optional[Literal["dine_in", "delivery"]] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    food_rating: Optional[int] = Field(default=None, ge=0, le=5)
    service_rating: Optional[int] = Field(default=None, ge=0, le=5)
    atmosphere_rating: Optional[int] = Field(default=None, ge=0, le=5)
    price_rating: Optional[int] = Field(default=None, ge=0, le=5)
    cleanliness_rating: Optional[int] = Field(default=None, ge=0, le=5)
    delivery_speed_rating: Optional[int] = Field(default=None, ge=0, le=5)
    delivery_quality_rating: Optional[int] = Field(default=None, ge=0, le=5)
    comment: Annotated[Optional[str], AfterValidator(_clean_comment)] = None


class ReviewRead(BaseModel):
    id: int
    user_id: int
    author_name: Optional[str] = None
    restaurant_id: Optional[int] = None
    restaurant_name: str
    review_type: str
    rating: int
    food_rating: Optional[int] = 0
    service_rating: Optional[int] = 0
    atmosphere_rating: Optional[int] = 0
    price_rating: Optional[int] = 0
    cleanliness_rating: Optional[int] = 0
    delivery_speed_rating: Optional[int] = 0
    delivery_quality_rating: Optional[int] = 0
    comment: str
    likes: int = 0
    response: Optional[str] = None
    response_date: Optional[datetime] = None
    manager_name: Optional[str] = None
    photos: list[str] = []
    user_vote: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewPage(BaseModel):
    items: list[ReviewRead]
    total: int
    page: int
    limit: int
    total_pages: int


class VoteRequest(BaseModel):
    # Accepts the camelCase keys the web client sends
    model_config = ConfigDict(populate_by_name=True)

    review_id: int = Field(alias="reviewId")
    vote_type: Literal["up", "down"] = Field(alias="voteType")


class VoteResult(BaseModel):
    recorded: bool
    message: str
    likes: Optional[int] = None
    user_vote: Optional[str] = None


class ResponseRequest(BaseModel):
    response: str

    @field_validator("response")
    @classmethod
    def check_response(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("response text is required")
        return value
