"""Pydantic schemas for chef profiles and reviews."""
from datetime import date, datetime

from pydantic import BaseModel, Field

from chefbook.models.chef import ChefProfile
from chefbook.schemas.refs import UserSummary, user_summary


class ChefProfileUpsert(BaseModel):
    """Request body for POST /chefs/profile."""
    specialties: list[str] = Field(default_factory=list)
    experience_years: int = Field(..., ge=0)
    hourly_rate: float = Field(..., gt=0)
    bio: str | None = None
    available_dates: list[date] = Field(default_factory=list)


class ReviewCreate(BaseModel):
    """Request body for POST /chefs/{id}/reviews."""
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    rating: int
    comment: str
    created_at: datetime

    class Config:
        from_attributes = True


class ChefProfileResponse(BaseModel):
    id: int
    user: UserSummary
    specialties: list[str]
    experience_years: int
    hourly_rate: float
    bio: str | None = None
    available_dates: list[date]
    rating: float
    reviews: list[ReviewResponse]


def chef_to_response(chef: ChefProfile) -> ChefProfileResponse:
    return ChefProfileResponse(
        id=chef.id,
        user=user_summary(chef.user),
        specialties=list(chef.specialties or []),
        experience_years=chef.experience_years,
        hourly_rate=chef.hourly_rate,
        bio=chef.bio,
        available_dates=[date.fromisoformat(d) for d in chef.available_dates or []],
        rating=chef.rating,
        reviews=[ReviewResponse.model_validate(r) for r in chef.reviews],
    )
