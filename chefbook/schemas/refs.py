"""
Related records in responses are either a bare reference or an expanded summary.
The "kind" field tells them apart; the caller picks which one it wants (?expand=).
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from chefbook.models.chef import ChefProfile
from chefbook.models.user import User, UserRole


class Reference(BaseModel):
    kind: Literal["reference"] = "reference"
    id: int


class UserSummary(BaseModel):
    kind: Literal["user"] = "user"
    id: int
    name: str
    role: UserRole
    avatar_url: str | None = None


class ChefSummary(BaseModel):
    kind: Literal["chef"] = "chef"
    id: int
    user: UserSummary
    hourly_rate: float
    specialties: list[str]
    rating: float


UserRef = Annotated[Union[Reference, UserSummary], Field(discriminator="kind")]
ChefRef = Annotated[Union[Reference, ChefSummary], Field(discriminator="kind")]


def user_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, name=user.name, role=user.role, avatar_url=user.avatar_url)


def user_ref(user_id: int, user: User | None, expand: bool) -> Reference | UserSummary:
    if expand and user is not None:
        return user_summary(user)
    return Reference(id=user_id)


def chef_ref(chef_id: int, chef: ChefProfile | None, expand: bool) -> Reference | ChefSummary:
    if expand and chef is not None:
        return ChefSummary(
            id=chef.id,
            user=user_summary(chef.user),
            hourly_rate=chef.hourly_rate,
            specialties=list(chef.specialties or []),
            rating=chef.rating,
        )
    return Reference(id=chef_id)
