"""Chef profile: one per chef user. rating is the mean of reviews, 0 when there are none."""
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chefbook.models.base import Base
from chefbook.models.review import Review


class ChefProfile(Base):
    __tablename__ = "chef_profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    specialties: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    experience_years: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    # ISO dates (YYYY-MM-DD)
    available_dates: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", lazy="selectin")
    reviews = relationship(
        "Review",
        lazy="selectin",
        order_by=[Review.created_at, Review.id],
        cascade="all, delete-orphan",
    )
