"""Trip ORM model."""

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Date, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import TimestampMixin

if TYPE_CHECKING:
    from .day import Day


class Trip(TimestampMixin, Base):
    """Trip table - root of the trip/day/activity hierarchy."""

    __tablename__ = "trip"

    trip_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="EUR")
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)  # data URL

    # Relationships
    days: Mapped[list["Day"]] = relationship(
        "Day",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="Day.date",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Trip(trip_id={self.trip_id}, title={self.title!r}, start={self.start_date}, end={self.end_date})>"
