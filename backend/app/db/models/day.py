"""Day ORM model."""

import datetime as dt
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Date, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base

if TYPE_CHECKING:
    from .activity import Activity
    from .trip import Trip


class Day(Base):
    """Day table - one calendar date inside a trip's range."""

    __tablename__ = "day"

    day_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    trip_id: Mapped[UUID] = mapped_column(
        ForeignKey("trip.trip_id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False)  # days since trip start
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="days")
    activities: Mapped[list["Activity"]] = relationship(
        "Activity",
        back_populates="day",
        cascade="all, delete-orphan",
        order_by="[Activity.position, Activity.created_at]",
        passive_deletes=True,
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("trip_id", "date", name="uq_day_trip_date"),
        Index("idx_day_trip_index", "trip_id", "index"),
    )

    def __repr__(self) -> str:
        return f"<Day(day_id={self.day_id}, date={self.date}, index={self.index})>"
