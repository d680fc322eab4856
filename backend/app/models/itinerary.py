"""Itinerary models exchanged with clients and consumed by exporters."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ActivityV1(BaseModel):
    """A planned item inside a day."""

    model_config = ConfigDict(from_attributes=True)

    activity_id: UUID | None = Field(default=None, description="Activity identifier")
    day_id: UUID | None = Field(default=None, description="Owning day")
    type: str = Field(default="activity", description="activity|food|lodging|travel|custom")
    title: str = Field(description="Activity title")
    description: str | None = Field(default=None, description="Free-text notes")
    location: str | None = Field(default=None, description="Place name / map query")
    start_time: dt.datetime | None = Field(default=None, description="Local start time")
    end_time: dt.datetime | None = Field(default=None, description="Local end time")
    cost: float | None = Field(default=None, ge=0, description="Cost amount")
    currency: str | None = Field(default=None, description="Cost currency code")
    images: list[str] = Field(default_factory=list, description="Image data URLs")


class DayV1(BaseModel):
    """One calendar date of a trip."""

    model_config = ConfigDict(from_attributes=True)

    day_id: UUID | None = Field(default=None, description="Day identifier")
    date: dt.date = Field(description="Calendar date")
    index: int = Field(description="0-based position within the trip")
    note: str | None = Field(default=None, description="Optional day note")
    activities: list[ActivityV1] = Field(default_factory=list)


class TripV1(BaseModel):
    """Full trip graph: trip, its days and their activities."""

    model_config = ConfigDict(from_attributes=True)

    trip_id: UUID | None = Field(default=None, description="Trip identifier")
    title: str = Field(description="Trip title")
    destination: str | None = Field(default=None, description="Destination")
    start_date: dt.date = Field(description="First day (inclusive)")
    end_date: dt.date = Field(description="Last day (inclusive)")
    budget: float | None = Field(default=None, ge=0, description="Budget amount")
    currency: str = Field(default="EUR", description="Trip currency")
    cover_image: str | None = Field(default=None, description="Cover image data URL")
    days: list[DayV1] = Field(default_factory=list)

    def all_activities(self) -> list[ActivityV1]:
        """Activities of every day, in day order."""
        return [activity for day in self.days for activity in day.activities]


class TripCreate(BaseModel):
    """Fields accepted when creating a trip."""

    title: str = Field(min_length=1, description="Trip title")
    start_date: dt.date = Field(description="First day (inclusive)")
    end_date: dt.date = Field(description="Last day (inclusive)")
    destination: str | None = None
    budget: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, description="Defaults to the configured currency")
    cover_image: str | None = None


class TripUpdate(BaseModel):
    """Partial trip update; only fields that are sent are applied."""

    title: str | None = None
    destination: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    budget: float | None = Field(default=None, ge=0)
    currency: str | None = None
    cover_image: str | None = None


class ActivityCreate(BaseModel):
    """Fields accepted when creating an activity."""

    day_id: UUID = Field(description="Requested day")
    title: str = Field(min_length=1)
    type: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: dt.datetime | None = None
    end_time: dt.datetime | None = None
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = None
    images: list[str] = Field(default_factory=list)


class ActivityUpdate(BaseModel):
    """Partial activity update; only fields that are sent are applied."""

    day_id: UUID | None = None
    title: str | None = None
    type: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: dt.datetime | None = None
    end_time: dt.datetime | None = None
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = None
    images: list[str] | None = None
