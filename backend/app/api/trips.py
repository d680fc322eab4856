"""Trips API endpoints: trip CRUD, day notes and budget status."""

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.app.adapters.fx import CurrencyService, get_currency_service
from backend.app.config import Settings, get_settings
from backend.app.db import trips as store
from backend.app.db.session import get_db_session
from backend.app.models.itinerary import DayV1, TripCreate, TripUpdate, TripV1
from backend.app.verify.budget import BudgetStatus, verify_budget

router = APIRouter(prefix="/trips", tags=["trips"])


class TripSummary(BaseModel):
    """Trip list entry."""

    trip_id: UUID
    title: str
    destination: str | None = None
    start_date: dt.date
    end_date: dt.date
    budget: float | None = None
    currency: str
    cover_image: str | None = None
    day_count: int = Field(description="Number of days in the trip")


class DayNoteRequest(BaseModel):
    """Request to set or clear a day note."""

    note: str | None = None


def load_trip(session: Session, trip_id: UUID) -> TripV1:
    """Trip snapshot or 404."""
    try:
        return store.to_trip_v1(store.get_trip(session, trip_id))
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=list[TripSummary])
def list_trips(session: Session = Depends(get_db_session)) -> list[TripSummary]:
    """List all trips ordered by start date."""
    return [
        TripSummary(
            trip_id=trip.trip_id,
            title=trip.title,
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            budget=trip.budget,
            currency=trip.currency,
            cover_image=trip.cover_image,
            day_count=day_count,
        )
        for trip, day_count in store.list_trips(session)
    ]


@router.post("", response_model=TripV1, status_code=status.HTTP_201_CREATED)
def create_trip(
    request: TripCreate,
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> TripV1:
    """Create a trip; one day is generated per date of its range."""
    trip = store.create_trip(session, request, default_currency=settings.default_currency)
    session.commit()
    return store.to_trip_v1(trip)


@router.get("/{trip_id}", response_model=TripV1)
def get_trip(trip_id: UUID, session: Session = Depends(get_db_session)) -> TripV1:
    """Get a trip with its days (by date) and their activities."""
    return load_trip(session, trip_id)


@router.patch("/{trip_id}", response_model=TripV1)
def update_trip(
    trip_id: UUID,
    request: TripUpdate,
    session: Session = Depends(get_db_session),
) -> TripV1:
    """Partially update a trip; changed dates reconcile its days."""
    try:
        trip = store.update_trip(session, trip_id, request)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return store.to_trip_v1(trip)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(trip_id: UUID, session: Session = Depends(get_db_session)) -> Response:
    """Delete a trip with all its days and activities."""
    try:
        store.delete_trip(session, trip_id)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{trip_id}/days/{day_id}", response_model=DayV1)
def update_day(
    trip_id: UUID,
    day_id: UUID,
    request: DayNoteRequest,
    session: Session = Depends(get_db_session),
) -> DayV1:
    """Set or clear a day's note."""
    try:
        day = store.update_day_note(session, trip_id, day_id, request.note)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return DayV1.model_validate(day)


@router.get("/{trip_id}/budget", response_model=BudgetStatus)
def get_budget(
    trip_id: UUID,
    session: Session = Depends(get_db_session),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> BudgetStatus:
    """Spent vs. budget in the trip's currency."""
    return verify_budget(load_trip(session, trip_id), currency_service)
