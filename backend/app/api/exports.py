"""Itinerary export and deep-link endpoints."""

from collections.abc import Callable
from typing import Literal
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from backend.app.api.trips import load_trip
from backend.app.config import Settings, get_settings
from backend.app.db.session import get_db_session
from backend.app.export import (
    LinkResult,
    download_filename,
    export_ics,
    export_json,
    export_markdown,
    export_pdf,
    export_text,
    export_xlsx,
    google_calendar_url,
    maps_route_url,
)
from backend.app.models.itinerary import TripV1

router = APIRouter(prefix="/trips", tags=["exports"])

ExportFormat = Literal["json", "markdown", "text", "pdf", "xlsx", "ics"]

MEDIA_TYPES: dict[str, str] = {
    "json": "application/json",
    "markdown": "text/markdown; charset=utf-8",
    "text": "text/plain; charset=utf-8",
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ics": "text/calendar; charset=utf-8",
}


def _renderers(settings: Settings) -> dict[str, Callable[[TripV1], str | bytes]]:
    return {
        "json": export_json,
        "markdown": export_markdown,
        "text": export_text,
        "pdf": lambda trip: export_pdf(trip, brand=settings.pdf_brand),
        "xlsx": export_xlsx,
        "ics": export_ics,
    }


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and a UTF-8 file name."""
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "export"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/{trip_id}/export/{fmt}")
def export_trip(
    trip_id: UUID,
    fmt: ExportFormat,
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Download a trip in one of the supported formats."""
    trip = load_trip(session, trip_id)
    body = _renderers(settings)[fmt](trip)
    if isinstance(body, str):
        body = body.encode("utf-8")
    return Response(
        content=body,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": content_disposition(download_filename(trip.title, fmt))},
    )


@router.get("/{trip_id}/links/maps-route", response_model=LinkResult)
def maps_route(trip_id: UUID, session: Session = Depends(get_db_session)) -> LinkResult:
    """Google Maps directions through every activity location."""
    return maps_route_url(load_trip(session, trip_id))


@router.get("/{trip_id}/links/google-calendar", response_model=LinkResult)
def google_calendar(trip_id: UUID, session: Session = Depends(get_db_session)) -> LinkResult:
    """Google Calendar all-day event template for the trip."""
    return google_calendar_url(load_trip(session, trip_id))
