"""Activities API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.app.config import Settings, get_settings
from backend.app.db import trips as store
from backend.app.db.session import get_db_session
from backend.app.models.itinerary import ActivityCreate, ActivityUpdate, ActivityV1

router = APIRouter(prefix="/activities", tags=["activities"])


class MoveActivityRequest(BaseModel):
    """Drag-and-drop target."""

    day_id: UUID


@router.post("", response_model=ActivityV1, status_code=status.HTTP_201_CREATED)
def create_activity(
    request: ActivityCreate,
    session: Session = Depends(get_db_session),
) -> ActivityV1:
    """Create an activity.

    With a start time on another date than the requested day, the activity is
    placed on the trip's day for that date when one exists.
    """
    try:
        activity = store.create_activity(session, request)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return ActivityV1.model_validate(activity)


@router.patch("/{activity_id}", response_model=ActivityV1)
def update_activity(
    activity_id: UUID,
    request: ActivityUpdate,
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ActivityV1:
    """Partially update an activity."""
    try:
        activity = store.update_activity(
            session,
            activity_id,
            request,
            reassign_on_update=settings.reassign_on_update,
        )
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return ActivityV1.model_validate(activity)


@router.post("/{activity_id}/move", response_model=ActivityV1)
def move_activity(
    activity_id: UUID,
    request: MoveActivityRequest,
    session: Session = Depends(get_db_session),
) -> ActivityV1:
    """Move an activity to another day."""
    try:
        activity = store.move_activity(session, activity_id, request.day_id)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return ActivityV1.model_validate(activity)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: UUID, session: Session = Depends(get_db_session)) -> Response:
    """Delete an activity."""
    try:
        store.delete_activity(session, activity_id)
    except store.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
