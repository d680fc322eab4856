"""File import endpoints for trips and activities."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from backend.app.config import Settings, get_settings
from backend.app.db.session import get_db_session
from backend.app.db.trips import NotFoundError
from backend.app.importers import (
    SUPPORTED_EXTENSIONS,
    ImportParseError,
    ImportSummary,
    UnsupportedFormatError,
    import_activities,
    import_trip,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["imports"])


def _unsupported(e: UnsupportedFormatError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        detail=f"{e}. Supported: {', '.join(SUPPORTED_EXTENSIONS)}",
    )


@router.post("/import", response_model=ImportSummary, status_code=status.HTTP_201_CREATED)
def import_trip_file(
    file: UploadFile = File(...),
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ImportSummary:
    """Create a trip from an uploaded JSON, TXT, CSV, XLSX or PDF file."""
    raw = file.file.read()
    try:
        summary = import_trip(
            session, raw, file.filename, default_currency=settings.default_currency
        )
    except UnsupportedFormatError as e:
        session.rollback()
        raise _unsupported(e) from e
    except ImportParseError as e:
        session.rollback()
        logger.info("trip import rejected", extra={"reason": str(e)})
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    session.commit()
    return summary


@router.post(
    "/{trip_id}/activities/import",
    response_model=ImportSummary,
    status_code=status.HTTP_201_CREATED,
)
def import_activity_file(
    trip_id: UUID,
    file: UploadFile = File(...),
    day_id: UUID | None = Form(None),
    session: Session = Depends(get_db_session),
) -> ImportSummary:
    """Add the activities of an uploaded file to a trip."""
    raw = file.file.read()
    try:
        summary = import_activities(session, trip_id, raw, file.filename, day_id=day_id)
    except NotFoundError as e:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except UnsupportedFormatError as e:
        session.rollback()
        raise _unsupported(e) from e
    except ImportParseError as e:
        session.rollback()
        logger.info("activity import rejected", extra={"reason": str(e)})
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    session.commit()
    return summary
