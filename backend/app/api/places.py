"""Place suggestion endpoint for location inputs."""

from fastapi import APIRouter, Depends, Query

from backend.app.adapters.places import PlaceLookup, PlaceSuggestion, get_place_lookup

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/search", response_model=list[PlaceSuggestion])
def search_places(
    q: str = Query("", description="Free-text place query"),
    lookup: PlaceLookup = Depends(get_place_lookup),
) -> list[PlaceSuggestion]:
    """Up to ``places_limit`` suggestions; empty for very short queries."""
    return lookup.search(q)
