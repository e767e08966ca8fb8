from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.context import SessionPrincipal
from app.db.database import get_db
from app.schemas.saved_location import (
    LocationSuggestion,
    SavedLocationCreate,
    SavedLocationResponse,
)
from app.services.auth_service import auth_service
from app.services.location_service import location_service

router = APIRouter()


@router.get("/search", response_model=List[LocationSuggestion])
async def search_locations(
    q: Optional[str] = Query(None, description="Text to autocomplete"),
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Suggest known location names containing the query.
    """
    return location_service.search_locations(db, q)


@router.get("/saved", response_model=List[SavedLocationResponse])
async def get_saved_locations(
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the locations saved by the authenticated user.
    """
    return location_service.get_saved_locations(db, principal.id)


@router.post("/saved", response_model=SavedLocationResponse, status_code=201)
async def save_location(
    location_in: SavedLocationCreate,
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Save a location for the authenticated user.
    """
    return location_service.save_location(db, principal.id, location_in.location_text)


@router.delete("/saved/{saved_location_id}", status_code=204)
async def delete_saved_location(
    saved_location_id: int,
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Remove a saved location.
    """
    location_service.delete_saved_location(db, principal.id, saved_location_id)
