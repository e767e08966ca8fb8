"""
Location service: the autocomplete catalogue and per-user saved locations.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.location import Location, SavedLocation

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class LocationService:
    """Service for handling location operations."""

    @staticmethod
    def search_locations(db: Session, query: Optional[str], limit: Optional[int] = None) -> List[Location]:
        """
        Autocomplete over known location names.

        Args:
            db: Database session
            query: Text typed so far; blank returns no suggestions
            limit: Maximum number of suggestions

        Returns:
            Matching Location objects ordered by name
        """
        text = (query or "").strip()
        if not text:
            return []

        pattern = f"%{_escape_like(text)}%"
        return (
            db.query(Location)
            .filter(Location.name.ilike(pattern, escape="\\"))
            .order_by(Location.name)
            .limit(limit or settings.LOCATION_SEARCH_LIMIT)
            .all()
        )

    @staticmethod
    def remember_location(db: Session, name: str) -> Optional[Location]:
        """
        Add a name to the catalogue if it is not there yet.
        """
        name = name.strip()
        if not name:
            return None

        existing = db.query(Location).filter(Location.name == name).first()
        if existing:
            return existing

        location = Location(name=name)
        db.add(location)
        try:
            db.commit()
        except IntegrityError:
            # Inserted by a concurrent request
            db.rollback()
            return db.query(Location).filter(Location.name == name).first()
        db.refresh(location)
        return location

    @staticmethod
    def get_saved_locations(db: Session, user_id: int) -> List[SavedLocation]:
        return (
            db.query(SavedLocation)
            .filter(SavedLocation.user_id == user_id)
            .order_by(SavedLocation.id)
            .all()
        )

    @classmethod
    def save_location(cls, db: Session, user_id: int, location_text: Optional[str]) -> SavedLocation:
        """
        Save a location for a user.

        Args:
            db: Database session
            user_id: Owner of the saved location
            location_text: Location label

        Returns:
            Created SavedLocation object

        Raises:
            HTTPException: 400 if blank, 409 if the user already saved it
        """
        text = (location_text or "").strip()
        if not text:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Location cannot be empty",
            )

        existing = (
            db.query(SavedLocation)
            .filter(SavedLocation.user_id == user_id, SavedLocation.location_text == text)
            .first()
        )
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Location already saved",
            )

        saved = SavedLocation(user_id=user_id, location_text=text)
        db.add(saved)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Location already saved",
            ) from e
        db.refresh(saved)

        cls.remember_location(db, text)
        logger.info("User %s saved location %r", user_id, text)
        return saved

    @staticmethod
    def delete_saved_location(db: Session, user_id: int, saved_location_id: int) -> bool:
        """
        Delete a saved location owned by the user.

        Raises:
            HTTPException: If not found or owned by another user
        """
        saved = db.query(SavedLocation).filter(SavedLocation.id == saved_location_id).first()

        if not saved:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Saved location not found",
            )

        if saved.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to delete this location",
            )

        db.delete(saved)
        db.commit()

        return True


# Create a singleton instance
location_service = LocationService()
