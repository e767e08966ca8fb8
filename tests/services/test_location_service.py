"""
Unit tests for the location service.
"""

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.location import Location
from app.services.location_service import location_service


def test_remember_location_is_idempotent(db: Session):
    first = location_service.remember_location(db, " Estes Park, CO ")
    second = location_service.remember_location(db, "Estes Park, CO")

    assert first.id == second.id
    assert db.query(Location).count() == 1


def test_remember_blank_location(db: Session):
    assert location_service.remember_location(db, "   ") is None
    assert db.query(Location).count() == 0


def test_search_respects_limit(db: Session):
    for index in range(5):
        db.add(Location(name=f"Springfield {index}"))
    db.commit()

    results = location_service.search_locations(db, "spring", limit=3)

    assert [location.name for location in results] == [
        "Springfield 0",
        "Springfield 1",
        "Springfield 2",
    ]


def test_save_location_requires_text(db: Session, test_user):
    with pytest.raises(HTTPException) as exc_info:
        location_service.save_location(db, test_user.id, None)

    assert exc_info.value.status_code == 400
