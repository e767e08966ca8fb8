from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class Location(Base):
    """Catalogue of known location labels used for autocomplete."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __init__(self, name):
        self.name = name


class SavedLocation(Base):
    __tablename__ = "user_saved_locations"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "location_text", name="user_saved_locations_user_location_unique"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_text = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="saved_locations")

    def __init__(self, user_id, location_text):
        self.user_id = user_id
        self.location_text = location_text
