from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=True)
    image_filename = Column(String, nullable=True)
    location = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="posts")

    def __init__(
        self,
        user_id,
        content=None,
        image_filename=None,
        location=None,
        latitude=None,
        longitude=None,
    ):
        self.user_id = user_id
        self.content = content
        self.image_filename = image_filename
        self.location = location
        self.latitude = latitude
        self.longitude = longitude
