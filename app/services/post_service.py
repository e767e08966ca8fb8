"""
Post service for the feed: creating, listing and deleting posts.
"""

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.models.post import Post
from app.schemas.geo import Coordinates
from app.schemas.post import PostResponse
from app.services.location_service import location_service
from app.services.upload_storage import UploadStorage

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PostService:
    """Service for handling post operations."""

    @staticmethod
    def to_response(post: Post, storage: UploadStorage) -> PostResponse:
        return PostResponse(
            id=post.id,
            user_id=post.user_id,
            username=post.user.username if post.user else None,
            content=post.content,
            image_url=storage.url_for(post.image_filename),
            location=post.location,
            latitude=post.latitude,
            longitude=post.longitude,
            created_at=post.created_at,
        )

    @staticmethod
    def get_feed(db: Session, limit: int, offset: int = 0) -> List[Post]:
        """
        Get posts from all users, newest first.
        """
        return (
            db.query(Post)
            .options(joinedload(Post.user))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_post_by_id(db: Session, post_id: int) -> Optional[Post]:
        return db.query(Post).filter(Post.id == post_id).first()

    @staticmethod
    def parse_coordinates(
        latitude: Optional[float], longitude: Optional[float]
    ) -> Optional[Coordinates]:
        """
        Both values or neither.

        Raises:
            HTTPException: If only one is given or they are out of range
        """
        if latitude is None and longitude is None:
            return None
        if latitude is None or longitude is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Latitude and longitude must be provided together",
            )
        try:
            return Coordinates(latitude=latitude, longitude=longitude)
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid coordinates",
            ) from e

    @staticmethod
    async def read_image(image: UploadFile) -> bytes:
        """
        Check an uploaded image and return its bytes.

        Raises:
            HTTPException: 400 for a disallowed type, 413 when too large
        """
        extension = Path(image.filename or "").suffix.lower()
        if extension not in settings.ALLOWED_IMAGE_EXTENSIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported image type: {extension or 'none'}",
            )
        if image.content_type and not image.content_type.startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is not an image",
            )

        # Read at most one byte past the limit
        data = await image.read(settings.MAX_UPLOAD_SIZE + 1)
        if len(data) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=413,
                detail=f"Image exceeds {settings.MAX_UPLOAD_SIZE} bytes",
            )
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded image is empty",
            )
        return data

    @classmethod
    async def create_post(
        cls,
        db: Session,
        storage: UploadStorage,
        user_id: int,
        content: Optional[str] = None,
        image: Optional[UploadFile] = None,
        location: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Post:
        """
        Create a post, storing the image first.

        Args:
            db: Database session
            storage: Where the image is written
            user_id: Author of the post
            content: Optional text
            image: Optional uploaded image
            location: Optional location label
            latitude: Optional latitude, requires longitude
            longitude: Optional longitude, requires latitude

        Returns:
            Created Post object

        Raises:
            HTTPException: If validation fails
        """
        content = _clean(content)
        location = _clean(location)
        has_image = image is not None and bool(image.filename)

        if not content and not has_image:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Post must include text or an image",
            )

        coordinates = cls.parse_coordinates(latitude, longitude)

        image_filename = None
        if has_image:
            data = await cls.read_image(image)
            image_filename = storage.save(data, image.filename)

        post = Post(
            user_id=user_id,
            content=content,
            image_filename=image_filename,
            location=location,
            latitude=coordinates.latitude if coordinates else None,
            longitude=coordinates.longitude if coordinates else None,
        )
        db.add(post)
        try:
            db.commit()
        except Exception:
            db.rollback()
            storage.delete(image_filename)
            raise
        db.refresh(post)

        if location:
            location_service.remember_location(db, location)

        logger.info("User %s created post %s", user_id, post.id)
        return post

    @classmethod
    def delete_post(
        cls, db: Session, storage: UploadStorage, user_id: int, post_id: int
    ) -> bool:
        """
        Delete a post owned by the user, then its image.

        The image is removed on a best effort basis; a failure is logged and
        does not affect the result.

        Raises:
            HTTPException: If the post is missing or belongs to someone else
        """
        post = cls.get_post_by_id(db, post_id)

        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found",
            )

        if post.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to delete this post",
            )

        image_filename = post.image_filename
        db.delete(post)
        db.commit()

        if image_filename and not storage.delete(image_filename):
            logger.warning("Post %s deleted but image %s was not removed", post_id, image_filename)

        return True


# Create a singleton instance
post_service = PostService()
