"""
User service for handling user-related business logic.
"""
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import INVALID_INPUT_MESSAGE
from app.models.user import User
from app.schemas.user import UserCreate


class UserService:
    """Service for handling user operations."""

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """
        Get a user by username.

        Args:
            db: Database session
            username: Username to search for

        Returns:
            User object if found, None otherwise
        """
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def validate_new_user(user_in: UserCreate) -> None:
        """
        Reject missing or too short credentials. Runs before any query.

        Raises:
            HTTPException: 400 with the validation message
        """
        username = user_in.username.strip() if isinstance(user_in.username, str) else ""
        if not username or not user_in.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=INVALID_INPUT_MESSAGE,
            )

        if len(username) < 3:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username must be at least 3 characters",
            )

        if len(user_in.password) < 4:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Password must be at least 4 characters",
            )

    @classmethod
    def create_user(cls, db: Session, user_in: UserCreate, hashed_password: str) -> User:
        """
        Create a new user in the database.

        Args:
            db: Database session
            user_in: User creation data, already checked by ``validate_new_user``
            hashed_password: Pre-hashed password for the user

        Returns:
            Created User object

        Raises:
            HTTPException: If the username is taken
        """
        username = user_in.username.strip()

        if cls.get_user_by_username(db, username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this username already exists",
            )

        user = User(username=username, hashed_password=hashed_password)
        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this username already exists",
            ) from e
        db.refresh(user)

        return user


# Create a singleton instance
user_service = UserService()
