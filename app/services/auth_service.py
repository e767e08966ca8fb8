"""
Authentication service for password handling, session login and the auth guards.
"""

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.context import (
    SESSION_USER_KEY,
    RequestContext,
    SessionPrincipal,
    get_request_context,
)
from app.core.errors import LoginRequiredError
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = "Username and password are required"
UNKNOWN_USER_MESSAGE = "User not found. Please register first."
WRONG_PASSWORD_MESSAGE = "Incorrect password. Please try again."


class AuthenticationError(Exception):
    """Raised when credentials are missing or do not match a user."""

    def __init__(self, message: str, missing_credentials: bool = False):
        super().__init__(message)
        self.message = message
        self.missing_credentials = missing_credentials


class AuthService:
    """Service for handling authentication operations."""

    @staticmethod
    def get_password_hash(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password to hash

        Returns:
            Hashed password string
        """
        return hash_password(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)

    @classmethod
    def register_user(cls, db: Session, user_in: UserCreate) -> User:
        """
        Validate, hash and store a new user. Nothing is written when the
        input is rejected.

        Raises:
            HTTPException: 400 for invalid input or a taken username
        """
        user_service.validate_new_user(user_in)
        hashed_password = cls.get_password_hash(user_in.password)
        user = user_service.create_user(db, user_in, hashed_password)
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return user

    @classmethod
    def authenticate_user(cls, db: Session, username: str, password: str) -> User:
        """
        Authenticate a user by username and password.

        Args:
            db: Database session
            username: Username to authenticate
            password: Plain text password to verify

        Returns:
            The matching User

        Raises:
            AuthenticationError: If credentials are missing or wrong
        """
        if not username or not password:
            raise AuthenticationError(MISSING_CREDENTIALS_MESSAGE, missing_credentials=True)

        user = user_service.get_user_by_username(db, username.strip())
        if not user:
            raise AuthenticationError(UNKNOWN_USER_MESSAGE)
        if not cls.verify_password(password, str(user.hashed_password)):
            raise AuthenticationError(WRONG_PASSWORD_MESSAGE)
        return user

    @staticmethod
    def login(request: Request, user: User) -> SessionPrincipal:
        """Store the user in the session."""
        principal = SessionPrincipal(id=int(user.id), username=str(user.username))
        request.session[SESSION_USER_KEY] = principal.to_session()
        logger.info("User %s logged in", principal.username)
        return principal

    @staticmethod
    def logout(request: Request) -> None:
        request.session.clear()

    @staticmethod
    def require_user(
        context: RequestContext = Depends(get_request_context),
    ) -> SessionPrincipal:
        """
        Guard for API routes.

        Raises:
            HTTPException: 401 if nobody is logged in
        """
        if context.principal is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        return context.principal

    @staticmethod
    def require_page_user(
        context: RequestContext = Depends(get_request_context),
    ) -> SessionPrincipal:
        """
        Guard for HTML pages.

        Raises:
            LoginRequiredError: Handled by redirecting to the login page
        """
        if context.principal is None:
            raise LoginRequiredError()
        return context.principal

    @staticmethod
    def get_current_user(
        db: Session,
        principal: SessionPrincipal,
    ) -> User:
        """
        Load the row for the logged in user.

        Raises:
            HTTPException: If the user no longer exists
        """
        user = user_service.get_user_by_id(db, principal.id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user


# Create a singleton instance
auth_service = AuthService()
