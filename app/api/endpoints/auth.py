from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from app.services.auth_service import AuthenticationError, auth_service

router = APIRouter()


@router.post("/register", response_model=AuthResponse)
async def register_user(
    user_in: UserCreate, db: Session = Depends(get_db)
) -> Any:
    """
    Register a new user. The user still has to log in afterwards.
    """
    user = auth_service.register_user(db, user_in)

    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: Request,
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> Any:
    """
    Check credentials and start a session.
    """
    try:
        user = auth_service.authenticate_user(
            db, credentials.username or "", credentials.password or ""
        )
    except AuthenticationError as e:
        raise HTTPException(
            status_code=(
                status.HTTP_400_BAD_REQUEST
                if e.missing_credentials
                else status.HTTP_401_UNAUTHORIZED
            ),
            detail=e.message,
        ) from e

    auth_service.login(request, user)

    return AuthResponse(message="Logged in", user=UserResponse.model_validate(user))


@router.post("/logout", response_model=AuthResponse)
async def logout(request: Request) -> Any:
    """
    End the current session.
    """
    auth_service.logout(request)
    return AuthResponse(message="Logged out")
