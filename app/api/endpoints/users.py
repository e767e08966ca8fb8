from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.context import SessionPrincipal
from app.db.database import get_db
from app.schemas.user import UserResponse
from app.services.auth_service import auth_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get current user.
    """
    return auth_service.get_current_user(db, principal)
