from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserCredentials(BaseModel):
    # Optional so that null values reach the service and get the
    # "Invalid input" response instead of a schema error.
    username: Optional[str] = None
    password: Optional[str] = None


class UserCreate(UserCredentials):
    pass


class UserLogin(UserCredentials):
    pass


class UserResponse(BaseModel):
    id: int
    username: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    status: str = "success"
    message: str
    user: Optional[UserResponse] = None
