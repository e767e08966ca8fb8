"""
Request-scoped authentication context.

The session cookie only carries the principal's id and username. Handlers
receive a ``RequestContext`` through dependency injection instead of reading
the session themselves.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import Request

SESSION_USER_KEY = "user"


@dataclass(frozen=True)
class SessionPrincipal:
    """The authenticated user stored in the session."""

    id: int
    username: str

    def to_session(self) -> dict:
        return {"id": self.id, "username": self.username}

    @classmethod
    def from_session(cls, data: Any) -> Optional["SessionPrincipal"]:
        if not isinstance(data, Mapping):
            return None
        try:
            return cls(id=int(data["id"]), username=str(data["username"]))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class RequestContext:
    principal: Optional[SessionPrincipal] = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None


def get_request_context(request: Request) -> RequestContext:
    """Build the context for the current request from its session."""
    principal = SessionPrincipal.from_session(request.session.get(SESSION_USER_KEY))
    return RequestContext(principal=principal)
