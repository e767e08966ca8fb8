"""
HTML page routes: login, registration, home and logout.

Form posts answer with redirects; errors are passed back to the form in the
``error`` query parameter.
"""

import html
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.core.context import SessionPrincipal
from app.db.database import get_db
from app.schemas.user import UserCreate
from app.services.auth_service import AuthenticationError, auth_service

logger = logging.getLogger(__name__)

VIEWS_DIR = Path(__file__).resolve().parent.parent / "views"

router = APIRouter()


def _redirect(url: str, error: Optional[str] = None) -> RedirectResponse:
    if error:
        url = f"{url}?error={quote(error)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", include_in_schema=False)
async def index():
    return _redirect("/login")


@router.get("/welcome")
async def welcome():
    return {"status": "success", "message": "Welcome!"}


@router.get("/login", include_in_schema=False)
async def login_page():
    return FileResponse(VIEWS_DIR / "login.html")


@router.post("/login", include_in_schema=False)
async def login_form(
    request: Request,
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        user = auth_service.authenticate_user(db, username or "", password or "")
    except AuthenticationError as e:
        logger.info("Login rejected for %r: %s", username, e.message)
        return _redirect("/login", e.message)

    auth_service.login(request, user)
    return _redirect("/home")


@router.get("/register", include_in_schema=False)
async def register_page():
    return FileResponse(VIEWS_DIR / "register.html")


@router.post("/register", include_in_schema=False)
async def register_form(
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        auth_service.register_user(db, UserCreate(username=username, password=password))
    except HTTPException as e:
        logger.info("Registration rejected for %r: %s", username, e.detail)
        return _redirect("/register", str(e.detail))

    return _redirect("/login")


@router.get("/home", response_class=HTMLResponse, include_in_schema=False)
async def home_page(principal: SessionPrincipal = Depends(auth_service.require_page_user)):
    template = (VIEWS_DIR / "home.html").read_text(encoding="utf-8")
    return template.replace("{{USERNAME}}", html.escape(principal.username))


@router.get("/logout", include_in_schema=False)
async def logout_page(request: Request):
    auth_service.logout(request)
    return _redirect("/login")
