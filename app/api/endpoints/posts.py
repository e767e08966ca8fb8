"""
Posts API Endpoint

The shared feed. Posts carry text and/or an image plus an optional
location label and coordinates.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.context import SessionPrincipal
from app.db.database import get_db
from app.schemas.post import PostResponse
from app.services.auth_service import auth_service
from app.services.post_service import post_service
from app.services.upload_storage import UploadStorage, get_upload_storage

router = APIRouter()


@router.get("", response_model=List[PostResponse])
async def get_feed(
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
) -> Any:
    """
    Get the feed, newest posts first.
    """
    posts = post_service.get_feed(db, limit=limit, offset=offset)
    return [post_service.to_response(post, storage) for post in posts]


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    content: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
) -> Any:
    """
    Create a post from a multipart form.
    """
    post = await post_service.create_post(
        db,
        storage,
        principal.id,
        content=content,
        image=image,
        location=location,
        latitude=latitude,
        longitude=longitude,
    )
    return post_service.to_response(post, storage)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
) -> Any:
    post = post_service.get_post_by_id(db, post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post_service.to_response(post, storage)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    principal: SessionPrincipal = Depends(auth_service.require_user),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
) -> None:
    """
    Delete one of your own posts and its image.
    """
    post_service.delete_post(db, storage, principal.id, post_id)
