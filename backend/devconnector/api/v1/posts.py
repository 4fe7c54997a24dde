"""
API endpoints for posts and likes.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from devconnector.api.dependencies import get_post_service
from devconnector.auth.dependencies import get_current_user
from devconnector.db.models.user import User
from devconnector.schemas.post import LikeRead, MessageResponse, PostCreate, PostRead
from devconnector.services import PostService


router = APIRouter(
    prefix="/posts",
    tags=["posts"],
)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    """Create a post as the current user."""
    return await service.create_post(current_user.id, payload)


@router.get("", response_model=List[PostRead])
async def list_posts(
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    """Get all posts, most recent first."""
    return await service.list_posts()


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    return await service.get_post(post_id)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    """Delete a post. Only its author may delete it."""
    await service.delete_post(current_user.id, post_id)
    return MessageResponse(message="Post removed.")


@router.put("/like/{post_id}", response_model=List[LikeRead])
async def like_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    return await service.like(current_user.id, post_id)


@router.put("/unlike/{post_id}", response_model=List[LikeRead])
async def unlike_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    return await service.unlike(current_user.id, post_id)
