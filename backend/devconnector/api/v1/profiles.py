"""
API endpoints for profile-related operations.
"""
from typing import Any, List

from fastapi import APIRouter, Depends

from devconnector.api.dependencies import get_account_service, get_profile_service
from devconnector.auth.dependencies import get_current_user
from devconnector.db.models.user import User
from devconnector.github import GitHubClient, get_github_client
from devconnector.schemas.post import MessageResponse
from devconnector.schemas.profile import (
    EducationCreate,
    ExperienceCreate,
    ProfileRead,
    ProfileUpsertRequest,
)
from devconnector.services import AccountService, ProfileService


router = APIRouter(
    prefix="/profile",
    tags=["profile"],
)


@router.get("/me", response_model=ProfileRead)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the profile of the current user."""
    return await service.get_own_profile(current_user.id)


@router.post("", response_model=ProfileRead)
async def upsert_profile(
    payload: ProfileUpsertRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """
    Create or update the current user's profile.

    Only the supplied fields are written; experience and education are kept.
    """
    return await service.upsert_profile(current_user.id, payload)


@router.get("", response_model=List[ProfileRead])
async def list_profiles(service: ProfileService = Depends(get_profile_service)):
    """Get all profiles."""
    return await service.list_profiles()


@router.get("/user/{user_id}", response_model=ProfileRead)
async def get_profile_by_user(
    user_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    """Get a profile by its owner's user id."""
    return await service.get_profile_by_user_id(user_id)


@router.delete("", response_model=MessageResponse)
async def delete_account(
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service)
):
    """Delete the current user's profile and account. Their posts are kept."""
    user_id = current_user.id
    await service.delete_account(user_id)
    return MessageResponse(message="User deleted")


@router.put("/experience", response_model=ProfileRead)
async def add_experience(
    payload: ExperienceCreate,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return await service.add_experience(current_user.id, payload)


@router.delete("/experience/{exp_id}", response_model=ProfileRead)
async def remove_experience(
    exp_id: str,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return await service.remove_experience(current_user.id, exp_id)


@router.put("/education", response_model=ProfileRead)
async def add_education(
    payload: EducationCreate,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return await service.add_education(current_user.id, payload)


@router.delete("/education/{edu_id}", response_model=ProfileRead)
async def remove_education(
    edu_id: str,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return await service.remove_education(current_user.id, edu_id)


@router.get("/github/{username}")
async def get_github_repos(
    username: str,
    github: GitHubClient = Depends(get_github_client)
) -> Any:
    """
    Get the latest GitHub repositories of ``username``, passed through as
    GitHub returned them.
    """
    return await github.get_repositories(username)
