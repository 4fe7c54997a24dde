"""
Profile aggregate service.

Owns profile create-or-update and the experience/education sequences nested
inside a profile. Entries are inserted at the head of their sequence and are
identified by an id assigned at insertion, never by position.
"""
import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from devconnector.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    missing_fields,
    require_fields,
)
from devconnector.crud import profile as profile_crud
from devconnector.db.models.profile import Profile
from devconnector.schemas.profile import (
    SOCIAL_NETWORKS,
    EducationCreate,
    ExperienceCreate,
    ProfileUpsertRequest,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")

EXPERIENCE_REQUIRED = {
    "title": "Title is required",
    "company": "Company is required",
    "from": "From date is required",
}

EDUCATION_REQUIRED = {
    "school": "School is required",
    "degree": "Degree is required",
    "fieldofstudy": "Field of study is required",
    "from": "From date is required",
}

DATE_FIELDS = {
    "from": "From date is not a valid date",
    "to": "To date is not a valid date",
}

NO_PROFILE_MESSAGE = "There is no profile for this user"

_date_adapter = TypeAdapter(date)


def parse_skills(raw: Optional[str]) -> List[str]:
    """Split a comma-delimited skills string into trimmed, non-empty items."""
    if not raw:
        return []
    return [skill.strip() for skill in raw.split(",") if skill.strip()]


def build_profile_changes(payload: ProfileUpsertRequest) -> Dict[str, Any]:
    """
    Turn an upsert request into a partial update: only fields that were
    supplied with a non-blank value appear in the result.

    Social links are returned under ``social`` as their own partial mapping.

    Raises:
        ValidationError: if status or skills are missing
    """
    skills = parse_skills(payload.skills)
    require_fields(
        {"status": payload.status, "skills": ",".join(skills)},
        {"status": "Status is required", "skills": "Skills is required"},
    )

    changes: Dict[str, Any] = {}
    for field in PROFILE_FIELDS:
        value = getattr(payload, field)
        if value is not None and value.strip():
            changes[field] = value.strip()
    changes["skills"] = skills

    social = {}
    for network in SOCIAL_NETWORKS:
        value = getattr(payload, network)
        if value is not None and value.strip():
            social[network] = value.strip()
    changes["social"] = social
    return changes


def validate_entry(payload: Union[ExperienceCreate, EducationCreate], required: Dict[str, str]) -> Dict[str, Any]:
    """
    Check a new experience/education entry and normalise its dates to ISO
    format. A blank ``to`` date is stored as null.

    Raises:
        ValidationError: listing every missing field and unparseable date together
    """
    entry = payload.model_dump(by_alias=True)
    errors = missing_fields(entry, required)
    reported = {error["field"] for error in errors}

    for field, message in DATE_FIELDS.items():
        value = entry.get(field)
        if value is None or not value.strip():
            entry[field] = None
            continue
        try:
            entry[field] = _date_adapter.validate_python(value.strip()).isoformat()
        except PydanticValidationError:
            if field not in reported:
                errors.append({"field": field, "message": message})

    if errors:
        raise ValidationError(errors)
    return entry


def _entry_document(entry: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-ready copy of a new entry with a freshly assigned id."""
    return {"id": uuid.uuid4().hex, **entry}


class ProfileService:
    """
    Create, read and mutate profiles for an authenticated user.

    Args:
        db: Request-scoped database session. The service flushes; the
            caller's session scope commits or rolls back.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_own_profile(self, user_id: UUID) -> Profile:
        profile = await profile_crud.get_by_user_id(self.db, user_id)
        if not profile:
            raise NotFoundError(NO_PROFILE_MESSAGE, status_code=400)
        return profile

    async def get_profile_by_user_id(self, user_id: str) -> Profile:
        """
        Public lookup of a profile by its owner's id.

        A malformed id is reported the same way as a missing profile.
        """
        try:
            owner_id = UUID(str(user_id))
        except ValueError:
            raise NotFoundError("Profile not found.", status_code=400)

        profile = await profile_crud.get_by_user_id(self.db, owner_id)
        if not profile:
            raise NotFoundError("Profile not found.", status_code=400)
        return profile

    async def list_profiles(self) -> List[Profile]:
        return await profile_crud.get_profiles(self.db)

    async def upsert_profile(self, user_id: UUID, payload: ProfileUpsertRequest) -> Profile:
        """
        Create the user's profile, or merge the supplied fields into it.

        Nested experience/education sequences are never touched here. A
        concurrent first-time create for the same user loses the insert race
        on the unique ``user_id`` constraint and falls back to an update, so
        a user never ends up with two profiles.
        """
        changes = build_profile_changes(payload)

        profile = await profile_crud.get_by_user_id(self.db, user_id)
        if profile is None:
            try:
                profile = await profile_crud.create_profile(self.db, user_id, changes)
                logger.info(f"Profile created for user {user_id}")
                return profile
            except IntegrityError:
                await self.db.rollback()
                logger.warning(f"Concurrent profile create for user {user_id}, merging instead")
                profile = await profile_crud.get_by_user_id(self.db, user_id)
                if profile is None:
                    raise

        social = dict(profile.social or {})
        social.update(changes.pop("social"))
        changes["social"] = social

        profile = await self._save(profile, changes)
        logger.info(f"Profile updated for user {user_id}: {sorted(changes)}")
        return profile

    async def add_experience(self, user_id: UUID, payload: ExperienceCreate) -> Profile:
        entry = validate_entry(payload, EXPERIENCE_REQUIRED)
        return await self._add_entry(user_id, "experience", entry)

    async def add_education(self, user_id: UUID, payload: EducationCreate) -> Profile:
        entry = validate_entry(payload, EDUCATION_REQUIRED)
        return await self._add_entry(user_id, "education", entry)

    async def remove_experience(self, user_id: UUID, entry_id: str) -> Profile:
        return await self._remove_entry(user_id, "experience", entry_id)

    async def remove_education(self, user_id: UUID, entry_id: str) -> Profile:
        return await self._remove_entry(user_id, "education", entry_id)

    async def _add_entry(self, user_id: UUID, collection: str, entry: Dict[str, Any]) -> Profile:
        profile = await self.get_own_profile(user_id)
        document = _entry_document(entry)
        entries = [document] + list(getattr(profile, collection) or [])
        profile = await self._save(profile, {collection: entries})
        logger.info(f"Added {collection} entry {document['id']} for user {user_id}")
        return profile

    async def _remove_entry(self, user_id: UUID, collection: str, entry_id: str) -> Profile:
        """
        Remove one entry by id. An id that is not in the sequence leaves the
        profile unchanged and is not an error.
        """
        profile = await self.get_own_profile(user_id)
        current = list(getattr(profile, collection) or [])
        remaining = [item for item in current if item.get("id") != entry_id]

        if len(remaining) == len(current):
            logger.info(f"No {collection} entry {entry_id} for user {user_id}, nothing removed")
            return profile

        profile = await self._save(profile, {collection: remaining})
        logger.info(f"Removed {collection} entry {entry_id} for user {user_id}")
        return profile

    async def _save(self, profile: Profile, changes: Dict[str, Any]) -> Profile:
        profile_id = profile.id
        try:
            return await profile_crud.update_fields(self.db, profile, changes)
        except StaleDataError:
            await self.db.rollback()
            logger.warning(f"Profile {profile_id} was modified concurrently")
            raise ConflictError()

