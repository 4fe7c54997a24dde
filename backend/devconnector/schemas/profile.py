"""
Pydantic schemas for profiles.
"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

SOCIAL_NETWORKS = ("youtube", "facebook", "twitter", "instagram", "linkedin")


class ProfileUpsertRequest(BaseModel):
    """
    Body of a create-or-update profile request.

    Every field is optional at the schema level; ``status`` and ``skills`` are
    checked by the profile service so that all violations are reported together.
    """
    company: Optional[str] = Field(None, description="Current company")
    website: Optional[str] = Field(None, description="Personal website")
    location: Optional[str] = Field(None, description="Location")
    bio: Optional[str] = Field(None, description="Short biography")
    status: Optional[str] = Field(None, description="Professional status, e.g. 'Developer'")
    githubusername: Optional[str] = Field(None, description="GitHub username")
    skills: Optional[str] = Field(None, description="Comma-separated skills, e.g. 'go, rust'")
    youtube: Optional[str] = Field(None, description="YouTube URL")
    facebook: Optional[str] = Field(None, description="Facebook URL")
    twitter: Optional[str] = Field(None, description="Twitter URL")
    instagram: Optional[str] = Field(None, description="Instagram URL")
    linkedin: Optional[str] = Field(None, description="LinkedIn URL")


class ExperienceCreate(BaseModel):
    """Schema for adding a single work experience. Dates are parsed by the profile service."""
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    from_date: Optional[str] = Field(None, alias="from")
    to_date: Optional[str] = Field(None, alias="to")
    current: bool = False
    description: Optional[str] = None

    class Config:
        populate_by_name = True


class EducationCreate(BaseModel):
    """Schema for adding a single education entry."""
    school: Optional[str] = None
    degree: Optional[str] = None
    fieldofstudy: Optional[str] = None
    from_date: Optional[str] = Field(None, alias="from")
    to_date: Optional[str] = Field(None, alias="to")
    current: bool = False
    description: Optional[str] = None

    class Config:
        populate_by_name = True


class ExperienceRead(ExperienceCreate):
    id: str


class EducationRead(EducationCreate):
    id: str


class ProfileOwner(BaseModel):
    """Name and avatar of the user a profile belongs to."""
    id: UUID
    name: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileRead(BaseModel):
    """Schema for profile data as returned to callers."""
    id: UUID
    user: ProfileOwner
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: Dict[str, str] = Field(default_factory=dict)
    experience: List[ExperienceRead] = Field(default_factory=list)
    education: List[EducationRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
