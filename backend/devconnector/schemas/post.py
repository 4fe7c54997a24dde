"""
Pydantic schemas for posts.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class PostCreate(BaseModel):
    """Schema for creating a new post."""
    text: Optional[str] = Field(None, description="Body of the post")


class LikeRead(BaseModel):
    """A single like record: the user who liked the post."""
    id: int
    user: UUID = Field(..., validation_alias=AliasChoices("user_id", "user"))

    class Config:
        from_attributes = True


class PostRead(BaseModel):
    """Schema for post data as returned to callers."""
    id: UUID
    user: UUID = Field(..., validation_alias=AliasChoices("user_id", "user"))
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    date: datetime
    likes: List[LikeRead] = Field(default_factory=list)

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
