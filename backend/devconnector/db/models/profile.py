"""
Developer profile model.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..base import Base, JSONDocument, TimestampMixin, UUIDMixin


class Profile(Base, UUIDMixin, TimestampMixin):
    """
    One profile per user. Experience and education are ordered JSON arrays
    of entries, most recent first; each entry carries its own ``id``.
    """
    __tablename__ = "profiles"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    company = Column(String(255))
    website = Column(String(255))
    location = Column(String(255))
    status = Column(String(255), nullable=False)
    skills = Column(JSONDocument, nullable=False, default=list)
    bio = Column(Text)
    githubusername = Column(String(255))
    social = Column(JSONDocument, nullable=False, default=dict)
    experience = Column(JSONDocument, nullable=False, default=list)
    education = Column(JSONDocument, nullable=False, default=list)
    version_id = Column(Integer, nullable=False)

    # Relationships
    user = relationship("User", lazy="joined")

    __mapper_args__ = {"version_id_col": version_id}
