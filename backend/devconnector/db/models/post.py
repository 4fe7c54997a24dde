"""
Post and like models.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..base import Base, TimestampMixin, UUIDMixin, utcnow


class Post(Base, UUIDMixin, TimestampMixin):
    """
    A post with its author's name and avatar copied in at creation time.

    ``user_id`` is deliberately not a foreign key: posts outlive the account
    that wrote them.
    """
    __tablename__ = "posts"

    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    text = Column(Text, nullable=False)
    name = Column(String(255))
    avatar = Column(String)
    date = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Relationships
    likes = relationship(
        "PostLike",
        back_populates="post",
        order_by="PostLike.id.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class PostLike(Base):
    """
    One row per (post, user). The unique constraint makes liking an atomic
    add-to-set; ``id`` orders the likes newest first.
    """
    __tablename__ = "post_likes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_id_user_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    post = relationship("Post", back_populates="likes")
