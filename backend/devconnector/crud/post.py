"""
CRUD operations for posts and likes.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.db.models.post import Post, PostLike


async def create_post(db: AsyncSession, user_id: UUID, text: str, name: str, avatar: Optional[str]) -> Post:
    """
    Create a new post.

    Args:
        db: Database session
        user_id: Author's user ID
        text: Post body
        name: Author name at creation time
        avatar: Author avatar at creation time

    Returns:
        Post: Created post
    """
    db_post = Post(user_id=user_id, text=text, name=name, avatar=avatar)
    db.add(db_post)
    # Flush to send changes to DB within the transaction
    await db.flush()
    # Refresh to get the generated ID and load the (empty) like list
    await db.refresh(db_post)
    return db_post


async def get_post(db: AsyncSession, post_id: UUID) -> Optional[Post]:
    """
    Get a post by ID.

    Args:
        db: Database session
        post_id: Post ID

    Returns:
        Optional[Post]: Post if found, None otherwise
    """
    result = await db.execute(
        select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_posts(db: AsyncSession) -> List[Post]:
    """
    Get every post, most recent first.
    """
    result = await db.execute(select(Post).order_by(Post.date.desc(), Post.created_at.desc()))
    return list(result.scalars().all())


async def delete_post(db: AsyncSession, db_post: Post) -> None:
    """Delete a post together with its likes."""
    await db.delete(db_post)
    await db.flush()


async def get_likes(db: AsyncSession, post_id: UUID) -> List[PostLike]:
    """
    Get the likes of a post, most recent first.
    """
    result = await db.execute(
        select(PostLike).where(PostLike.post_id == post_id).order_by(PostLike.id.desc())
    )
    return list(result.scalars().all())


async def has_liked(db: AsyncSession, post_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(
        select(PostLike.id).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    )
    return result.first() is not None


async def add_like(db: AsyncSession, post_id: UUID, user_id: UUID) -> PostLike:
    """
    Insert a like record.

    Raises:
        sqlalchemy.exc.IntegrityError: if the user already likes the post
    """
    like = PostLike(post_id=post_id, user_id=user_id)
    db.add(like)
    await db.flush()
    return like


async def remove_like(db: AsyncSession, post_id: UUID, user_id: UUID) -> int:
    """
    Delete the like record of ``user_id`` on a post in a single statement.

    Returns:
        int: Number of rows removed (0 when the user had not liked the post)
    """
    result = await db.execute(
        delete(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    )
    return result.rowcount
