"""
Post aggregate service: posts, ownership-checked deletion and likes.
"""
import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.core.errors import (
    AlreadyLikedError,
    NotFoundError,
    NotLikedError,
    UnauthorizedError,
    require_fields,
)
from devconnector.crud import post as post_crud
from devconnector.crud import user as user_crud
from devconnector.db.models.post import Post, PostLike
from devconnector.schemas.post import PostCreate

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found."


def _parse_post_id(post_id) -> UUID:
    try:
        return post_id if isinstance(post_id, UUID) else UUID(str(post_id))
    except ValueError:
        raise NotFoundError(POST_NOT_FOUND)


class PostService:
    """
    Post operations for an authenticated user.

    Like and unlike are separate entry points with mirrored pre-conditions.
    Both act through single-row statements on ``post_likes`` so that two
    users liking the same post concurrently never overwrite each other.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(self, user_id: UUID, payload: PostCreate) -> Post:
        """
        Create a post, copying the author's current name and avatar into it.
        """
        require_fields({"text": payload.text}, {"text": "Text is required"})

        author = await user_crud.get_user(self.db, user_id)
        if not author:
            raise NotFoundError("User not found.")

        post = await post_crud.create_post(
            self.db,
            user_id=author.id,
            text=payload.text,
            name=author.name,
            avatar=author.avatar,
        )
        logger.info(f"Post {post.id} created by user {user_id}")
        return post

    async def list_posts(self) -> List[Post]:
        return await post_crud.get_posts(self.db)

    async def get_post(self, post_id) -> Post:
        post = await post_crud.get_post(self.db, _parse_post_id(post_id))
        if not post:
            raise NotFoundError(POST_NOT_FOUND)
        return post

    async def delete_post(self, user_id: UUID, post_id) -> None:
        """
        Delete a post. Only its author may do so; the check happens before
        anything is written.
        """
        post = await self.get_post(post_id)

        if post.user_id != user_id:
            logger.warning(f"User {user_id} tried to delete post {post.id} owned by {post.user_id}")
            raise UnauthorizedError()

        await post_crud.delete_post(self.db, post)
        logger.info(f"Post {post_id} deleted by user {user_id}")

    async def like(self, user_id: UUID, post_id) -> List[PostLike]:
        """
        Add ``user_id`` to the head of the post's likes.

        Raises:
            NotFoundError: if the post does not exist
            AlreadyLikedError: if the user already likes the post
        """
        post = await self.get_post(post_id)
        post_uuid = post.id

        if await post_crud.has_liked(self.db, post_uuid, user_id):
            logger.warning(f"User {user_id} already likes post {post_uuid}")
            raise AlreadyLikedError()

        try:
            await post_crud.add_like(self.db, post_uuid, user_id)
        except IntegrityError:
            # Lost a race against another like from the same user
            await self.db.rollback()
            logger.warning(f"User {user_id} already likes post {post_uuid}")
            raise AlreadyLikedError()

        logger.info(f"User {user_id} liked post {post_uuid}")
        return await self._refresh_likes(post)

    async def unlike(self, user_id: UUID, post_id) -> List[PostLike]:
        """
        Remove ``user_id`` from the post's likes, keeping the order of the rest.

        Raises:
            NotFoundError: if the post does not exist
            NotLikedError: if the user has not liked the post
        """
        post = await self.get_post(post_id)
        post_uuid = post.id

        removed = await post_crud.remove_like(self.db, post_uuid, user_id)
        if not removed:
            logger.warning(f"User {user_id} has not liked post {post_uuid}")
            raise NotLikedError()

        logger.info(f"User {user_id} unliked post {post_uuid}")
        return await self._refresh_likes(post)

    async def _refresh_likes(self, post: Post) -> List[PostLike]:
        await self.db.refresh(post, attribute_names=["likes"])
        return list(post.likes)
