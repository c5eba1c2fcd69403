"""
Post data access used by the approval workflow.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.post import Post, PostStatus


class PostRepository:
    """The slice of the content store the approval workflow touches."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, post_id: int) -> Optional[Post]:
        """Get a post by ID. No relationships are loaded."""
        return self.session.execute(select(Post).where(Post.id == post_id)).scalar_one_or_none()

    def mark_published(self, post_id: int, when: datetime) -> Optional[Post]:
        """Set status, the legacy ``published`` flag and ``published_at`` together.

        Flushes but does not commit, so the caller's transaction decides.

        Returns:
            The updated Post, or None if it no longer exists
        """
        post = self.get(post_id)
        if post is None:
            return None
        post.status = PostStatus.PUBLISHED.value
        post.published = True
        post.published_at = when
        self.session.flush()
        return post
