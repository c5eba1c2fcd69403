"""
Posts routes for authoring blog content.

Posts are created as drafts; publishing happens through the approval workflow.
"""
import re

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from ..database import get_db
from ..models.post import Post, PostStatus
from ..models.user import User
from ..auth import get_required_user
from ..responses import ConflictError, not_found
from ..schemas.posts import PostCreate, PostUpdate, PostResponse

router = APIRouter(prefix="/api/posts", tags=["posts"])


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "post"


def unique_slug(db: Session, base: str) -> str:
    """``base``, or ``base-2``, ``base-3``... whichever is free."""
    slug, n = base, 1
    while db.query(Post.id).filter(Post.slug == slug).first() is not None:
        n += 1
        slug = f"{base}-{n}"
    return slug


def get_own_post(db: Session, post_id: int, user: User) -> Post:
    post = db.query(Post).filter(
        Post.id == post_id,
        Post.author_id == user.id
    ).first()
    if not post:
        not_found("Post", post_id)
    return post


@router.get("", response_model=List[PostResponse])
def get_posts(
    status: Optional[PostStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Get all posts for the current user with optional status filter."""
    query = db.query(Post).filter(Post.author_id == current_user.id)
    if status:
        query = query.filter(Post.status == status.value)
    return query.order_by(Post.created_at.desc(), Post.id.desc()).all()


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Get a single post by ID (must belong to current user)."""
    return get_own_post(db, post_id, current_user)


@router.post("", response_model=PostResponse, status_code=201)
def create_post(
    post_data: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Create a new draft post for the current user."""
    if post_data.slug:
        slug = slugify(post_data.slug)
        if db.query(Post.id).filter(Post.slug == slug).first() is not None:
            raise ConflictError(f"Slug '{slug}' is already taken", {"slug": slug})
    else:
        slug = unique_slug(db, slugify(post_data.title))

    post = Post(
        author_id=current_user.id,
        title=post_data.title,
        slug=slug,
        excerpt=post_data.excerpt,
        content=post_data.content,
        status=PostStatus.DRAFT.value,
        published=False,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@router.patch("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_update: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Update a post's text (must belong to current user). Status is not editable here."""
    post = get_own_post(db, post_id, current_user)

    for key, value in post_update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(post, key, value)

    db.commit()
    db.refresh(post)
    return post
