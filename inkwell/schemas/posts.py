from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class PostBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    excerpt: Optional[str] = None
    content: Optional[str] = None


class PostCreate(PostBase):
    slug: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    excerpt: Optional[str] = None
    content: Optional[str] = None


class PostResponse(PostBase):
    id: int
    author_id: int
    slug: str
    status: str
    published: bool
    published_at: Optional[datetime] = None
    view_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
