from __future__ import annotations

from datetime import datetime

from pydantic import Field

from essay_review.schemas.base import CamelModel


class EssayCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    is_public: bool = False


class EssayUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1)
    is_public: bool | None = None


class EssayOut(CamelModel):
    id: str
    title: str
    content: str
    author_id: str
    author_name: str
    word_count: int
    is_public: bool
    is_analyzed: bool
    review_count: int
    average_score: int
    created_at: datetime
    updated_at: datetime


class LikeToggleOut(CamelModel):
    liked: bool


class LikeCountOut(CamelModel):
    count: int
