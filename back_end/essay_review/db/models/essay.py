from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from essay_review.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Essay(Base):
    __tablename__ = "essays"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    author_name: Mapped[str] = mapped_column(Text, nullable=False)

    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_analyzed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # peer_reviews 집계 캐시 (scoring.refresh_essay_stats 에서만 갱신)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
