from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from essay_review.db.base import Base
from essay_review.db.models.essay import utcnow
from essay_review.domain.reviewer import Reviewer, reviewer_from_storage


class PeerReview(Base):
    __tablename__ = "peer_reviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    essay_id: Mapped[str] = mapped_column(String(36), ForeignKey("essays.id", ondelete="CASCADE"), index=True, nullable=False)

    # (essay_id, reviewer_id) 유일성은 DB 제약이 아니라 lookup-before-create 로 보장
    reviewer_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    # 0~200, 100 = 아직 채점 안 함
    grammar_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    style_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    clarity_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    structure_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    content_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    research_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    overall_score: Mapped[int] = mapped_column(Integer, nullable=False, default=600)

    # [{category, selectedText, textStartIndex, textEndIndex, comment}, ...]
    corrections: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_submitted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def reviewer(self) -> Reviewer:
        return reviewer_from_storage(self.reviewer_id)

    @property
    def is_automated(self) -> bool:
        return self.reviewer.is_automated
