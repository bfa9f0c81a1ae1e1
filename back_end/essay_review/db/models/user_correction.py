import uuid
from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from essay_review.db.base import Base
from essay_review.db.models.essay import utcnow


# 리뷰와 별개로 독자가 에세이 본문에 남기는 수정 제안
class UserCorrection(Base):
    __tablename__ = "user_corrections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    essay_id: Mapped[str] = mapped_column(String(36), ForeignKey("essays.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    # original_text 는 본문 [text_start_index, text_end_index) 와 글자 그대로 같다
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_text: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_start_index: Mapped[int] = mapped_column(Integer, nullable=False)
    text_end_index: Mapped[int] = mapped_column(Integer, nullable=False)

    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
