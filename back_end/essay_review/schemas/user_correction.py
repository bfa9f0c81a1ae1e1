from __future__ import annotations

from datetime import datetime

from pydantic import Field

from essay_review.schemas.base import CamelModel


class UserCorrectionCreate(CamelModel):
    original_text: str = Field(min_length=1)
    suggested_text: str = Field(min_length=1)
    explanation: str | None = None
    # 생략하면 본문에서 original_text 가 처음 나오는 위치
    text_start_index: int | None = Field(default=None, ge=0)
    text_end_index: int | None = Field(default=None, ge=0)


class UserCorrectionOut(CamelModel):
    id: str
    essay_id: str
    user_id: str
    original_text: str
    suggested_text: str
    explanation: str | None = None
    text_start_index: int
    text_end_index: int
    likes: int
    created_at: datetime
