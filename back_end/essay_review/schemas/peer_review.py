from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from essay_review.schemas.base import CamelModel

Category = Literal["grammar", "style", "clarity", "structure", "content", "research"]
Score = Annotated[int | None, Field(ge=0, le=200)]


class CorrectionIn(CamelModel):
    category: Category
    comment: str = Field(min_length=1)
    selected_text: str = ""
    # 선택 영역이 없으면 생략 가능 (0, 0)
    text_start_index: int | None = Field(default=None, ge=0)
    text_end_index: int | None = Field(default=None, ge=0)


class CorrectionOut(CamelModel):
    category: str
    selected_text: str
    text_start_index: int
    text_end_index: int
    comment: str


class ScoresIn(CamelModel):
    grammar_score: Score = None
    style_score: Score = None
    clarity_score: Score = None
    structure_score: Score = None
    content_score: Score = None
    research_score: Score = None


class PeerReviewCreate(ScoresIn):
    review_comment: str | None = None
    corrections: list[CorrectionIn] = Field(default_factory=list)
    is_submitted: bool = False


class PeerReviewUpdate(ScoresIn):
    # overallScore 는 받지 않는다. 항상 서버에서 6개 점수 합으로 계산
    review_comment: str | None = None
    is_submitted: bool | None = None


class PeerReviewOut(CamelModel):
    id: str
    essay_id: str
    reviewer_id: str
    reviewer_name: str | None = None
    is_automated: bool
    grammar_score: int
    style_score: int
    clarity_score: int
    structure_score: int
    content_score: int
    research_score: int
    overall_score: int
    corrections: list[CorrectionOut]
    review_comment: str | None = None
    is_submitted: bool
    created_at: datetime
    updated_at: datetime


class BatchAnalyzeOut(CamelModel):
    message: str = "Batch analysis complete"
    total: int
    success: int
    failed: int
    skipped: int


def review_out(review, reviewer_name: str | None = None) -> PeerReviewOut:
    out = PeerReviewOut.model_validate(review)
    if reviewer_name is not None:
        out = out.model_copy(update={"reviewer_name": reviewer_name})
    return out
