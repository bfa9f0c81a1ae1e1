from __future__ import annotations

import logging

from pydantic import Field, field_validator

from essay_review.schemas.base import CamelModel
from essay_review.services.anchors import CATEGORIES
from essay_review.services.scoring import clamp_score

logger = logging.getLogger(__name__)


class QuotedCorrection(CamelModel):
    category: str
    # 본문에서 그대로 복사한 구간. 오프셋은 파이프라인에서 계산
    exact_quote: str
    comment: str = Field(min_length=1)


class AnalysisResult(CamelModel):
    """
    분석 백엔드(OpenAI / fallback) 공통 결과 형태.
    {
      "grammarScore": 0~200, ... "researchScore": 0~200,
      "isOffensive": bool,
      "offenseReason": str|null,
      "corrections": [{"category", "exactQuote", "comment"}]
    }
    """
    grammar_score: int
    style_score: int
    clarity_score: int
    structure_score: int
    content_score: int
    research_score: int
    is_offensive: bool = False
    offense_reason: str | None = None
    corrections: list[QuotedCorrection] = Field(default_factory=list)

    @field_validator(
        "grammar_score", "style_score", "clarity_score",
        "structure_score", "content_score", "research_score",
        mode="before",
    )
    @classmethod
    def _clamp_score(cls, v):
        # LLM 이 범위를 살짝 벗어나는 경우가 있어서 0~200 으로 자른다
        return clamp_score(float(v))

    @field_validator("corrections", mode="before")
    @classmethod
    def _drop_unknown_categories(cls, v):
        if not isinstance(v, list):
            return v
        kept = []
        for item in v:
            if isinstance(item, dict) and item.get("category") not in CATEGORIES:
                logger.warning("dropping correction with unknown category: %r", item.get("category"))
                continue
            kept.append(item)
        return kept

    def scores(self) -> dict[str, int]:
        return {
            "grammar_score": self.grammar_score,
            "style_score": self.style_score,
            "clarity_score": self.clarity_score,
            "structure_score": self.structure_score,
            "content_score": self.content_score,
            "research_score": self.research_score,
        }
