# 리뷰 점수 / 에세이 집계
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from sqlalchemy.orm import Session

from essay_review.crud import peer_review as review_store
from essay_review.db.models.essay import Essay

SCORE_FIELDS = (
    "grammar_score",
    "style_score",
    "clarity_score",
    "structure_score",
    "content_score",
    "research_score",
)

NEUTRAL_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 200


@dataclass(frozen=True)
class ReviewStats:
    count: int
    average: int


def overall_score(scores: Mapping[str, int]) -> int:
    return sum(int(scores[f]) for f in SCORE_FIELDS)


def clamp_score(value: float) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(round(value))))


def round_half_up(total: int, count: int) -> int:
    """
    total / count 를 정수로 반올림 (0.5 는 올림). 음수 없는 정수 점수 전제.
    파이썬 round() 는 banker's rounding 이라 쓰지 않는다.
    """
    if count <= 0:
        return 0
    return (2 * total + count) // (2 * count)


def aggregate_stats(db: Session, essay_id: str) -> ReviewStats:
    count, total = review_store.aggregate_stats(db, essay_id)
    return ReviewStats(count=count, average=round_half_up(total, count))


def refresh_essay_stats(db: Session, essay: Essay) -> ReviewStats:
    """
    리뷰 쓰기와 같은 트랜잭션 안에서 호출해야 한다.
    방금 add 한 리뷰도 집계에 들어가도록 먼저 flush.
    """
    db.flush()
    stats = aggregate_stats(db, essay.id)
    essay.review_count = stats.count
    essay.average_score = stats.average
    db.flush()
    return stats
