"""
에세이 분석 + 모더레이션 파이프라인.

호출 경로: 공개 에세이 생성/공개 전환 시 백그라운드, POST /essays/{id}/analyze, 배치 스윕.

1) 에세이 조회
2) 분석 결과 생성 (OpenAI 또는 로컬 fallback, 백엔드 실패 시 fallback)
3) 인용문 -> 오프셋 변환, 못 찾은 인용문은 경고 로그 후 버림
4) 판정 분기
   - 부적절: is_public=False, AI 리뷰 overall=0, 코멘트에 사유
   - 정상:   is_public=True
   AI 리뷰 upsert + is_analyzed=True + 집계 갱신을 한 트랜잭션으로
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Protocol

from sqlalchemy.orm import Session

from essay_review.core import errors
from essay_review.core.config import settings
from essay_review.core.errors import AnalysisFailed, NotFoundError
from essay_review.crud import essay as essay_store
from essay_review.crud import peer_review as review_store
from essay_review.db import session as db_session
from essay_review.db.models.peer_review import PeerReview
from essay_review.db.session import transaction
from essay_review.domain.reviewer import AUTOMATED
from essay_review.schemas.analysis import AnalysisResult
from essay_review.services import scoring, visibility
from essay_review.services.anchors import Correction, locate_quote
from essay_review.services.fallback_analysis import generate_fallback_analysis
from essay_review.services.openai_service import OpenAIAnalysisBackend

logger = logging.getLogger(__name__)

ANALYSIS_COMMENT = "Automated analysis of grammar, style, clarity, structure, content and research."
MODERATION_COMMENT = (
    "Moderation warning: this essay was flagged by automated moderation and has been made private. "
    "Reason: {reason}"
)


class AnalysisBackend(Protocol):
    def analyze(self, title: str, content: str) -> AnalysisResult:
        ...


@dataclass
class BatchStats:
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def get_analysis_backend() -> AnalysisBackend | None:
    if settings.use_real_ai:
        return OpenAIAnalysisBackend()
    return None


def moderation_comment(reason: str | None) -> str:
    return MODERATION_COMMENT.format(reason=(reason or "inappropriate content").strip())


def run_analysis(essay_id: str, title: str, content: str, backend: AnalysisBackend | None) -> AnalysisResult:
    if backend is not None:
        try:
            return backend.analyze(title, content)
        except Exception:
            logger.exception("analysis backend failed for essay %s, falling back to local analysis", essay_id)
    else:
        logger.info("using local analysis for essay %s", essay_id)

    try:
        return generate_fallback_analysis(title, content)
    except Exception as e:
        raise AnalysisFailed(f"Essay analysis failed for {essay_id}") from e


def locate_corrections(content: str, result: AnalysisResult) -> list[dict]:
    located = []
    for c in result.corrections:
        anchor = locate_quote(content, c.exact_quote)
        if anchor is None:
            logger.warning("dropping correction, quote not found in essay: %r", c.exact_quote[:80])
            continue
        located.append(Correction(
            category=c.category,
            comment=c.comment,
            selected_text=c.exact_quote,
            text_start_index=anchor.start,
            text_end_index=anchor.end,
        ).to_dict())
    return located


def apply_analysis(db: Session, essay_id: str, result: AnalysisResult) -> PeerReview:
    with transaction(db):
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")

        scores = result.scores()
        if result.is_offensive:
            overall = 0
            comment = moderation_comment(result.offense_reason)
            is_public = False
        else:
            overall = scoring.overall_score(scores)
            comment = ANALYSIS_COMMENT
            is_public = True

        fields = dict(
            scores,
            overall_score=overall,
            corrections=locate_corrections(essay.content, result),
            review_comment=comment,
            is_submitted=True,
        )

        # AI 리뷰는 에세이당 1개: 있으면 갱신, 없으면 생성
        review = review_store.get_review(db, essay.id, AUTOMATED, for_update=True)
        if review is not None:
            review_store.update_review(db, review, **fields)
        else:
            review = review_store.create_review(db, essay.id, AUTOMATED, **fields)

        essay_store.update_essay(db, essay, is_public=is_public, is_analyzed=True)
        stats = scoring.refresh_essay_stats(db, essay)

    if result.is_offensive:
        logger.warning("essay %s hidden by moderation: %s", essay_id, result.offense_reason)
    logger.info(
        "essay %s analyzed (overall=%d, reviews=%d, average=%d)",
        essay_id, overall, stats.count, stats.average,
    )
    return review


def analyze_essay(
    db: Session,
    essay_id: str,
    requester_id: str | None = None,
    backend: AnalysisBackend | None = None,
) -> PeerReview:
    """
    db 는 쓰기 대기 중인 변경이 없는 세션이어야 한다.
    외부 호출 전에 읽기 트랜잭션을 rollback 으로 닫으므로 대기 중이던 변경은 반영되지 않는다.
    """
    essay = essay_store.get_essay(db, essay_id)
    if essay is None:
        raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
    if requester_id is not None:
        visibility.ensure_readable(essay, requester_id)

    title, content = essay.title, essay.content
    # 외부 호출 동안 읽기 트랜잭션을 잡고 있지 않도록 종료
    db.rollback()

    if backend is None:
        backend = get_analysis_backend()
    result = run_analysis(essay_id, title, content, backend)
    return apply_analysis(db, essay_id, result)


def batch_analyze_essays(db: Session, backend: AnalysisBackend | None = None) -> BatchStats:
    """공개 에세이 중 AI 리뷰가 없는 것만 분석. 한 건 실패해도 계속 진행."""
    essay_ids = [e.id for e in essay_store.list_essays(db, is_public=True)]
    stats = BatchStats(total=len(essay_ids))

    if backend is None:
        backend = get_analysis_backend()

    for essay_id in essay_ids:
        if review_store.get_review(db, essay_id, AUTOMATED) is not None:
            stats.skipped += 1
            continue

        try:
            analyze_essay(db, essay_id, backend=backend)
            stats.success += 1
        except Exception:
            logger.exception("batch analysis failed for essay %s", essay_id)
            db.rollback()
            stats.failed += 1

    logger.info("batch analysis done: %s", stats.as_dict())
    return stats


def analyze_essay_in_background(essay_id: str) -> None:
    """BackgroundTasks 용. 요청 세션과 별개로 세션을 새로 연다."""
    db = db_session.SessionLocal()
    try:
        analyze_essay(db, essay_id)
    except Exception:
        logger.exception("background analysis failed for essay %s", essay_id)
    finally:
        db.close()
