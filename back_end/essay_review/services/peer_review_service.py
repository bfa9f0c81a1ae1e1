"""
사람 리뷰어의 리뷰 생명주기.

    NONE --create/첫 교정--> DRAFT --isSubmitted=true--> SUBMITTED (종료)

- (essay, reviewer) 당 리뷰는 최대 1개. 에세이 row 를 FOR UPDATE 로 잡은 뒤
  조회하고 없을 때만 만든다 (동시 생성 경쟁 방지).
- SUBMITTED 이후에는 점수 수정 / 교정 추가 모두 REVIEW_ALREADY_SUBMITTED.
- 리뷰를 바꾸는 모든 쓰기는 같은 트랜잭션 안에서 에세이 집계를 다시 계산한다.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from essay_review.core import errors
from essay_review.core.errors import ConflictError, ForbiddenError, NotFoundError
from essay_review.crud import essay as essay_store
from essay_review.crud import peer_review as review_store
from essay_review.crud import user_profile as profile_store
from essay_review.db.models.essay import Essay
from essay_review.db.models.peer_review import PeerReview
from essay_review.db.session import transaction
from essay_review.domain.reviewer import HumanReviewer
from essay_review.schemas.peer_review import CorrectionIn, PeerReviewCreate, PeerReviewUpdate
from essay_review.services import scoring, visibility
from essay_review.services.anchors import Correction

logger = logging.getLogger(__name__)


class ReviewState(str, enum.Enum):
    NONE = "none"
    DRAFT = "draft"
    SUBMITTED = "submitted"


def review_state(review: PeerReview | None) -> ReviewState:
    if review is None:
        return ReviewState.NONE
    return ReviewState.SUBMITTED if review.is_submitted else ReviewState.DRAFT


def is_review_complete(review: PeerReview) -> bool:
    """제출 전 UX 체크: 6개 항목 모두 기본값(100)에서 움직였는지. 서버에서 강제하지 않음."""
    return all(getattr(review, f) != scoring.NEUTRAL_SCORE for f in scoring.SCORE_FIELDS)


@dataclass
class ReviewCreation:
    review: PeerReview
    is_new: bool


def _anchor(content: str, data: CorrectionIn) -> dict:
    return Correction.create(
        content,
        category=data.category,
        comment=data.comment,
        selected_text=data.selected_text,
        text_start_index=data.text_start_index,
        text_end_index=data.text_end_index,
    ).to_dict()


def _merged_scores(review: PeerReview | None, patch: dict) -> dict:
    scores = {}
    for f in scoring.SCORE_FIELDS:
        if patch.get(f) is not None:
            scores[f] = patch[f]
        elif review is not None:
            scores[f] = getattr(review, f)
        else:
            scores[f] = scoring.NEUTRAL_SCORE
    return scores


def _load_owned_draft(db: Session, review_id: str, user_id: str) -> tuple[PeerReview, Essay]:
    review = review_store.get_review_by_id(db, review_id)
    if review is None:
        raise NotFoundError(errors.REVIEW_NOT_FOUND, "Review not found")

    if review.is_automated or review.reviewer_id != user_id:
        raise ForbiddenError(errors.FORBIDDEN_ACCESS, "You cannot edit this review")

    # 락 순서는 항상 essay -> review (create / analysis 와 동일)
    essay = essay_store.get_essay(db, review.essay_id, for_update=True)
    review = review_store.get_review_by_id(db, review_id, for_update=True)
    if essay is None or review is None:
        # 조회와 락 사이에 에세이가 삭제된 경우
        raise NotFoundError(errors.REVIEW_NOT_FOUND, "Review not found")

    if review.is_submitted:
        raise ConflictError(errors.REVIEW_ALREADY_SUBMITTED, "This review has already been submitted")
    return review, essay


def list_reviews(db: Session, essay_id: str) -> list[tuple[PeerReview, str | None]]:
    """(리뷰, 리뷰어 표시 이름) 최신순."""
    reviews = review_store.list_reviews(db, essay_id)
    human_ids = [r.reviewer_id for r in reviews if not r.is_automated]
    names = profile_store.get_display_names(db, human_ids)

    result = []
    for r in reviews:
        if r.is_automated:
            name = "AI"
        else:
            name = names.get(r.reviewer_id) or "Anonymous Student"
        result.append((r, name))
    return result


def create_review(db: Session, essay_id: str, reviewer_id: str, payload: PeerReviewCreate) -> ReviewCreation:
    reviewer = HumanReviewer(reviewer_id)

    with transaction(db):
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")

        visibility.ensure_reviewable(essay, reviewer_id)

        existing = review_store.get_review(db, essay_id, reviewer)
        if existing is not None:
            # 멱등: 기존 리뷰를 그대로 돌려준다. 덮어쓰지 않음
            return ReviewCreation(review=existing, is_new=False)

        patch = payload.model_dump(exclude={"corrections"})
        scores = _merged_scores(None, patch)
        corrections = [_anchor(essay.content, c) for c in payload.corrections]

        review = review_store.create_review(
            db,
            essay_id,
            reviewer,
            **scores,
            overall_score=scoring.overall_score(scores),
            corrections=corrections,
            review_comment=payload.review_comment,
            is_submitted=payload.is_submitted,
        )
        stats = scoring.refresh_essay_stats(db, essay)

    logger.info(
        "review %s created for essay %s (reviews=%d, average=%d)",
        review.id, essay_id, stats.count, stats.average,
    )
    return ReviewCreation(review=review, is_new=True)


def update_review(db: Session, review_id: str, user_id: str, payload: PeerReviewUpdate) -> PeerReview:
    with transaction(db):
        review, essay = _load_owned_draft(db, review_id, user_id)

        patch = payload.model_dump(exclude_unset=True)
        scores = _merged_scores(review, patch)
        fields = dict(scores, overall_score=scoring.overall_score(scores))
        if "review_comment" in patch:
            fields["review_comment"] = patch["review_comment"]
        if patch.get("is_submitted"):
            fields["is_submitted"] = True

        review_store.update_review(db, review, **fields)
        scoring.refresh_essay_stats(db, essay)

    if review.is_submitted:
        logger.info("review %s submitted (overall=%d)", review.id, review.overall_score)
    return review


def add_correction(db: Session, review_id: str, user_id: str, data: CorrectionIn) -> PeerReview:
    with transaction(db):
        review, essay = _load_owned_draft(db, review_id, user_id)
        review_store.append_correction(db, review, _anchor(essay.content, data))
        scoring.refresh_essay_stats(db, essay)
    return review
