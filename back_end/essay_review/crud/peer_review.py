from sqlalchemy.orm import Session
from sqlalchemy import select, delete, func

from essay_review.db.models.peer_review import PeerReview
from essay_review.domain.reviewer import Reviewer


def get_review(db: Session, essay_id: str, reviewer: Reviewer, for_update: bool = False) -> PeerReview | None:
    stmt = select(PeerReview).where(
        PeerReview.essay_id == essay_id,
        PeerReview.reviewer_id == reviewer.storage_id,
    )
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    return db.execute(stmt).scalars().first()


def get_review_by_id(db: Session, review_id: str, for_update: bool = False) -> PeerReview | None:
    if not for_update:
        return db.get(PeerReview, review_id)
    stmt = select(PeerReview).where(PeerReview.id == review_id).with_for_update().execution_options(populate_existing=True)
    return db.execute(stmt).scalars().first()


def list_reviews(db: Session, essay_id: str) -> list[PeerReview]:
    stmt = (
        select(PeerReview)
        .where(PeerReview.essay_id == essay_id)
        .order_by(PeerReview.created_at.desc(), PeerReview.id)
    )
    return list(db.execute(stmt).scalars().all())


def create_review(db: Session, essay_id: str, reviewer: Reviewer, **fields) -> PeerReview:
    review = PeerReview(essay_id=essay_id, reviewer_id=reviewer.storage_id, **fields)
    db.add(review)
    db.flush()
    return review


def update_review(db: Session, review: PeerReview, **fields) -> PeerReview:
    for key, value in fields.items():
        setattr(review, key, value)
    db.flush()
    return review


def append_correction(db: Session, review: PeerReview, correction: dict) -> PeerReview:
    # JSON 컬럼은 in-place append 를 감지 못함 -> 새 리스트로 교체
    review.corrections = [*(review.corrections or []), correction]
    db.flush()
    return review


def aggregate_stats(db: Session, essay_id: str) -> tuple[int, int]:
    """(리뷰 수, overall_score 합계)"""
    stmt = select(
        func.count(PeerReview.id),
        func.coalesce(func.sum(PeerReview.overall_score), 0),
    ).where(PeerReview.essay_id == essay_id)
    count, total = db.execute(stmt).one()
    return int(count), int(total)


def delete_reviews_for_essay(db: Session, essay_id: str) -> int:
    result = db.execute(delete(PeerReview).where(PeerReview.essay_id == essay_id))
    return result.rowcount or 0
