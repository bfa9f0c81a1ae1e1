from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from essay_review.api.deps import get_current_user_id
from essay_review.db.session import get_db
from essay_review.schemas.peer_review import CorrectionIn, PeerReviewOut, PeerReviewUpdate, review_out
from essay_review.services import peer_review_service

router = APIRouter()


@router.patch("/{review_id}", response_model=PeerReviewOut)
def update_peer_review(
    review_id: str,
    payload: PeerReviewUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return review_out(peer_review_service.update_review(db, review_id, user_id, payload))


@router.post("/{review_id}/corrections", response_model=PeerReviewOut)
def add_correction(
    review_id: str,
    payload: CorrectionIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return review_out(peer_review_service.add_correction(db, review_id, user_id, payload))
