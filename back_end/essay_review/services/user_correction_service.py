"""
에세이 단위 사용자 교정 (리뷰와 별개인 수정 제안).

읽기 권한이 있는 사용자면 누구나 남길 수 있다. original_text 는 리뷰 교정과
같은 규칙으로 본문 구간에 고정한다.
"""
import logging

from sqlalchemy.orm import Session

from essay_review.core import errors
from essay_review.core.errors import NotFoundError
from essay_review.crud import essay as essay_store
from essay_review.crud import user_correction as correction_store
from essay_review.db.models.user_correction import UserCorrection
from essay_review.db.session import transaction
from essay_review.schemas.user_correction import UserCorrectionCreate
from essay_review.services import visibility
from essay_review.services.anchors import anchor_selection

logger = logging.getLogger(__name__)


def list_corrections(db: Session, essay_id: str, requester_id: str | None) -> list[UserCorrection]:
    essay = essay_store.get_essay(db, essay_id)
    if essay is None:
        raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
    visibility.ensure_readable(essay, requester_id)
    return correction_store.list_user_corrections(db, essay_id)


def create_correction(db: Session, essay_id: str, user_id: str, payload: UserCorrectionCreate) -> UserCorrection:
    with transaction(db):
        # 본문 수정(essay_service.update_essay)과 직렬화
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
        visibility.ensure_readable(essay, user_id)

        anchor = anchor_selection(
            essay.content,
            payload.original_text,
            payload.text_start_index,
            payload.text_end_index,
        )
        correction = correction_store.create_user_correction(
            db,
            essay.id,
            user_id,
            original_text=payload.original_text,
            suggested_text=payload.suggested_text,
            explanation=payload.explanation,
            text_start_index=anchor.start,
            text_end_index=anchor.end,
        )

    logger.info("user correction %s added to essay %s", correction.id, essay_id)
    return correction
