from sqlalchemy.orm import Session

from essay_review.core import errors
from essay_review.core.errors import NotFoundError
from essay_review.crud import essay as essay_store
from essay_review.crud import essay_like as like_store
from essay_review.db.session import transaction
from essay_review.services import visibility


def count_likes(db: Session, essay_id: str, requester_id: str | None) -> int:
    essay = essay_store.get_essay(db, essay_id)
    if essay is None:
        raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
    visibility.ensure_readable(essay, requester_id)
    return like_store.count_likes(db, essay_id)


def toggle_like(db: Session, essay_id: str, user_id: str) -> bool:
    """좋아요 <-> 취소. 반환값은 토글 후 상태."""
    with transaction(db):
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
        visibility.ensure_likeable(essay, user_id)

        if like_store.is_liked(db, essay_id, user_id):
            like_store.delete_like(db, essay_id, user_id)
            return False

        like_store.create_like(db, essay_id, user_id)
        return True
