"""
에세이 접근 권한 (읽기 / 좋아요 / 리뷰).

모더레이션이 is_public 을 비동기로 false 로 바꿀 수 있으므로,
매 요청마다 현재 DB 상태로 다시 검사한다. 클라이언트가 보던 값은 믿지 않는다.
"""
from essay_review.core import errors
from essay_review.core.errors import ForbiddenError
from essay_review.db.models.essay import Essay


def is_author(essay: Essay, user_id: str | None) -> bool:
    return user_id is not None and essay.author_id == user_id


def can_read(essay: Essay, user_id: str | None) -> bool:
    return essay.is_public or is_author(essay, user_id)


def ensure_readable(essay: Essay, user_id: str | None) -> None:
    if not can_read(essay, user_id):
        raise ForbiddenError(errors.FORBIDDEN_ACCESS, "This essay is private")


def ensure_likeable(essay: Essay, user_id: str) -> None:
    if is_author(essay, user_id):
        raise ForbiddenError(errors.CANNOT_LIKE_OWN_ESSAY, "You cannot like your own essay")
    if not essay.is_public:
        raise ForbiddenError(errors.FORBIDDEN_ACCESS, "Only public essays can be liked")


def ensure_reviewable(essay: Essay, user_id: str) -> None:
    # 공개 여부와 무관하게 본인 글 리뷰는 금지. 남의 비공개 글은 읽을 수도 없으니 리뷰도 불가
    if is_author(essay, user_id):
        raise ForbiddenError(errors.CANNOT_REVIEW_OWN_ESSAY, "You cannot review your own essay")
    ensure_readable(essay, user_id)
