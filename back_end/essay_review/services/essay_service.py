from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from essay_review.core import errors
from essay_review.core.config import settings
from essay_review.core.errors import ConflictError, ForbiddenError, NotFoundError
from essay_review.crud import essay as essay_store
from essay_review.crud import essay_like as like_store
from essay_review.crud import peer_review as review_store
from essay_review.crud import user_profile as profile_store
from essay_review.crud import user_correction as correction_store
from essay_review.db.models.essay import Essay
from essay_review.db.session import transaction
from essay_review.schemas.essay import EssayCreate, EssayUpdate
from essay_review.services import visibility

logger = logging.getLogger(__name__)


@dataclass
class EssayWrite:
    essay: Essay
    # True 면 라우터가 백그라운드 분석을 예약한다 (응답은 기다리지 않음)
    needs_analysis: bool


def count_words(content: str) -> int:
    return len(content.split())


def list_essays(
    db: Session,
    requester_id: str | None,
    is_public: bool | None = None,
    author_id: str | None = None,
    exclude_author_id: str | None = None,
    search: str | None = None,
) -> list[Essay]:
    # 자기 프로필을 볼 때만 비공개 글까지 보인다
    if not (author_id and author_id == requester_id):
        is_public = True

    safe_search = search[: settings.SEARCH_MAX_LENGTH] if search else None
    return essay_store.list_essays(
        db,
        is_public=is_public,
        author_id=author_id,
        exclude_author_id=exclude_author_id,
        search=safe_search,
        limit=settings.ESSAY_LIST_LIMIT,
    )


def get_essay(db: Session, essay_id: str, requester_id: str | None) -> Essay:
    essay = essay_store.get_essay(db, essay_id)
    if essay is None:
        raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
    visibility.ensure_readable(essay, requester_id)
    return essay


def create_essay(db: Session, user_id: str, payload: EssayCreate) -> EssayWrite:
    author_name = profile_store.get_display_name(db, user_id) or "Anonymous"

    with transaction(db):
        essay = essay_store.create_essay(
            db,
            title=payload.title,
            content=payload.content,
            author_id=user_id,
            author_name=author_name,
            word_count=count_words(payload.content),
            is_public=payload.is_public,
        )

    if essay.is_public:
        logger.info("essay %s created public, scheduling analysis", essay.id)
    return EssayWrite(essay=essay, needs_analysis=essay.is_public)


def update_essay(db: Session, essay_id: str, user_id: str, payload: EssayUpdate) -> EssayWrite:
    patch = payload.model_dump(exclude_unset=True, exclude_none=True)

    with transaction(db):
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
        if essay.author_id != user_id:
            raise ForbiddenError(errors.FORBIDDEN_ACCESS, "You cannot edit this essay")

        if "content" in patch and patch["content"] != essay.content:
            # 교정 오프셋이 본문 기준이라 리뷰나 사용자 교정이 생긴 뒤에는 본문을 못 바꾼다
            review_count, _ = review_store.aggregate_stats(db, essay.id)
            if review_count or correction_store.count_user_corrections(db, essay.id):
                raise ConflictError(
                    errors.ESSAY_CONTENT_LOCKED,
                    "Essay content cannot be edited once it has reviews or corrections",
                )
            patch["word_count"] = count_words(patch["content"])

        was_public = essay.is_public
        essay_store.update_essay(db, essay, **patch)

    # 비공개 -> 공개 전환 시점부터 모더레이션 대상
    publishing = essay.is_public and not was_public
    if publishing:
        logger.info("essay %s published, scheduling analysis", essay.id)
    return EssayWrite(essay=essay, needs_analysis=publishing)


def delete_essay(db: Session, essay_id: str, user_id: str) -> None:
    with transaction(db):
        essay = essay_store.get_essay(db, essay_id, for_update=True)
        if essay is None:
            raise NotFoundError(errors.ESSAY_NOT_FOUND, "Essay not found")
        if essay.author_id != user_id:
            raise ForbiddenError(errors.FORBIDDEN_ACCESS, "You cannot delete this essay")

        reviews = review_store.delete_reviews_for_essay(db, essay.id)
        likes = like_store.delete_likes_for_essay(db, essay.id)
        corrections = correction_store.delete_user_corrections_for_essay(db, essay.id)
        essay_store.delete_essay(db, essay)

    logger.info(
        "essay %s deleted with %d reviews, %d likes and %d user corrections",
        essay_id, reviews, likes, corrections,
    )
