from sqlalchemy.orm import Session
from sqlalchemy import select, delete, func

from essay_review.db.models.essay_like import EssayLike


def is_liked(db: Session, essay_id: str, user_id: str) -> bool:
    stmt = select(EssayLike.id).where(EssayLike.essay_id == essay_id, EssayLike.user_id == user_id)
    return db.execute(stmt).first() is not None


def create_like(db: Session, essay_id: str, user_id: str) -> EssayLike:
    like = EssayLike(essay_id=essay_id, user_id=user_id)
    db.add(like)
    db.flush()
    return like


def delete_like(db: Session, essay_id: str, user_id: str) -> bool:
    result = db.execute(
        delete(EssayLike).where(EssayLike.essay_id == essay_id, EssayLike.user_id == user_id)
    )
    return (result.rowcount or 0) > 0


def count_likes(db: Session, essay_id: str) -> int:
    stmt = select(func.count(EssayLike.id)).where(EssayLike.essay_id == essay_id)
    return int(db.execute(stmt).scalar_one())


def delete_likes_for_essay(db: Session, essay_id: str) -> int:
    result = db.execute(delete(EssayLike).where(EssayLike.essay_id == essay_id))
    return result.rowcount or 0
