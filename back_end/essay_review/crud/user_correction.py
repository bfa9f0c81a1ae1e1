from sqlalchemy.orm import Session
from sqlalchemy import select, delete, func

from essay_review.db.models.user_correction import UserCorrection


def list_user_corrections(db: Session, essay_id: str) -> list[UserCorrection]:
    stmt = (
        select(UserCorrection)
        .where(UserCorrection.essay_id == essay_id)
        .order_by(UserCorrection.created_at.desc(), UserCorrection.id)
    )
    return list(db.execute(stmt).scalars().all())


def count_user_corrections(db: Session, essay_id: str) -> int:
    stmt = select(func.count(UserCorrection.id)).where(UserCorrection.essay_id == essay_id)
    return int(db.execute(stmt).scalar_one())


def create_user_correction(db: Session, essay_id: str, user_id: str, **fields) -> UserCorrection:
    correction = UserCorrection(essay_id=essay_id, user_id=user_id, **fields)
    db.add(correction)
    db.flush()
    return correction


def delete_user_corrections_for_essay(db: Session, essay_id: str) -> int:
    result = db.execute(delete(UserCorrection).where(UserCorrection.essay_id == essay_id))
    return result.rowcount or 0
