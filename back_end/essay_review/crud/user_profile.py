from sqlalchemy.orm import Session
from sqlalchemy import select

from essay_review.db.models.user_profile import UserProfile


def get_display_name(db: Session, user_id: str) -> str | None:
    stmt = select(UserProfile.display_name).where(UserProfile.user_id == user_id)
    return db.execute(stmt).scalars().first()


def get_display_names(db: Session, user_ids: list[str]) -> dict[str, str]:
    if not user_ids:
        return {}
    stmt = select(UserProfile.user_id, UserProfile.display_name).where(UserProfile.user_id.in_(user_ids))
    return {user_id: name for user_id, name in db.execute(stmt).all()}
