from sqlalchemy.orm import Session
from sqlalchemy import select, or_

from essay_review.db.models.essay import Essay


def get_essay(db: Session, essay_id: str, for_update: bool = False) -> Essay | None:
    if not for_update:
        return db.get(Essay, essay_id)
    stmt = select(Essay).where(Essay.id == essay_id).with_for_update().execution_options(populate_existing=True)
    return db.execute(stmt).scalars().first()


def list_essays(
    db: Session,
    is_public: bool | None = None,
    author_id: str | None = None,
    exclude_author_id: str | None = None,
    search: str | None = None,
    limit: int | None = None,
) -> list[Essay]:
    stmt = select(Essay)
    if is_public is not None:
        stmt = stmt.where(Essay.is_public == is_public)
    if author_id:
        stmt = stmt.where(Essay.author_id == author_id)
    if exclude_author_id:
        stmt = stmt.where(Essay.author_id != exclude_author_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Essay.title.ilike(pattern), Essay.content.ilike(pattern)))

    stmt = stmt.order_by(Essay.created_at.desc(), Essay.id)
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def create_essay(db: Session, **fields) -> Essay:
    essay = Essay(**fields)
    db.add(essay)
    db.flush()
    return essay


def update_essay(db: Session, essay: Essay, **fields) -> Essay:
    # 여러 필드를 한 번에 패치 (is_public / is_analyzed / review_count / average_score 등)
    for key, value in fields.items():
        setattr(essay, key, value)
    db.flush()
    return essay


def delete_essay(db: Session, essay: Essay) -> None:
    db.delete(essay)
    db.flush()
