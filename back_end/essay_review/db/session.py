# db 연결
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import Session

from essay_review.core.config import settings

DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=False,   # SQL 로그 출력
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# DB 세션 Dependency
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    여러 단계 read-modify-write 를 하나의 트랜잭션으로 묶는다.
    블록 안에서 예외가 나면 전부 rollback 하고 그대로 다시 던진다.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
