import os

# essay_review 를 import 하기 전에 설정 (실제 DB / OpenAI 안 씀)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"
os.environ["USE_REAL_AI"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import essay_review.db.models  # noqa: F401
from essay_review.crud import essay as essay_store
from essay_review.db import session as db_session
from essay_review.db.base import Base
from essay_review.db.session import get_db
from essay_review.main import app
from essay_review.schemas.analysis import AnalysisResult

SAMPLE_ESSAY = (
    "Rivers shape the cities that grow beside them. "
    "According to a 2019 study, most of the largest cities sit within a day's walk of fresh water.\n\n"
    "the river is also a border, a road and a source of food. "
    "It is really the the oldest highway we have."
)


class FakeBackend:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def analyze(self, title, content):
        self.calls.append((title, content))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def make_essay(db):
    def _make(author_id="author-1", title="Rivers", content=SAMPLE_ESSAY, is_public=True):
        essay = essay_store.create_essay(
            db,
            title=title,
            content=content,
            author_id=author_id,
            author_name="Author",
            word_count=len(content.split()),
            is_public=is_public,
        )
        db.commit()
        return essay

    return _make


@pytest.fixture()
def analysis_result():
    def _make(score=150, is_offensive=False, offense_reason=None, corrections=()):
        return AnalysisResult.model_validate({
            "grammarScore": score,
            "styleScore": score,
            "clarityScore": score,
            "structureScore": score,
            "contentScore": score,
            "researchScore": score,
            "isOffensive": is_offensive,
            "offenseReason": offense_reason,
            "corrections": list(corrections),
        })

    return _make


@pytest.fixture()
def client(session_factory, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # 백그라운드 분석도 같은 테스트 DB 를 보도록
    monkeypatch.setattr(db_session, "SessionLocal", session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def fake_backend():
    return FakeBackend


@pytest.fixture()
def sample_essay():
    return SAMPLE_ESSAY
