import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from essay_review.api.v1.router import router as v1_router
from essay_review.core.errors import ServiceError
from essay_review.core.logging import setup_logging

# DB 관련 import (Base / engine)
from essay_review.db.base import Base
from essay_review.db.session import engine

# 모델들을 등록하기 위해 import (Base.metadata에 모델이 올라가도록)
import essay_review.db.models  # noqa: F401

logger = logging.getLogger(__name__)

app = FastAPI(title="Essay Peer Review API")

app.include_router(v1_router, prefix="/api/v1")


@app.on_event("startup")
def on_startup():
    setup_logging()
    # 개발 단계 편의용: 테이블 자동 생성 (운영은 alembic)
    Base.metadata.create_all(bind=engine)


# 서비스 계층 에러 -> HTTP 응답
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# 연결 체크
@app.get("/health")
def health():
    return {"ok": True}
