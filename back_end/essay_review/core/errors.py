"""
서비스 계층에서 던지는 비즈니스 에러.

라우터는 이 에러를 직접 잡지 않는다. main.py 에 등록된 exception handler 가
status_code / code 를 그대로 JSON 응답으로 바꿔준다.
"""

ESSAY_NOT_FOUND = "ESSAY_NOT_FOUND"
REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
FORBIDDEN_ACCESS = "FORBIDDEN_ACCESS"
CANNOT_REVIEW_OWN_ESSAY = "CANNOT_REVIEW_OWN_ESSAY"
CANNOT_LIKE_OWN_ESSAY = "CANNOT_LIKE_OWN_ESSAY"
REVIEW_ALREADY_SUBMITTED = "REVIEW_ALREADY_SUBMITTED"
ESSAY_CONTENT_LOCKED = "ESSAY_CONTENT_LOCKED"
INVALID_CORRECTION = "INVALID_CORRECTION"
ANALYSIS_FAILED = "ANALYSIS_FAILED"


class ServiceError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = 404


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    # 상태 충돌은 원래 API 와 맞춰 400 으로 내려준다
    status_code = 400


class InvalidCorrection(ConflictError):
    def __init__(self, message: str):
        super().__init__(INVALID_CORRECTION, message)


class AnalysisFailed(ServiceError):
    status_code = 500

    def __init__(self, message: str = "Essay analysis failed"):
        super().__init__(ANALYSIS_FAILED, message)
