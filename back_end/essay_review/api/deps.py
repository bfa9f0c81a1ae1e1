# 인증은 앞단(세션 서비스) 담당. 여기서는 전달받은 사용자 id 만 꺼낸다
from fastapi import Header, HTTPException

from essay_review.domain.reviewer import is_reserved_id


def _clean(user_id: str | None) -> str | None:
    if user_id is None:
        return None
    user_id = user_id.strip()
    if not user_id or is_reserved_id(user_id):
        return None
    return user_id


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    user_id = _clean(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def get_optional_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    return _clean(x_user_id)
