"""
리뷰어 식별자.

peer_reviews.reviewer_id 컬럼에는 사람 user id 또는 자동 분석기 마커가 들어간다.
마커 문자열은 이 모듈 밖에서 비교하지 않는다. 나머지 코드는 Reviewer 유니온만 다룬다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

_AUTOMATED_MARKER = "AI"


@dataclass(frozen=True)
class HumanReviewer:
    user_id: str

    is_automated: ClassVar[bool] = False

    def __post_init__(self):
        if not self.user_id or self.user_id == _AUTOMATED_MARKER:
            raise ValueError(f"invalid human reviewer id: {self.user_id!r}")

    @property
    def storage_id(self) -> str:
        return self.user_id


@dataclass(frozen=True)
class AutomatedReviewer:
    is_automated: ClassVar[bool] = True

    @property
    def storage_id(self) -> str:
        return _AUTOMATED_MARKER


Reviewer = Union[HumanReviewer, AutomatedReviewer]

AUTOMATED = AutomatedReviewer()


def reviewer_from_storage(value: str) -> Reviewer:
    if value == _AUTOMATED_MARKER:
        return AUTOMATED
    return HumanReviewer(value)


def is_reserved_id(value: str) -> bool:
    return value == _AUTOMATED_MARKER
