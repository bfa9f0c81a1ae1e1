"""
인라인 교정(correction)을 에세이 본문의 특정 구간에 고정하는 모델.

- 선택한 텍스트는 항상 본문의 해당 구간과 글자 그대로 일치해야 한다.
  위치를 안 주면 본문에서 처음 나오는 곳에 고정한다.
- 오프셋은 교정 시점의 본문 기준. 본문이 바뀌면 다시 맞춰주지 않는다
  (리뷰나 사용자 교정이 하나라도 있으면 본문 수정 자체를 막는다, essay_service 참고).
- DB 에는 camelCase dict 로 저장 (기존 클라이언트 포맷 그대로).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from essay_review.core.errors import InvalidCorrection

CATEGORIES = ("grammar", "style", "clarity", "structure", "content", "research")


@dataclass(frozen=True)
class Anchor:
    start: int
    end: int


def anchor_selection(
    content: str,
    selected_text: str,
    text_start_index: int | None = None,
    text_end_index: int | None = None,
) -> Anchor:
    """선택 영역을 본문 구간으로 고정. 본문과 맞지 않으면 InvalidCorrection."""
    if text_start_index is None:
        anchor = locate_quote(content, selected_text)
        if anchor is None:
            raise InvalidCorrection("selected text was not found in the essay content")
        if text_end_index is not None and text_end_index != anchor.end:
            raise InvalidCorrection("selection end does not match the selected text")
        return anchor

    start = text_start_index
    end = start + len(selected_text) if text_end_index is None else text_end_index
    if not 0 <= start <= end <= len(content):
        raise InvalidCorrection(
            f"selection [{start}, {end}) is outside the essay content (length {len(content)})"
        )
    if content[start:end] != selected_text:
        raise InvalidCorrection("selected text does not match the essay content at the given offsets")
    return Anchor(start=start, end=end)


@dataclass(frozen=True)
class Correction:
    category: str
    comment: str
    selected_text: str = ""
    text_start_index: int = 0
    text_end_index: int = 0

    @classmethod
    def create(
        cls,
        content: str,
        category: str,
        comment: str,
        selected_text: str = "",
        text_start_index: int | None = None,
        text_end_index: int | None = None,
    ) -> "Correction":
        if category not in CATEGORIES:
            raise InvalidCorrection(f"unknown category: {category!r}")
        if not comment or not comment.strip():
            raise InvalidCorrection("comment must not be empty")

        # 선택 영역 없음 -> (0, 0)
        if not selected_text:
            return cls(category=category, comment=comment)

        anchor = anchor_selection(content, selected_text, text_start_index, text_end_index)
        return cls(
            category=category,
            comment=comment,
            selected_text=selected_text,
            text_start_index=anchor.start,
            text_end_index=anchor.end,
        )

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "selectedText": self.selected_text,
            "textStartIndex": self.text_start_index,
            "textEndIndex": self.text_end_index,
            "comment": self.comment,
        }


def locate_quote(content: str, quote: str) -> Anchor | None:
    """본문에서 quote 가 처음 나오는 위치. 못 찾으면 None."""
    if not quote:
        return None
    start = content.find(quote)
    if start == -1:
        return None
    return Anchor(start=start, end=start + len(quote))


def ordered_for_rendering(corrections: Iterable[Correction]) -> list[Correction]:
    # sorted 는 stable -> 같은 시작 위치면 추가된 순서 유지
    return sorted(corrections, key=lambda c: c.text_start_index)


@dataclass(frozen=True)
class Segment:
    text: str
    correction: Correction | None = None


def highlight_segments(content: str, corrections: Iterable[Correction]) -> list[Segment]:
    """
    본문을 일반 구간 / 하이라이트 구간으로 나눈다.
    이미 칠한 구간과 겹치는 교정은 건너뛴다 (정렬 순서상 먼저 온 것이 이김).
    선택 영역이 없는 교정(0, 0)은 하이라이트 대상이 아니다.
    """
    segments: list[Segment] = []
    cursor = 0

    for c in ordered_for_rendering(corrections):
        if c.text_end_index <= c.text_start_index:
            continue
        if c.text_start_index < cursor:
            continue
        if c.text_start_index > cursor:
            segments.append(Segment(content[cursor:c.text_start_index]))
        segments.append(Segment(content[c.text_start_index:c.text_end_index], c))
        cursor = c.text_end_index

    if cursor < len(content):
        segments.append(Segment(content[cursor:]))
    return segments
