"""
OpenAI 를 못 쓰는 환경(개발/테스트, 키 없음, 호출 실패)에서 쓰는 로컬 분석기.

- 같은 입력이면 항상 같은 결과 (랜덤 없음)
- 결과 형태는 OpenAI 백엔드와 동일, isOffensive 는 항상 False
- 교정 인용문은 본문에서 그대로 잘라오므로 항상 위치를 찾을 수 있다
"""
from __future__ import annotations

import re

from essay_review.schemas.analysis import AnalysisResult, QuotedCorrection
from essay_review.services.scoring import clamp_score

MAX_CORRECTIONS = 10
LONG_SENTENCE_WORDS = 35
FILLER_WORDS = ("very", "really", "basically", "actually", "literally", "just")
EVIDENCE_MARKERS = ("according to", "research", "study", "studies", "survey", "data", "evidence", "http")

_RE_WORD = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)?|\d+")
_RE_SENTENCE = re.compile(r"[^.!?]+[.!?]*")
_RE_REPEATED = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
_RE_DOUBLE_SPACE = re.compile(r"\S  +\S")


def _sentences(content: str) -> list[str]:
    return [s.strip() for s in _RE_SENTENCE.findall(content) if s.strip()]


def _paragraphs(content: str) -> list[str]:
    return [p for p in re.split(r"\n\s*\n", content) if p.strip()]


def _snippet(text: str, limit: int = 60) -> str:
    # 인용문은 본문의 앞부분을 그대로 자른 것이어야 한다
    return text[:limit].rstrip()


def _scores(content: str) -> dict[str, int]:
    words = _RE_WORD.findall(content)
    word_count = len(words)
    sentences = _sentences(content)
    paragraphs = _paragraphs(content)
    lowered = content.lower()

    avg_sentence = word_count / len(sentences) if sentences else 0
    unique_ratio = len({w.lower() for w in words}) / word_count if word_count else 0
    lowercase_starts = sum(1 for s in sentences if s[0].islower())
    repeated = len(_RE_REPEATED.findall(content))
    double_spaces = len(_RE_DOUBLE_SPACE.findall(content))
    evidence = sum(lowered.count(m) for m in EVIDENCE_MARKERS) + len(re.findall(r"\d+%", content))

    return {
        "grammarScore": clamp_score(160 - 10 * lowercase_starts - 15 * repeated - 5 * double_spaces),
        "styleScore": clamp_score(60 + 120 * unique_ratio - 5 * sum(lowered.count(f" {w} ") for w in FILLER_WORDS)),
        "clarityScore": clamp_score(170 - 4 * max(0.0, avg_sentence - 20)),
        "structureScore": clamp_score(80 + 20 * min(len(paragraphs), 5)),
        "contentScore": clamp_score(60 + min(word_count, 600) / 5),
        "researchScore": clamp_score(70 + 15 * min(evidence, 8)),
    }


def _corrections(content: str) -> list[QuotedCorrection]:
    found: list[QuotedCorrection] = []
    sentences = _sentences(content)

    for s in sentences:
        if s[0].islower():
            found.append(QuotedCorrection(
                category="grammar",
                exact_quote=_snippet(s, 30),
                comment="Sentences should start with a capital letter.",
            ))
            break

    for m in _RE_REPEATED.finditer(content):
        found.append(QuotedCorrection(
            category="grammar",
            exact_quote=m.group(0),
            comment=f"The word \"{m.group(1)}\" is repeated.",
        ))

    for s in sentences:
        if len(_RE_WORD.findall(s)) > LONG_SENTENCE_WORDS:
            found.append(QuotedCorrection(
                category="clarity",
                exact_quote=_snippet(s),
                comment="This sentence is very long; consider splitting it into shorter ones.",
            ))

    for w in FILLER_WORDS:
        m = re.search(rf"\b{w}\b", content, re.IGNORECASE)
        if m:
            found.append(QuotedCorrection(
                category="style",
                exact_quote=m.group(0),
                comment=f"\"{m.group(0)}\" adds little meaning; try a more precise word or remove it.",
            ))

    words = _RE_WORD.findall(content)
    if sentences and len(_paragraphs(content)) == 1 and len(words) > 150:
        found.append(QuotedCorrection(
            category="structure",
            exact_quote=_snippet(sentences[0]),
            comment="The essay is a single block of text; organize it into paragraphs.",
        ))

    lowered = content.lower()
    if sentences and not any(m in lowered for m in EVIDENCE_MARKERS):
        found.append(QuotedCorrection(
            category="research",
            exact_quote=_snippet(sentences[-1]),
            comment="Support your argument with sources, data or examples.",
        ))

    return found[:MAX_CORRECTIONS]


def generate_fallback_analysis(title: str, content: str) -> AnalysisResult:
    data = {
        **_scores(content),
        "isOffensive": False,
        "offenseReason": None,
        "corrections": [c.model_dump(by_alias=True) for c in _corrections(content)],
    }
    return AnalysisResult.model_validate(data)
