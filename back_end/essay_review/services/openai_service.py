import json
import logging
from typing import Optional

from openai import OpenAI
from dotenv import load_dotenv

from essay_review.core.config import settings
from essay_review.schemas.analysis import AnalysisResult

load_dotenv()
logger = logging.getLogger(__name__)

ESSAY_REVIEWER_PROMPT = """
You are an expert academic writing tutor and a content moderator.
Analyze the essay and return structured feedback as a single JSON object.

Scoring:
- Evaluate 6 categories: grammar, style, clarity, structure, content, research.
- Assign a score from 0 to 200 for EACH category. Be rigorous but fair.

Moderation:
- Set "isOffensive" to true only if the essay contains hate speech, harassment,
  sexual content involving minors, incitement to violence or similar abuse.
- When "isOffensive" is true, explain why in "offenseReason" (one sentence).

Corrections:
- Focus on the most impactful issues. Aim for 3 to 10 corrections.
- "exactQuote" must be copied verbatim from the essay text.

Output JSON only:
{
  "grammarScore": number,
  "styleScore": number,
  "clarityScore": number,
  "structureScore": number,
  "contentScore": number,
  "researchScore": number,
  "isOffensive": boolean,
  "offenseReason": string | null,
  "corrections": [
    { "category": "grammar"|"style"|"clarity"|"structure"|"content"|"research", "exactQuote": string, "comment": string }
  ]
}
""".strip()


# ---------- OpenAI client (첫 호출 시 1회 생성) ----------
_openai_client: Optional[OpenAI] = None
def get_openai_client() -> OpenAI:
    global _openai_client
    if _openai_client is None:
        key = settings.OPENAI_API_KEY
        if not key:
            raise RuntimeError("OPENAI_API_KEY 환경변수가 없습니다.")
        _openai_client = OpenAI(api_key=key)
    return _openai_client


def build_input_items(title: str, content: str) -> list[dict]:
    return [
        {"role": "system", "content": ESSAY_REVIEWER_PROMPT},
        {"role": "user", "content": f"Title: {title}\n\nEssay Content:\n{content}"},
    ]


def analyze_essay_with_openai(title: str, content: str) -> AnalysisResult:
    response = get_openai_client().responses.create(
        model=settings.OPENAI_MODEL,
        input=build_input_items(title, content),
        text={"format": {"type": "json_object"}},
        temperature=settings.OPENAI_TEMPERATURE,
        max_output_tokens=settings.OPENAI_MAX_OUTPUT_TOKENS,
        store=False,
    )

    raw = (response.output_text or "").strip()
    if not raw:
        raise ValueError("OpenAI returned an empty response")

    # 파싱/검증 실패는 호출 측에서 fallback 처리
    return AnalysisResult.model_validate(json.loads(raw))


class OpenAIAnalysisBackend:
    def analyze(self, title: str, content: str) -> AnalysisResult:
        logger.info("calling %s for essay analysis", settings.OPENAI_MODEL)
        return analyze_essay_with_openai(title, content)
