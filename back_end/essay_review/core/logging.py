import logging
import sys

from essay_review.core.config import settings

DEF_FMT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEF_DATE = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> None:
    """
    앱 시작 시 1회 호출. essay_review.* 로거 전체에 stdout 핸들러를 붙인다.
    이미 붙어 있으면 레벨만 갱신.
    """
    root = logging.getLogger("essay_review")
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEF_FMT, DEF_DATE))
    root.addHandler(handler)
    root.propagate = False
