"""
도메인 공통: ID / 타임스탬프 생성 (외부 라이브러리 없음)

저장된 paper JSON과 호환되도록 기존 포맷을 그대로 유지한다.
- paper:    paper_{examId}_{epochMillis}
- question: question_{examId}_{epochMillis}_{random9}
- 시각:     2025-01-31T09:00:00.000Z (UTC, 밀리초)
"""
from __future__ import annotations

import random
import re
import string
from datetime import datetime, timezone
from typing import Any, Optional

_PAPER_ID_RE = re.compile(r"^paper_(\d+)_")
_ID_ALPHABET = string.ascii_lowercase + string.digits


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso_millis(dt: datetime) -> str:
    """datetime → 'YYYY-MM-DDTHH:MM:SS.mmmZ'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def epoch_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_paper_id(exam_id: int, now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    return f"paper_{int(exam_id)}_{epoch_millis(now)}"


def generate_question_id(exam_id: int, now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"question_{int(exam_id)}_{epoch_millis(now)}_{suffix}"


def exam_id_from_paper_id(paper_id: str) -> Optional[int]:
    """
    'paper_5_new' / 'paper_5_1712345678901' → 5.
    숫자 문자열이면 그대로 int. 해석 불가면 None.
    """
    raw = (paper_id or "").strip()
    m = _PAPER_ID_RE.match(raw)
    if m:
        return int(m.group(1))
    if raw.isdigit():
        return int(raw)
    return None


def parse_exam_id(raw: Any) -> Optional[int]:
    """요청 본문의 examId: 양의 정수 / 숫자 문자열만 허용. 그 외는 None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = str(raw or "").strip()
    if text.isdigit() and int(text) > 0:
        return int(text)
    return None
