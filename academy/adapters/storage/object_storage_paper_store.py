"""
PaperStore 구현: 객체 스토리지에 시험당 JSON 문서 1개

키 포맷 (기존 저장 문서와 호환 필수):
    exam_{examId}_{sanitized exam name}_paper.json

키에 표시 이름이 들어가므로 시험 이름이 바뀌면 이전 키가 고아가 된다.
→ 이름 변경 시 rename_key 로 옮긴다 (이전 키가 없으면 no-op 성공).

get 은 캐시 없이 항상 스토리지에서 읽는다.
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Callable, Optional

from academy.application.ports.storage import ObjectStorage
from academy.application.use_cases.exams.exam_names import ExamNameResolver
from academy.domain.exams.entities import Paper, PaperDraft
from academy.domain.exams.errors import PaperStorageError
from academy.domain.exams.validation import validate_question_set
from academy.domain.shared.ids import generate_paper_id, to_iso_millis, utc_now

logger = logging.getLogger(__name__)

PAPER_KEY_SUFFIX = "_paper.json"

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9\-_\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_exam_name(name: str) -> str:
    """영숫자/-/_/공백 외 제거 후 공백 묶음 → '_'."""
    return _WHITESPACE_RE.sub("_", _UNSAFE_CHARS_RE.sub("", name or ""))


def paper_key(exam_id: int, exam_name: str) -> str:
    return f"exam_{int(exam_id)}_{sanitize_exam_name(exam_name)}{PAPER_KEY_SUFFIX}"


class ObjectStoragePaperStore:
    def __init__(
        self,
        storage: ObjectStorage,
        names: ExamNameResolver,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._names = names
        self._clock = clock

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _key(self, exam_id: int) -> str:
        return paper_key(exam_id, self._names.resolve(exam_id))

    @staticmethod
    def _decode(key: str, body: bytes) -> Paper:
        try:
            return Paper.from_document(json.loads(body.decode("utf-8")))
        except (ValueError, KeyError, TypeError) as e:
            raise PaperStorageError(f"corrupt paper document: {e}", key=key) from e

    @staticmethod
    def _encode(paper: Paper) -> bytes:
        return json.dumps(paper.to_document(), indent=2, ensure_ascii=False).encode("utf-8")

    # -----------------------------
    # PaperStore
    # -----------------------------
    def get(self, exam_id: int) -> Optional[Paper]:
        key = self._key(exam_id)
        body = self._storage.get_bytes(key)
        if body is None:
            return None
        return self._decode(key, body)

    def save(self, exam_id: int, draft: PaperDraft) -> Paper:
        validate_question_set(draft.questions)

        exam_name = self._names.resolve(exam_id)
        key = paper_key(exam_id, exam_name)

        existing_body = self._storage.get_bytes(key)
        existing = self._decode(key, existing_body) if existing_body is not None else None

        now = self._clock()
        now_iso = to_iso_millis(now)
        paper = Paper(
            id=existing.id if existing else generate_paper_id(exam_id, now),
            exam_id=int(exam_id),
            title=draft.title,
            instructions=draft.instructions,
            created_at=existing.created_at if existing else now_iso,
            updated_at=now_iso,
            exam_name_snapshot=exam_name,
            questions=sorted(draft.questions, key=lambda q: q.order_index),
        )

        self._storage.put_bytes(key, self._encode(paper))
        logger.info(
            "PAPER_SAVE exam_id=%s key=%s questions=%s total_marks=%s",
            exam_id, key, paper.total_questions, paper.total_marks,
        )
        return paper

    def rename_key(self, exam_id: int, old_exam_name: str) -> bool:
        # 새 이름을 다시 읽도록 캐시부터 비운다
        self._names.invalidate(exam_id)

        old_key = paper_key(exam_id, old_exam_name)
        new_key = self._key(exam_id)
        if old_key == new_key:
            logger.info("PAPER_RENAME exam_id=%s key=%s unchanged", exam_id, old_key)
            return True

        body = self._storage.get_bytes(old_key)
        if body is None:
            logger.info("PAPER_RENAME exam_id=%s old_key=%s not found, noop", exam_id, old_key)
            return True

        self._storage.put_bytes(new_key, body)
        try:
            self._storage.delete(old_key)
        except PaperStorageError:
            # 새 키 업로드는 끝났으므로 실패로 보지 않는다
            logger.warning(
                "PAPER_RENAME exam_id=%s old_key=%s delete failed", exam_id, old_key, exc_info=True
            )

        logger.info("PAPER_RENAME exam_id=%s %s -> %s", exam_id, old_key, new_key)
        return True

    def delete(self, exam_id: int, exam_name: Optional[str] = None) -> bool:
        key = paper_key(exam_id, exam_name) if exam_name else self._key(exam_id)
        if not self._storage.delete(key):
            logger.info("PAPER_DELETE exam_id=%s key=%s absent, treated as deleted", exam_id, key)
        else:
            logger.info("PAPER_DELETE exam_id=%s key=%s", exam_id, key)
        return True

    def list_all(self) -> list[Paper]:
        papers: list[Paper] = []
        for key in self._storage.list_keys(prefix="exam_"):
            if not key.endswith(PAPER_KEY_SUFFIX):
                continue
            body = self._storage.get_bytes(key)
            if body is None:
                continue
            try:
                papers.append(self._decode(key, body))
            except PaperStorageError:
                logger.warning("PAPER_LIST key=%s unreadable, skipped", key, exc_info=True)
        return papers
