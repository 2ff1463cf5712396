"""
공통 fixture: 포트별 in-memory fake

Django / R2 / Redis 없이 도메인·유스케이스·스토리지 어댑터를 검증한다.
"""
import io
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError

from academy.adapters.storage.object_storage_paper_store import ObjectStoragePaperStore
from academy.application.use_cases.exams.aggregate_sync import AggregateSynchronizer
from academy.application.use_cases.exams.exam_names import ExamNameResolver
from academy.domain.exams.entities import ExamRecord, ExamStatus, Question, QuestionType
from academy.domain.exams.errors import InfrastructureError, PaperStorageError

BASE_TIME = datetime(2025, 1, 31, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """호출할 때마다 1초씩 증가."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


class InMemoryObjectStorage:
    def __init__(self):
        self.objects = {}
        self.fail_put = False
        self.fail_get = False
        self.fail_delete = False
        self.put_calls = 0

    def get_bytes(self, key):
        if self.fail_get:
            raise PaperStorageError("get timeout", key=key)
        return self.objects.get(key)

    def put_bytes(self, key, body, content_type="application/json"):
        if self.fail_put:
            raise PaperStorageError("put timeout", key=key)
        self.put_calls += 1
        self.objects[key] = bytes(body)

    def delete(self, key):
        if self.fail_delete:
            raise PaperStorageError("delete timeout", key=key)
        return self.objects.pop(key, None) is not None

    def exists(self, key):
        return key in self.objects

    def list_keys(self, prefix=""):
        return sorted(k for k in self.objects if k.startswith(prefix))


class FakeExamStore:
    def __init__(self, exams=()):
        self.exams = {e.id: e for e in exams}
        self.fail_total_marks = False
        self.fail_set_status = False
        self.name_lookups = 0
        self._next_id = max(self.exams, default=0) + 1

    def add(self, **fields):
        defaults = dict(
            id=self._next_id,
            name=f"Exam {self._next_id}",
            subject="Math",
            date=date(2025, 2, 1),
            duration=60,
            total_marks=100,
            status=ExamStatus.UPCOMING,
        )
        defaults.update(fields)
        record = ExamRecord(**defaults)
        self.exams[record.id] = record
        self._next_id = max(self._next_id, record.id) + 1
        return record

    def get(self, exam_id):
        e = self.exams.get(exam_id)
        return replace(e) if e else None

    def list_all(self):
        return [replace(e) for e in sorted(self.exams.values(), key=lambda e: e.id)]

    def get_name(self, exam_id):
        self.name_lookups += 1
        e = self.exams.get(exam_id)
        return e.name if e else None

    def update_total_marks(self, exam_id, marks):
        if self.fail_total_marks:
            raise InfrastructureError("db connection lost")
        if exam_id not in self.exams:
            return False
        self.exams[exam_id] = replace(self.exams[exam_id], total_marks=marks)
        return True

    def get_status(self, exam_id):
        e = self.exams.get(exam_id)
        return e.status if e else None

    def set_status(self, exam_id, status):
        if self.fail_set_status:
            raise InfrastructureError("db connection lost")
        if exam_id not in self.exams:
            return False
        self.exams[exam_id] = replace(self.exams[exam_id], status=ExamStatus(status))
        return True

    def create(self, record):
        return self.add(**{**record.__dict__, "id": self._next_id})

    def update(self, exam_id, changes):
        if exam_id not in self.exams:
            return None
        self.exams[exam_id] = replace(self.exams[exam_id], **changes)
        return replace(self.exams[exam_id])

    def delete(self, exam_id):
        return self.exams.pop(exam_id, None) is not None


class FakeResultStore:
    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def upsert(self, student_id, exam_id, result):
        existing = self.rows.get((student_id, exam_id))
        row_id = existing.id if existing else self._next_id
        if not existing:
            self._next_id += 1
        saved = replace(result, id=row_id, student_id=student_id, exam_id=exam_id)
        self.rows[(student_id, exam_id)] = saved
        return replace(saved)

    def by_exam(self, exam_id):
        return [replace(r) for (_, e), r in self.rows.items() if e == exam_id]

    def by_student(self, student_id):
        return [replace(r) for (s, _), r in self.rows.items() if s == student_id]

    def count_by_exam(self, exam_id):
        return len(self.by_exam(exam_id))


class FakeStudentDirectory:
    def __init__(self, ids=(1, 2, 3)):
        self.ids = list(ids)

    def count(self):
        return len(self.ids)

    def all(self):
        return list(self.ids)

    def exists(self, student_id):
        return student_id in self.ids


class InMemoryNameCache:
    def __init__(self):
        self.values = {}
        self.invalidated = []

    def get(self, exam_id):
        return self.values.get(exam_id)

    def set(self, exam_id, name):
        self.values[exam_id] = name

    def invalidate(self, exam_id):
        self.invalidated.append(exam_id)
        self.values.pop(exam_id, None)


class FakeS3Client:
    """boto3 s3 client 대역. 없는 키는 실제와 같은 ClientError 코드로 실패."""

    def __init__(self):
        self.objects = {}
        self.error_code = None

    def _maybe_fail(self, op):
        if self.error_code:
            raise ClientError({"Error": {"Code": self.error_code, "Message": "boom"}}, op)

    def get_object(self, Bucket, Key):
        self._maybe_fail("GetObject")
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        self._maybe_fail("PutObject")
        self.objects[(Bucket, Key)] = Body

    def head_object(self, Bucket, Key):
        self._maybe_fail("HeadObject")
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {}

    def delete_object(self, Bucket, Key):
        self._maybe_fail("DeleteObject")
        self.objects.pop((Bucket, Key), None)
        return {}

    def get_paginator(self, name):
        client = self

        class _Paginator:
            def paginate(self, Bucket, Prefix=""):
                client._maybe_fail("ListObjectsV2")
                keys = sorted(k for b, k in client.objects if b == Bucket and k.startswith(Prefix))
                # 2개씩 페이지 분할
                for i in range(0, max(len(keys), 1), 2):
                    chunk = keys[i:i + 2]
                    yield {"Contents": [{"Key": k} for k in chunk]} if chunk else {}

        return _Paginator()


def make_question(
    qid="q1",
    qtype=QuestionType.MULTIPLE_CHOICE,
    marks=2,
    order_index=0,
    options=None,
    correct_answer="B",
    text="What is 1 + 1?",
):
    if options is None and qtype == QuestionType.MULTIPLE_CHOICE:
        options = ["A", "B", "C"]
    return Question(
        id=qid,
        text=text,
        type=qtype,
        marks=marks,
        order_index=order_index,
        created_at="2025-01-31T09:00:00.000Z",
        updated_at="2025-01-31T09:00:00.000Z",
        options=options,
        correct_answer=correct_answer,
    )


# ---------------------------------------------------------------------------
# fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def object_storage():
    return InMemoryObjectStorage()


@pytest.fixture
def exam_store():
    return FakeExamStore()


@pytest.fixture
def result_store():
    return FakeResultStore()


@pytest.fixture
def students():
    return FakeStudentDirectory()


@pytest.fixture
def name_cache():
    return InMemoryNameCache()


@pytest.fixture
def names(exam_store, name_cache):
    return ExamNameResolver(exam_store, cache=name_cache)


@pytest.fixture
def paper_store(object_storage, names, clock):
    return ObjectStoragePaperStore(object_storage, names, clock=clock)


@pytest.fixture
def synchronizer(exam_store):
    return AggregateSynchronizer(exam_store)
