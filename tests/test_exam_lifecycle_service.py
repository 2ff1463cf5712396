"""ExamLifecycleService: 생성 / 수정 / 상태 전이 / 삭제."""

from datetime import date, datetime, timezone

import pytest
from conftest import make_question

from academy.application.use_cases.exams.exam_lifecycle import ExamInput, ExamLifecycleService
from academy.domain.exams.entities import ExamStatus, PaperDraft
from academy.domain.exams.errors import (
    ConflictingLifecycleError,
    ExamNotFoundError,
    ExamValidationError,
)

START = datetime(2025, 2, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(exam_store, paper_store, names):
    return ExamLifecycleService(exam_store, paper_store, names)


def _input(**overrides):
    data = dict(name="Midterm", subject="Math", date=date(2025, 2, 1), duration=90)
    data.update(overrides)
    return ExamInput(**data)


def _seed_paper(paper_store, exam_id):
    return paper_store.save(exam_id, PaperDraft(
        title="Paper", instructions="", questions=[make_question(marks=5)],
    ))


class TestCreate:
    def test_status_is_always_upcoming(self, service):
        exam = service.create_exam(_input(start_time=START))

        assert exam.status == ExamStatus.UPCOMING
        assert exam.total_marks == 100
        assert exam.start_time == START

    def test_duplicate_name_ignores_case(self, service, exam_store):
        exam_store.add(name="Midterm")

        with pytest.raises(ExamValidationError):
            service.create_exam(_input(name="  midterm "))

    def test_duplicate_start_time(self, service, exam_store):
        exam_store.add(name="Other", start_time=START)

        with pytest.raises(ExamValidationError):
            service.create_exam(_input(start_time=START))

    def test_requires_positive_duration(self, service):
        with pytest.raises(ExamValidationError):
            service.create_exam(_input(duration=0))


class TestUpdate:
    def test_rename_moves_paper_and_invalidates_cache(
        self, service, exam_store, paper_store, object_storage, name_cache
    ):
        exam = exam_store.add(name="Algebra")
        _seed_paper(paper_store, exam.id)
        assert name_cache.values[exam.id] == "Algebra"

        outcome = service.update_exam(exam.id, {"name": "Algebra II"})

        assert outcome.warnings == []
        assert outcome.exam.name == "Algebra II"
        assert exam.id in name_cache.invalidated
        assert list(object_storage.objects) == [f"exam_{exam.id}_Algebra_II_paper.json"]
        assert paper_store.get(exam.id).total_marks == 5

    def test_name_cached_during_rename_is_dropped_afterwards(
        self, service, exam_store, paper_store, name_cache, monkeypatch
    ):
        exam = exam_store.add(name="Algebra")
        _seed_paper(paper_store, exam.id)
        move = paper_store.rename_key

        def move_then_stale_read(exam_id, old_name):
            moved = move(exam_id, old_name)
            # 커밋 전 이름을 읽은 동시 요청이 캐시를 다시 채운 상황
            name_cache.set(exam_id, "Algebra")
            return moved

        monkeypatch.setattr(paper_store, "rename_key", move_then_stale_read)

        service.update_exam(exam.id, {"name": "Algebra II"})

        assert name_cache.get(exam.id) is None
        assert paper_store.get(exam.id).total_marks == 5

    def test_rename_storage_failure_is_a_warning(self, service, exam_store, paper_store, object_storage):
        exam = exam_store.add(name="Algebra")
        _seed_paper(paper_store, exam.id)
        object_storage.fail_put = True

        outcome = service.update_exam(exam.id, {"name": "Geometry"})

        assert exam_store.get(exam.id).name == "Geometry"
        assert len(outcome.warnings) == 1
        assert f"exam_{exam.id}_Algebra_paper.json" in object_storage.objects

    def test_duplicate_name_on_rename(self, service, exam_store):
        exam_store.add(name="Taken")
        exam = exam_store.add(name="Mine")

        with pytest.raises(ExamValidationError):
            service.update_exam(exam.id, {"name": "TAKEN"})

    def test_completed_exam_is_read_only(self, service, exam_store):
        exam = exam_store.add(status=ExamStatus.COMPLETED)

        with pytest.raises(ConflictingLifecycleError):
            service.update_exam(exam.id, {"subject": "Physics"})

    def test_active_back_to_upcoming_is_rejected(self, service, exam_store):
        exam = exam_store.add(status=ExamStatus.ACTIVE)

        with pytest.raises(ConflictingLifecycleError):
            service.update_exam(exam.id, {"status": "upcoming"})
        assert exam_store.get(exam.id).status == ExamStatus.ACTIVE

    def test_manual_total_marks_ignored_once_paper_exists(self, service, exam_store, paper_store):
        exam = exam_store.add(total_marks=5)
        _seed_paper(paper_store, exam.id)

        outcome = service.update_exam(exam.id, {"total_marks": 50, "duration": 45})

        assert outcome.exam.total_marks == 5
        assert outcome.exam.duration == 45

    def test_unknown_field(self, service, exam_store):
        exam = exam_store.add()

        with pytest.raises(ExamValidationError):
            service.update_exam(exam.id, {"id": 7})


class TestStatus:
    def test_forward_transitions(self, service, exam_store):
        exam = exam_store.add()

        assert service.set_status(exam.id, "active").status == ExamStatus.ACTIVE
        assert service.set_status(exam.id, ExamStatus.COMPLETED).status == ExamStatus.COMPLETED

    def test_same_status_is_noop(self, service, exam_store):
        exam = exam_store.add(status=ExamStatus.ACTIVE)
        exam_store.fail_set_status = True

        assert service.set_status(exam.id, "active").status == ExamStatus.ACTIVE

    def test_unknown_status(self, service, exam_store):
        exam = exam_store.add()

        with pytest.raises(ExamValidationError):
            service.set_status(exam.id, "archived")

    def test_unknown_exam(self, service):
        with pytest.raises(ExamNotFoundError):
            service.set_status(5, "active")


class TestDelete:
    def test_removes_record_and_paper(self, service, exam_store, paper_store, object_storage):
        exam = exam_store.add(name="Gone")
        _seed_paper(paper_store, exam.id)

        outcome = service.delete_exam(exam.id)

        assert outcome.warnings == []
        assert exam_store.get(exam.id) is None
        assert object_storage.objects == {}

    def test_paper_failure_is_a_warning(self, service, exam_store, paper_store, object_storage):
        exam = exam_store.add(name="Gone")
        _seed_paper(paper_store, exam.id)
        object_storage.fail_delete = True

        outcome = service.delete_exam(exam.id)

        assert exam_store.get(exam.id) is None
        assert len(outcome.warnings) == 1

    def test_delete_without_paper(self, service, exam_store):
        exam = exam_store.add()

        assert service.delete_exam(exam.id).warnings == []
