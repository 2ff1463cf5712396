"""
Exam / Result / Student 저장소: Django ORM 구현
(메서드 내부에서만 apps.domains.* import)
"""
from __future__ import annotations

from typing import Optional

from academy.domain.exams.entities import ExamRecord, ExamResult, ExamStatus


def _exam_to_entity(m) -> Optional[ExamRecord]:
    if m is None:
        return None
    return ExamRecord(
        id=m.id,
        name=m.name,
        subject=m.subject,
        date=m.date,
        duration=int(m.duration or 0),
        total_marks=int(m.total_marks or 0),
        status=ExamStatus(m.status) if m.status else ExamStatus.UPCOMING,
        start_time=m.start_time,
        description=m.description or None,
    )


def _result_to_entity(m) -> Optional[ExamResult]:
    if m is None:
        return None
    return ExamResult(
        id=m.id,
        student_id=m.student_id,
        exam_id=m.exam_id,
        score=int(m.score or 0),
        attempted_marks=int(m.attempted_marks or 0),
        percentage=int(m.percentage or 0),
        submitted_at=m.submitted_at,
        answers=dict(m.answers or {}),
    )


class DjangoExamRecordStore:
    """ExamRecordStore 구현."""

    def get(self, exam_id: int) -> Optional[ExamRecord]:
        from apps.domains.exams.models import Exam
        return _exam_to_entity(Exam.objects.filter(id=exam_id).first())

    def list_all(self) -> list[ExamRecord]:
        from apps.domains.exams.models import Exam
        return [_exam_to_entity(m) for m in Exam.objects.order_by("date", "id")]

    def get_name(self, exam_id: int) -> Optional[str]:
        from apps.domains.exams.models import Exam
        return Exam.objects.filter(id=exam_id).values_list("name", flat=True).first()

    def update_total_marks(self, exam_id: int, marks: int) -> bool:
        from django.utils import timezone
        from apps.domains.exams.models import Exam
        updated = Exam.objects.filter(id=exam_id).update(
            total_marks=int(marks), updated_at=timezone.now()
        )
        return updated > 0

    def get_status(self, exam_id: int) -> Optional[ExamStatus]:
        from apps.domains.exams.models import Exam
        raw = Exam.objects.filter(id=exam_id).values_list("status", flat=True).first()
        return ExamStatus(raw) if raw else None

    def set_status(self, exam_id: int, status: ExamStatus) -> bool:
        from django.utils import timezone
        from apps.domains.exams.models import Exam
        updated = Exam.objects.filter(id=exam_id).update(
            status=ExamStatus(status).value, updated_at=timezone.now()
        )
        return updated > 0

    def create(self, record: ExamRecord) -> ExamRecord:
        from apps.domains.exams.models import Exam
        m = Exam.objects.create(
            name=record.name,
            subject=record.subject,
            date=record.date,
            start_time=record.start_time,
            duration=record.duration,
            total_marks=record.total_marks,
            status=ExamStatus(record.status).value,
            description=record.description or "",
        )
        return _exam_to_entity(m)

    def update(self, exam_id: int, changes: dict) -> Optional[ExamRecord]:
        from apps.domains.exams.models import Exam
        m = Exam.objects.filter(id=exam_id).first()
        if m is None:
            return None
        fields = []
        for name, value in changes.items():
            if name == "status":
                value = ExamStatus(value).value
            setattr(m, name, value)
            fields.append(name)
        if fields:
            m.save(update_fields=[*fields, "updated_at"])
        return _exam_to_entity(m)

    def delete(self, exam_id: int) -> bool:
        from apps.domains.exams.models import Exam
        deleted, _ = Exam.objects.filter(id=exam_id).delete()
        return deleted > 0


class DjangoResultStore:
    """ResultStore 구현. (student, exam) unique 제약 + update_or_create."""

    def upsert(self, student_id: int, exam_id: int, result: ExamResult) -> ExamResult:
        from django.db import transaction
        from apps.domains.results.models import Result
        with transaction.atomic():
            m, _created = Result.objects.update_or_create(
                student_id=student_id,
                exam_id=exam_id,
                defaults={
                    "score": result.score,
                    "attempted_marks": result.attempted_marks,
                    "percentage": result.percentage,
                    "answers": dict(result.answers or {}),
                    "submitted_at": result.submitted_at,
                },
            )
        return _result_to_entity(m)

    def by_exam(self, exam_id: int) -> list[ExamResult]:
        from apps.domains.results.models import Result
        qs = Result.objects.filter(exam_id=exam_id).order_by("submitted_at", "id")
        return [_result_to_entity(m) for m in qs]

    def by_student(self, student_id: int) -> list[ExamResult]:
        from apps.domains.results.models import Result
        qs = Result.objects.filter(student_id=student_id).order_by("submitted_at", "id")
        return [_result_to_entity(m) for m in qs]

    def count_by_exam(self, exam_id: int) -> int:
        from apps.domains.results.models import Result
        return Result.objects.filter(exam_id=exam_id).count()


class DjangoStudentDirectory:
    """StudentDirectory 구현."""

    def count(self) -> int:
        from apps.domains.students.models import Student
        return Student.objects.count()

    def all(self) -> list[int]:
        from apps.domains.students.models import Student
        return list(Student.objects.order_by("id").values_list("id", flat=True))

    def exists(self, student_id: int) -> bool:
        from apps.domains.students.models import Student
        return Student.objects.filter(id=student_id).exists()
