# PATH: apps/domains/exams/management/commands/sync_exam_marks.py
"""
시험 레코드 total_marks 를 문제지 배점 합계로 다시 맞춘다.

- 문제지 저장 직후 동기화가 실패한 경우의 복구용
- 문제지가 없는 시험은 0 으로 맞춘다

사용:
  python manage.py sync_exam_marks
  python manage.py sync_exam_marks --exam-id 12
  python manage.py sync_exam_marks --dry-run
"""
from django.core.management.base import BaseCommand, CommandError

from academy.domain.exams.errors import ExamNotFoundError
from apps.domains.exams.services.wiring import marks_maintenance


class Command(BaseCommand):
    help = "시험 총점을 문제지 문항 배점 합계로 동기화합니다."

    def add_arguments(self, parser):
        parser.add_argument(
            "--exam-id",
            type=int,
            default=None,
            help="특정 시험만 동기화 (미지정 시 전체)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="실제 갱신 없이 불일치만 출력",
        )

    def handle(self, *args, **options):
        exam_id = options["exam_id"]
        dry_run = options["dry_run"]
        maintenance = marks_maintenance()

        if dry_run:
            self._report(maintenance, exam_id)
            self.stdout.write(self.style.WARNING("--dry-run: 실제 갱신하지 않음"))
            return

        try:
            if exam_id is not None:
                warning = maintenance.force_sync(exam_id)
                warnings = [warning] if warning is not None else []
            else:
                warnings = maintenance.sync_all()
        except ExamNotFoundError as e:
            raise CommandError(str(e)) from e

        for w in warnings:
            self.stdout.write(self.style.ERROR(w.message))
        if warnings:
            raise CommandError(f"동기화 실패 {len(warnings)}건")
        self.stdout.write(self.style.SUCCESS("동기화 완료"))

    def _report(self, maintenance, exam_id):
        from academy.adapters.db.django.repositories_exams import DjangoExamRecordStore

        ids = [exam_id] if exam_id is not None else [e.id for e in DjangoExamRecordStore().list_all()]
        mismatched = 0
        for eid in ids:
            try:
                report = maintenance.inspect_marks(eid)
            except ExamNotFoundError as e:
                raise CommandError(str(e)) from e
            if report.discrepancy:
                mismatched += 1
                self.stdout.write(
                    f"  - exam {report.exam_id} ({report.exam_name}): "
                    f"record={report.exam_total_marks} paper={report.paper_total_marks}"
                )
        self.stdout.write(f"불일치: {mismatched}건 / 전체 {len(ids)}건")
