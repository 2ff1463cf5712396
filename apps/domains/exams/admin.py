from django.contrib import admin
from .models import Exam


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "subject",
        "date",
        "start_time",
        "status",
        "total_marks",
    )
    list_filter = ("status", "subject")
    search_fields = ("name", "subject")
    # 문제지 배점 합계로만 갱신
    readonly_fields = ("total_marks",)
