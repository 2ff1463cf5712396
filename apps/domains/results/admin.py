from django.contrib import admin
from .models import Result


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "student",
        "exam",
        "score",
        "attempted_marks",
        "percentage",
        "submitted_at",
    )
    list_filter = ("exam",)
    search_fields = ("student__name", "exam__name")
