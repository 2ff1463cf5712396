from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "email",
        "class_name",
        "user",
        "created_at",
    )
    list_filter = ("class_name",)
    search_fields = ("name", "email")
