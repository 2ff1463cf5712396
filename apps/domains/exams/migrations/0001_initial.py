from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Exam",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("subject", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                ("date", models.DateField()),
                ("start_time", models.DateTimeField(blank=True, null=True)),
                ("duration", models.PositiveIntegerField()),
                ("total_marks", models.PositiveIntegerField(default=100)),
                (
                    "status",
                    models.CharField(
                        choices=[("upcoming", "Upcoming"), ("active", "Active"), ("completed", "Completed")],
                        default="upcoming",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "db_table": "exams_exam",
                "ordering": ["-date", "-id"],
                "indexes": [models.Index(fields=["status"], name="exams_exam_status_idx")],
            },
        ),
    ]
