#!/usr/bin/env python
"""
시험 관리 백엔드 manage.py

    python manage.py migrate
    python manage.py runserver
    python manage.py sync_exam_marks [--exam-id N] [--dry-run]
"""
import os
import sys
from pathlib import Path


def main():
    # academy/ (도메인·유스케이스) 와 apps/ (Django) 가 나란히 있는 루트
    root = Path(__file__).resolve().parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.api.config.settings.dev")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not installed. Run `pip install -e .[test]` first."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
