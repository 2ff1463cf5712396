# PATH: apps/api/config/wsgi.py
import os

from django.core.wsgi import get_wsgi_application

# gunicorn 진입점 → 운영 설정 (R2 환경변수 필수)
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.api.config.settings.prod")

application = get_wsgi_application()
