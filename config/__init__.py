# config/__init__.py

# اطمینان از بارگذاری Celery هنگام شروع جنگو
from .celery import app as celery_app

__all__ = ('celery_app',)
