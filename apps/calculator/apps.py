# apps/calculator/apps.py

from django.apps import AppConfig


class CalculatorConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.calculator'
    verbose_name = 'Price Calculator'
