"""
Cells app configuration.
"""
from django.apps import AppConfig


class CellsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.cells'
    verbose_name = 'Cellules'
