# backend/settings/__init__.py
"""
Settings package.

Nothing is imported here; DJANGO_SETTINGS_MODULE selects the concrete module:
- backend.settings.dev   (local development, tests)
- backend.settings.prod  (production)
"""
