# conftest.py
"""
Pytest configuration for SurveyBoard project.
Forces the use of test settings regardless of environment variables.
"""
import os

import django
from django.conf import settings

# Force test settings module before Django setup
os.environ['DJANGO_SETTINGS_MODULE'] = 'surveyboard.settings.test'


def pytest_configure():
    """Configure Django settings for pytest."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'surveyboard.settings.test')
    os.environ['DJANGO_ENV'] = 'test'

    if not settings.configured:
        django.setup()
