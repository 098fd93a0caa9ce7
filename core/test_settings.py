"""
Test settings.

Runs against SQLite with Celery tasks executed inline and an in-memory mail
backend, so the test suite needs no Redis, PostgreSQL or SMTP server.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from core.settings import *  # noqa: E402,F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

SECURE_SSL_REDIRECT = False

RECAPTCHA_SITE_KEY = ''
RECAPTCHA_SECRET_KEY = ''

CONTACT_EMAIL_TO = 'support@example.com'
CONTACT_EMAIL_FROM = 'noreply@example.com'
CONTACT_EMAIL_REPLY_TO = 'support@example.com'
