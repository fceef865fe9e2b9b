"""
Django settings for the DFA service.

Deployment specific values are read from DFA_SERVICE_* environment variables.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DFA_SERVICE_SECRET_KEY', 'django-insecure-dfa-service-development-key')

DEBUG = os.environ.get('DFA_SERVICE_DEBUG', '1') == '1'

ALLOWED_HOSTS = [
    host for host in os.environ.get('DFA_SERVICE_ALLOWED_HOSTS', '127.0.0.1,localhost').split(',')
    if host
]

INSTALLED_APPS = [
    'automata',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'dfa_service.urls'

WSGI_APPLICATION = 'dfa_service.wsgi.application'

# No models; the database only exists so the test runner can set up
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'automata': {
            'handlers': ['console'],
            'level': os.environ.get('DFA_SERVICE_LOG_LEVEL', 'INFO'),
        },
    },
}
