"""
Django settings for the AWD document tracking project.

Deployment values come from AWDTRACK_* environment variables; the defaults
are suitable for local development only.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    return [item.strip() for item in os.environ.get(name, default).split(',') if item.strip()]


SECRET_KEY = os.environ.get('AWDTRACK_SECRET_KEY', 'django-insecure-awdtrack-development-key')

DEBUG = env_bool('AWDTRACK_DEBUG', True)

ALLOWED_HOSTS = env_list('AWDTRACK_ALLOWED_HOSTS', 'localhost,127.0.0.1')


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'accounts',
    'documents',
    'routing',
    'mis',
    'core',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'accounts.middleware.DivisionAccessMiddleware',
]

ROOT_URLCONF = 'awdtrack.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'awdtrack.wsgi.application'


DATABASES = {
    'default': {
        'ENGINE': os.environ.get('AWDTRACK_DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': os.environ.get('AWDTRACK_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        'USER': os.environ.get('AWDTRACK_DB_USER', ''),
        'PASSWORD': os.environ.get('AWDTRACK_DB_PASSWORD', ''),
        'HOST': os.environ.get('AWDTRACK_DB_HOST', ''),
        'PORT': os.environ.get('AWDTRACK_DB_PORT', ''),
    }
}


AUTH_USER_MODEL = 'accounts.User'

AUTHENTICATION_BACKENDS = [
    'accounts.backends.EmailBackend',
]

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LOGIN_URL = 'login'
LOGIN_REDIRECT_URL = 'dashboard'
LOGOUT_REDIRECT_URL = 'login'


LANGUAGE_CODE = 'en-us'

TIME_ZONE = os.environ.get('AWDTRACK_TIME_ZONE', 'Asia/Manila')

USE_I18N = True

USE_TZ = True


STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        name: {
            'handlers': ['console'],
            'level': os.environ.get('AWDTRACK_LOG_LEVEL', 'INFO'),
            'propagate': False,
        }
        for name in ('accounts', 'documents', 'routing', 'mis', 'core')
    },
}


# AWD tracking
AWD_REFERENCE_PREFIX = 'AWD'
AWD_WORKING_DAY_CHOICES = (3, 7, 20)
AWD_PAGE_SIZE = 10
