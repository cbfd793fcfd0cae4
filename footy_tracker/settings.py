import os
from pathlib import Path
import dj_database_url
from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET', 'dev-secret')
DEBUG = os.environ.get('DEBUG', 'False') == 'True'
ALLOWED_HOSTS = ["*"]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party
    'channels',
    'django_celery_beat',

    # local apps
    'accounts',
    'catalog',
    'traffic',
    'comments',
]
ROOT_URLCONF = 'footy_tracker.urls'

ASGI_APPLICATION = 'footy_tracker.asgi.application'
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

DATABASES = {
    'default': dj_database_url.config(
        default=os.environ.get('DATABASE_URL', f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
        conn_max_age=600,
    )
}
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Channels & Celery share one redis; without it use the in-memory layer (local dev, tests)
REDIS_URL = os.environ.get('REDIS_URL', '')
if REDIS_URL:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels_redis.core.RedisChannelLayer",
            "CONFIG": {
                "hosts": [REDIS_URL],
            },
        },
    }
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
        },
    }
else:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels.layers.InMemoryChannelLayer",
        },
    }
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        },
    }

CELERY_BROKER_URL = REDIS_URL or 'redis://localhost:6379'
CELERY_RESULT_BACKEND = CELERY_BROKER_URL
CELERY_BEAT_SCHEDULER = 'django_celery_beat.schedulers:DatabaseScheduler'
CELERY_BEAT_SCHEDULE = {
    'reconcile-traffic-cache': {
        'task': 'traffic.tasks.reconcile_traffic_cache',
        'schedule': crontab(minute='*/15'),
    },
}

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

USE_TZ = True
TIME_ZONE = 'UTC'

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")

# Traffic consensus. Older deployments used 10 or 20; keep it configurable
TRAFFIC_CONSENSUS_WINDOW = int(os.environ.get('TRAFFIC_CONSENSUS_WINDOW', '10'))
TRAFFIC_RECENT_REPORTS = int(os.environ.get('TRAFFIC_RECENT_REPORTS', '5'))
FIELD_RECENT_COMMENTS = int(os.environ.get('FIELD_RECENT_COMMENTS', '5'))
NEARBY_FIELDS_LIMIT = int(os.environ.get('NEARBY_FIELDS_LIMIT', '10'))

# Admin allow-list, comma separated e-mails
FOOTY_ADMIN_EMAILS = [
    e.strip() for e in os.environ.get('FOOTY_ADMIN_EMAILS', '').split(',') if e.strip()
]

GEOCODER_USER_AGENT = os.environ.get('GEOCODER_USER_AGENT', 'footy-tracker')
GEOCODER_TIMEOUT = int(os.environ.get('GEOCODER_TIMEOUT', '10'))

# Current weather on the field detail page; disabled without a key
OPENWEATHER_API_KEY = os.environ.get('OPENWEATHER_API_KEY', '')
OPENWEATHER_URL = os.environ.get('OPENWEATHER_URL', 'https://api.openweathermap.org/data/2.5/weather')
WEATHER_TIMEOUT = int(os.environ.get('WEATHER_TIMEOUT', '10'))
WEATHER_CACHE_SECONDS = int(os.environ.get('WEATHER_CACHE_SECONDS', str(3 * 60 * 60)))

DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'noreply@example.com')
EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}

# Security
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_TRUSTED_ORIGINS = [f"https://{os.environ.get('RAILWAY_STATIC_URL', 'localhost')}"]
