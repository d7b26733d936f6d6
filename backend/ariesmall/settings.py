import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent
# Repository root .env wins over backend/.env
root_env = (BASE_DIR.parent / '.env')
local_env = (BASE_DIR / '.env')
if root_env.exists():
    load_dotenv(root_env)
elif local_env.exists():
    load_dotenv(local_env)

# ---------------------------------------------------------------------------
# SECRET KEY
# DJANGO_SECRET_KEY first, SECRET_KEY second. A non-default key is mandatory
# once DEBUG is off.
# ---------------------------------------------------------------------------
_candidate_key = os.getenv('DJANGO_SECRET_KEY') or os.getenv('SECRET_KEY') or ''
SECRET_KEY = _candidate_key or 'dev-secret-key'
DEBUG = os.getenv('DEBUG', 'True') == 'True'
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '*').split(',')

if SECRET_KEY == 'dev-secret-key' and not DEBUG:
    raise ImproperlyConfigured(
        'SECRET_KEY is missing or using the insecure default. Set DJANGO_SECRET_KEY.'
    )

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_spectacular',
    'rest_framework_simplejwt.token_blacklist',
    'apps.common',
    'apps.users',
    'apps.catalog',
    'apps.carts.apps.CartsConfig',
    'apps.media',
    'apps.storefront',
    'apps.adminpanel',
    'apps.auth.apps.AuthConfig',
]

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'apps.api.exceptions.global_exception_handler',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'AriesMall API',
    'DESCRIPTION': 'Storefront, cart/wishlist sync and admin media tooling for AriesMall.',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
    'COMPONENT_SPLIT_REQUEST': True,
    'SCHEMA_PATH_PREFIX': r'/api',
    'SERVE_PERMISSIONS': [],
}

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'apps.carts.middleware.ShopStoreMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'ariesmall.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
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

WSGI_APPLICATION = 'ariesmall.wsgi.application'
ASGI_APPLICATION = 'ariesmall.asgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('POSTGRES_DB', 'ariesmall'),
        'USER': os.getenv('POSTGRES_USER', 'ariesmall'),
        'PASSWORD': os.getenv('POSTGRES_PASSWORD', 'ariesmall'),
        'HOST': os.getenv('POSTGRES_HOST', 'db'),
        'PORT': os.getenv('POSTGRES_PORT', '5432'),
    }
}

# Redis cache, fail-open: a cache outage turns get/set into no-ops.
REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/1')
CACHE_TTL = int(os.getenv('CACHE_TTL', '300'))

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'IGNORE_EXCEPTIONS': True,
        },
        'KEY_PREFIX': os.getenv('CACHE_KEY_PREFIX', 'ariesmall'),
        'TIMEOUT': CACHE_TTL,
    }
}

USING_PYTEST = (
    os.getenv('PYTEST_CURRENT_TEST') is not None
    or 'pytest' in sys.modules
    or any(os.path.basename(arg).startswith('pytest') for arg in sys.argv)
)

if 'test' in sys.argv or USING_PYTEST:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'ariesmall-test-cache',
            'TIMEOUT': 60,
        }
    }

# Sessions live in the database so guest carts survive a cache flush.
SESSION_ENGINE = 'django.contrib.sessions.backends.db'

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {'format': '%(asctime)s %(levelname)s %(name)s %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'plain'},
    },
    'loggers': {
        'apps': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'django': {'handlers': ['console'], 'level': 'WARNING'},
    },
}

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = os.getenv('STATIC_ROOT', str(BASE_DIR / 'staticfiles'))
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_USER_MODEL = 'users.User'
LOGIN_URL = '/shop/login'

# ---------------------------------------------------------------------------
# Store behaviour
# ---------------------------------------------------------------------------
ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@ariesmall.com')
STORE_TAX_RATE = float(os.getenv('STORE_TAX_RATE', '0.10'))
HERO_SLIDE_INTERVAL = float(os.getenv('HERO_SLIDE_INTERVAL', '7.0'))
CATEGORY_FILTER_DEBOUNCE = float(os.getenv('CATEGORY_FILTER_DEBOUNCE', '0.5'))

# ---------------------------------------------------------------------------
# Media tooling. Values in the system_config table override these.
# ---------------------------------------------------------------------------
MEDIA_HTTP_TIMEOUT = float(os.getenv('MEDIA_HTTP_TIMEOUT', '30'))
UPSCALE_POLL_INITIAL_DELAY = float(os.getenv('UPSCALE_POLL_INITIAL_DELAY', '3'))
UPSCALE_POLL_FACTOR = float(os.getenv('UPSCALE_POLL_FACTOR', '1.5'))
UPSCALE_POLL_MAX_DELAY = float(os.getenv('UPSCALE_POLL_MAX_DELAY', '30'))
UPSCALE_POLL_MAX_ATTEMPTS = int(os.getenv('UPSCALE_POLL_MAX_ATTEMPTS', '20'))
# Total polling wait allowed inside a web request; keep it below the worker timeout.
# The upscale_image command is not capped.
UPSCALE_REQUEST_MAX_WAIT = float(os.getenv('UPSCALE_REQUEST_MAX_WAIT', '90'))
