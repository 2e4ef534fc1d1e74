from .base import *  # noqa: F403
from .base import SIMPLE_JWT
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="pQ3tT7tJ0f1cS8eVwK9xHn2LmZ4rYb6AuGd5EjNq0WsXo3IkCv8PhRlMy1Ba7Ue",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# CACHES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#caches
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "",
    },
}

# djangorestframework-simplejwt
# ------------------------------------------------------------------------------
SIMPLE_JWT["SIGNING_KEY"] = env("JWT_SECRET", default=SECRET_KEY)
