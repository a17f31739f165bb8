"""
Django settings for the rail-hrbac test suite.
"""

SECRET_KEY = "rail-hrbac-tests"
DEBUG = False
USE_TZ = True

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rail_hrbac",
    "tests",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

RAIL_HRBAC = {
    "roles": {
        "reader": {
            "can": [
                "article:read",
                {"name": "article:list", "filter": "tests.rbac_fixtures.free_articles_filter"},
            ],
        },
        "editor": {
            "can": ["article:update"],
            "inherits": ["reader"],
        },
        "superadmin": {
            "can": ["*"],
        },
    },
    "options": {
        "merge_filters": "tests.rbac_fixtures.merge_with_or",
    },
}
