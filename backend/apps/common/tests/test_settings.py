from django.conf import settings
from django.test import SimpleTestCase


class TestRunSettingsTests(SimpleTestCase):
    def test_pytest_run_uses_sqlite_and_local_cache(self):
        # Holds for "pytest" and "python -m pytest" alike.
        self.assertTrue(settings.USING_PYTEST)
        self.assertEqual(settings.DATABASES["default"]["ENGINE"], "django.db.backends.sqlite3")
        self.assertEqual(settings.CACHES["default"]["BACKEND"], "django.core.cache.backends.locmem.LocMemCache")
