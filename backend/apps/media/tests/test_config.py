import unittest
from unittest.mock import Mock

from django.db import DatabaseError

from apps.api.exceptions import ApplicationError
from apps.media.config import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_UPLOAD_PRESET,
    REPLICATE_API_TOKEN,
    TINYPNG_API_KEY,
    MediaConfigError,
    SystemConfigService,
    mask,
)
from apps.media.tests.fakes import FakeCache, FakeConfigRepository


class SystemConfigServiceTests(unittest.TestCase):
    def test_rows_override_environment_defaults(self):
        repo = FakeConfigRepository({CLOUDINARY_CLOUD_NAME: "from-db"})
        env = {CLOUDINARY_CLOUD_NAME: "from-env", CLOUDINARY_UPLOAD_PRESET: "env-preset"}
        service = SystemConfigService(repo, FakeCache(), env=env)
        config = service.load()
        self.assertEqual(config[CLOUDINARY_CLOUD_NAME], "from-db")
        self.assertEqual(config[CLOUDINARY_UPLOAD_PRESET], "env-preset")
        self.assertEqual(config[TINYPNG_API_KEY], "")

    def test_load_is_cached_until_update(self):
        repo = FakeConfigRepository({CLOUDINARY_CLOUD_NAME: "one"})
        service = SystemConfigService(repo, FakeCache(), env={})
        service.load()
        service.load()
        self.assertEqual(repo.list_calls, 1)
        service.update({CLOUDINARY_CLOUD_NAME: "two"})
        self.assertEqual(service.get(CLOUDINARY_CLOUD_NAME), "two")
        self.assertEqual(repo.list_calls, 2)

    def test_require_names_missing_keys(self):
        service = SystemConfigService(FakeConfigRepository({CLOUDINARY_CLOUD_NAME: "demo"}), FakeCache(), env={})
        with self.assertRaises(MediaConfigError) as ctx:
            service.require(CLOUDINARY_CLOUD_NAME, CLOUDINARY_UPLOAD_PRESET)
        self.assertEqual(ctx.exception.code, "CONFIGURATION_ERROR")
        self.assertEqual(ctx.exception.details, {"missing": [CLOUDINARY_UPLOAD_PRESET]})

    def test_database_failure_is_reported_as_service_unavailable(self):
        repo = Mock()
        repo.list.side_effect = DatabaseError("down")
        service = SystemConfigService(repo, FakeCache(), env={})
        with self.assertRaises(ApplicationError) as ctx:
            service.load()
        self.assertEqual(ctx.exception.code, "SERVICE_UNAVAILABLE")
        self.assertEqual(ctx.exception.message, "Could not load API keys from database.")

    def test_public_view_masks_secrets(self):
        repo = FakeConfigRepository({REPLICATE_API_TOKEN: "r8_abcdefghijkl", CLOUDINARY_CLOUD_NAME: "demo"})
        view = SystemConfigService(repo, FakeCache(), env={}).public_view()
        self.assertEqual(view[REPLICATE_API_TOKEN], "***ijkl")
        self.assertEqual(view[CLOUDINARY_CLOUD_NAME], "demo")

    def test_mask_short_and_empty_values(self):
        self.assertEqual(mask(""), "")
        self.assertEqual(mask("short"), "***")
