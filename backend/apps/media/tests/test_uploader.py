import unittest
from unittest.mock import Mock

from apps.api.exceptions import ExternalServiceError
from apps.media.config import MediaConfigError, TINYPNG_API_KEY
from apps.media.staging import StagingArea
from apps.media.tests.fakes import FakeCloudinary, RecordingToasts, make_config, make_history
from apps.media.uploader import MediaUploader


class MediaUploaderTests(unittest.TestCase):
    def setUp(self):
        self.area = StagingArea()
        self.addCleanup(self.area.clear)
        self.history, self.history_repo = make_history()
        self.toasts = RecordingToasts()
        self.clouds = []

    def cloudinary_factory(self, error=None):
        def factory(cloud_name, preset, **kwargs):
            client = FakeCloudinary(cloud_name, preset, error=error)
            self.clouds.append(client)
            return client

        return factory

    def make_uploader(self, config=None, tinify=None, error=None):
        return MediaUploader(
            config or make_config(),
            self.history,
            toasts=self.toasts,
            cloudinary_factory=self.cloudinary_factory(error),
            tinify_factory=lambda *args, **kwargs: tinify,
        )

    def test_upload_without_tinypng_uses_original_and_custom_name(self):
        item = self.area.stage_file("shoe.jpg", b"raw")
        result = self.make_uploader().upload(item, custom_name=" hero-shoe ", admin_email="admin@ariesmall.com")
        self.assertEqual(result.name, "hero-shoe")
        self.assertFalse(result.optimized)
        self.assertEqual(self.clouds[0].uploads, [(b"raw", "hero-shoe", "shoe.jpg")])
        self.assertEqual(len(result.links), 5)
        self.assertEqual(self.toasts.titles, ["Upload Successful"])
        row = self.history_repo.rows[0]
        self.assertEqual((row.file_name, row.media_type, row.admin_email), ("hero-shoe", "upload", "admin@ariesmall.com"))

    def test_name_falls_back_to_cloudinary_public_id(self):
        item = self.area.stage_url("https://cdn/x.jpg")
        result = self.make_uploader().upload(item)
        self.assertEqual(result.name, "abc123")
        self.assertEqual(self.clouds[0].uploads[0][0], "https://cdn/x.jpg")

    def test_optimized_bytes_are_uploaded(self):
        tinify = Mock()
        tinify.shrink.return_value = "https://api.tinify.com/output/a"
        tinify.download.return_value = b"small"
        item = self.area.stage_file("shoe.png", b"big")
        result = self.make_uploader(make_config(**{TINYPNG_API_KEY: "key"}), tinify).upload(item)
        self.assertTrue(result.optimized)
        tinify.shrink.assert_called_once_with(b"big", "image/png")
        self.assertEqual(self.clouds[0].uploads[0][0], b"small")

    def test_optimization_failure_falls_back_to_original(self):
        tinify = Mock()
        tinify.shrink.side_effect = ExternalServiceError("tinify", "TinyPNG API Error: quota")
        item = self.area.stage_file("shoe.png", b"big")
        result = self.make_uploader(make_config(**{TINYPNG_API_KEY: "key"}), tinify).upload(item)
        self.assertFalse(result.optimized)
        self.assertEqual(self.clouds[0].uploads[0][0], b"big")
        self.assertEqual(self.toasts.titles, ["Optimization Skipped", "Upload Successful"])
        self.assertEqual(self.toasts.shown[0][0], "info")

    def test_upload_failure_shows_error_and_skips_history(self):
        item = self.area.stage_file("shoe.png", b"big")
        uploader = self.make_uploader(error=ExternalServiceError("cloudinary", "Cloudinary error: bad preset"))
        with self.assertRaises(ExternalServiceError):
            uploader.upload(item)
        self.assertEqual(self.toasts.shown, [("error", "Upload Failed", "Cloudinary error: bad preset")])
        self.assertEqual(self.history_repo.rows, [])

    def test_missing_cloudinary_settings(self):
        item = self.area.stage_url("https://cdn/x.jpg")
        with self.assertRaises(MediaConfigError):
            self.make_uploader(make_config(CLOUDINARY_UPLOAD_PRESET="")).upload(item)

    def test_per_call_toasts_take_precedence(self):
        item = self.area.stage_url("https://cdn/x.jpg")
        call_toasts = RecordingToasts()
        self.make_uploader().upload(item, toasts=call_toasts)
        self.assertEqual(call_toasts.titles, ["Upload Successful"])
        self.assertEqual(self.toasts.shown, [])
