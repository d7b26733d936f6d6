import logging
import unittest

from apps.common.logger import AppLogger, REDACTED, get_logger


class AppLoggerTests(unittest.TestCase):
    def test_bind_merges_context_without_mutating_parent(self):
        parent = get_logger("apps.tests").bind(component="carts")
        child = parent.bind(layer="store")
        self.assertEqual(parent.context, {"component": "carts"})
        self.assertEqual(child.context, {"component": "carts", "layer": "store"})
        self.assertEqual(child.unbind("component").context, {"layer": "store"})

    def test_render_formats_key_value_pairs(self):
        line = AppLogger.render("Cart synced", {"user_id": 4, "items": [1, 2]})
        self.assertEqual(line, "Cart synced | user_id=4 items=[1, 2]")

    def test_sensitive_values_are_redacted(self):
        line = AppLogger.render("Calling upstream", {"api_key": "abc", "token": "xyz"})
        self.assertNotIn("abc", line)
        self.assertNotIn("xyz", line)
        self.assertIn(f"api_key={REDACTED}", line)

    def test_long_values_are_truncated(self):
        line = AppLogger.render("Payload", {"body": "x" * 1000})
        self.assertTrue(line.endswith("..."))
        self.assertLess(len(line), 400)

    def test_messages_reach_stdlib_logger(self):
        log = get_logger("apps.tests.capture").bind(component="tests")
        with self.assertLogs("apps.tests.capture", level=logging.INFO) as captured:
            log.info("Hello", n=1)
        self.assertIn("Hello | component=tests n=1", captured.output[0])
