import json
import unittest
from unittest import mock

from apps.common import views


class HealthViewsUnitTests(unittest.TestCase):
    def test_live_health_returns_alive_payload(self):
        response = views.live_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content)["status"], "alive")

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch("apps.common.views._cache_check", return_value={"status": "ok"})
    @mock.patch("apps.common.views._db_check", return_value={"status": "ok", "latency_ms": 1.2})
    def test_ready_health_ok_when_dependencies_pass(self, mock_db, _mock_cache, _mock_getenv):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)
        payload = json.loads(response.content)
        self.assertEqual(payload["status"], "ok")
        self.assertEqual(payload["checks"]["database"], mock_db.return_value)
        self.assertEqual(payload["checks"]["redis"]["status"], "skipped")

    @mock.patch("apps.common.views.os.getenv", return_value="redis://localhost")
    @mock.patch("apps.common.views._redis_ping", return_value={"status": "fail", "error": "unreachable"})
    @mock.patch("apps.common.views._cache_check", return_value={"status": "degraded"})
    @mock.patch("apps.common.views._db_check", return_value={"status": "ok", "latency_ms": 1.0})
    def test_ready_health_degraded_when_redis_fails(self, _db, _cache, mock_ping, _getenv):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 503)
        payload = json.loads(response.content)
        self.assertEqual(payload["status"], "degraded")
        self.assertEqual(payload["checks"]["redis"], mock_ping.return_value)

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch("apps.common.views._db_check", return_value={"status": "ok", "latency_ms": 1.0})
    def test_degraded_cache_alone_does_not_fail_readiness(self, _db, _getenv):
        with mock.patch("apps.common.views._cache_check", return_value={"status": "degraded"}):
            response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)

    def test_cache_check_round_trips_probe(self):
        fake_cache = mock.Mock()
        stored = {}
        fake_cache.set.side_effect = lambda key, value, timeout=None: stored.__setitem__(key, value)
        fake_cache.get.side_effect = stored.get
        with mock.patch("apps.common.views.cache", fake_cache):
            self.assertEqual(views._cache_check(), {"status": "ok"})
