import io
import json
import logging
import unittest

from fastapi.testclient import TestClient

from app.core.logging import setup_logging
from app.core.security import create_session_token
from app.main import app


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        saved = (root.handlers[:], root.level)

        def restore():
            root.handlers, level = saved
            root.setLevel(level)

        self.addCleanup(restore)

    def test_records_are_json_with_extra_fields(self):
        stream = io.StringIO()
        setup_logging("debug", stream=stream)

        logging.getLogger("app.orders").warning("stock low", extra={"product": "truffle"})

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        self.assertEqual(record["level"], "WARNING")
        self.assertEqual(record["name"], "app.orders")
        self.assertEqual(record["message"], "stock low")
        self.assertEqual(record["product"], "truffle")
        self.assertIn("timestamp", record)
        self.assertNotIn("trace_id", record)

    def test_replaces_existing_handlers(self):
        setup_logging("INFO", stream=io.StringIO())
        setup_logging("INFO", stream=io.StringIO())

        self.assertEqual(len(logging.getLogger().handlers), 1)
        self.assertEqual(logging.getLogger("botocore").level, logging.WARNING)


class TestRequestLogging(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_request_id_is_echoed(self):
        response = self.client.get("/api/health", headers={"X-Request-ID": "req-42"})

        self.assertEqual(response.headers["X-Request-ID"], "req-42")

    def test_access_record_names_signed_in_user(self):
        token = create_session_token("64b000000000000000000001", "user")

        with self.assertLogs("app.request", level="INFO") as logs:
            self.client.get("/api/health", headers={"Authorization": f"Bearer {token}"})

        record = logs.records[-1]
        self.assertEqual(record.user_sub, "64b000000000000000000001")
        self.assertEqual(record.status, 200)
        self.assertEqual(record.path, "/api/health")

    def test_forged_token_logs_anonymous(self):
        with self.assertLogs("app.request", level="INFO") as logs:
            self.client.get("/api/health", headers={"Cookie": "sign_in=not.a.jwt"})

        self.assertIsNone(logs.records[-1].user_sub)


if __name__ == "__main__":
    unittest.main()
