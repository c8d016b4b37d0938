import os
import unittest
from contextlib import contextmanager
from pathlib import Path

from budgetsync.settings import load_settings


@contextmanager
def temp_environ(update: dict[str, str | None]):
    old = dict(os.environ)
    try:
        for k, v in update.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
        yield
    finally:
        os.environ.clear()
        os.environ.update(old)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        keys = [k for k in os.environ if k.startswith("BUDGETSYNC_")]
        with temp_environ({k: None for k in keys}):
            s = load_settings()
            self.assertEqual(s.port, 8000)
            self.assertEqual(s.sync_transport, "auto")
            self.assertEqual(s.sync_key, "budgetsync_sync_event")
            self.assertEqual(s.db_path, Path("data/budgetsync.sqlite3"))
            self.assertFalse(s.log_json)

    def test_empty_values_are_unset(self) -> None:
        with temp_environ({"BUDGETSYNC_PORT": "  ", "BUDGETSYNC_LOG_LEVEL": ""}):
            s = load_settings()
            self.assertEqual(s.port, 8000)
            self.assertEqual(s.log_level, "INFO")

    def test_unknown_transport_means_auto(self) -> None:
        with temp_environ({"BUDGETSYNC_SYNC_TRANSPORT": "carrier-pigeon"}):
            self.assertEqual(load_settings().sync_transport, "auto")

    def test_overrides(self) -> None:
        with temp_environ(
            {
                "BUDGETSYNC_SYNC_TRANSPORT": "Storage",
                "BUDGETSYNC_LOG_JSON": "yes",
                "BUDGETSYNC_LOG_ROTATION_MB": "0",
                "BUDGETSYNC_PORT": "nope",
            }
        ):
            s = load_settings()
            self.assertEqual(s.sync_transport, "storage")
            self.assertTrue(s.log_json)
            self.assertEqual(s.log_rotation_mb, 10)
            self.assertEqual(s.port, 8000)
