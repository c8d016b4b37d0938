import json
import unittest

from budgetsync.domain.enums import SyncEventType
from budgetsync.domain.errors import MalformedMessageError
from budgetsync.domain.models.sync import SyncMessage


class TestSyncMessageWire(unittest.TestCase):
    def test_wire_shape(self) -> None:
        msg = SyncMessage(
            type=SyncEventType.CATEGORY_ADDED,
            timestamp=1700000000000,
            origin_token="/index.html",
            payload={"name": "Travel"},
        )
        self.assertEqual(
            msg.to_wire(),
            {
                "type": "category_added",
                "payload": {"name": "Travel"},
                "timestamp": 1700000000000,
                "originToken": "/index.html",
            },
        )
        self.assertEqual(SyncMessage.from_raw(msg.to_json()), msg)

    def test_missing_payload_defaults_to_empty(self) -> None:
        msg = SyncMessage.from_wire({"type": "data_changed", "timestamp": 1, "originToken": "a"})
        self.assertEqual(msg.payload, {})

    def test_rejects_malformed(self) -> None:
        bad = [
            "{not json",
            b"\xff\xfe",
            json.dumps([1, 2]),
            json.dumps({"type": "unknown", "timestamp": 1, "originToken": "a"}),
            json.dumps({"type": "data_changed", "timestamp": "x", "originToken": "a"}),
            json.dumps({"type": "data_changed", "timestamp": 1}),
            json.dumps({"type": "data_changed", "timestamp": 1, "originToken": "a", "payload": []}),
            '{"type": "data_changed", "timestamp": -Infinity, "originToken": "a"}',
            {"type": "data_changed", "timestamp": float("nan"), "originToken": "a"},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedMessageError):
                    SyncMessage.from_raw(raw)
