import unittest
from datetime import date, datetime

from budgetsync.application.services.date_resolver import parse_date_value, resolve_transaction_date
from budgetsync.domain.models.transaction import TransactionRecord


class TestResolveTransactionDate(unittest.TestCase):
    def test_each_alias_is_recognized(self) -> None:
        for field in ("Transaction Date", "Date", "date", "transaction_date"):
            with self.subTest(field=field):
                self.assertEqual(resolve_transaction_date({field: "2024-03-05"}), date(2024, 3, 5))

    def test_alias_order_wins(self) -> None:
        record = {"date": "2024-01-01", "Transaction Date": "2024-02-02"}
        self.assertEqual(resolve_transaction_date(record), date(2024, 2, 2))

    def test_falls_through_unparseable_field(self) -> None:
        record = {"Transaction Date": "not a date", "Date": "2024-05-20"}
        self.assertEqual(resolve_transaction_date(record), date(2024, 5, 20))

    def test_empty_values_are_ignored(self) -> None:
        record = {"Transaction Date": "", "Date": None, "date": "2023-12-31"}
        self.assertEqual(resolve_transaction_date(record), date(2023, 12, 31))

    def test_no_date_returns_none(self) -> None:
        self.assertIsNone(resolve_transaction_date({"Description": "Coffee", "Amount": -3}))
        self.assertIsNone(resolve_transaction_date({"Date": "garbage"}))

    def test_accepts_record_type(self) -> None:
        record = TransactionRecord.from_mapping({"Date": "01/15/2024"})
        self.assertEqual(resolve_transaction_date(record), date(2024, 1, 15))

    def test_is_stable_across_calls(self) -> None:
        record = {"Date": "2024-07-04T23:30:00"}
        first = resolve_transaction_date(record)
        self.assertEqual(first, date(2024, 7, 4))
        self.assertEqual(resolve_transaction_date(record), first)


class TestParseDateValue(unittest.TestCase):
    def test_date_objects(self) -> None:
        self.assertEqual(parse_date_value(date(2024, 1, 2)), date(2024, 1, 2))
        self.assertEqual(parse_date_value(datetime(2024, 1, 2, 10, 0)), date(2024, 1, 2))

    def test_epoch_millis(self) -> None:
        self.assertEqual(parse_date_value(1704067200000), date(2024, 1, 1))

    def test_rejects_other_types(self) -> None:
        self.assertIsNone(parse_date_value(True))
        self.assertIsNone(parse_date_value(["2024-01-01"]))
        self.assertIsNone(parse_date_value(float("nan")))
        self.assertIsNone(parse_date_value("   "))
