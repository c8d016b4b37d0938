import unittest

from budgetsync.application.services.aggregation import aggregate_records
from budgetsync.application.services.dedup import find_duplicates, without_duplicates


class TestDuplicates(unittest.TestCase):
    def setUp(self) -> None:
        self.bucket = aggregate_records(
            [
                {"Date": "2024-04-01", "Description": "Groceries ", "Amount": "-52.10"},
                {"Date": "2024-04-02", "Description": "Groceries", "Amount": "-52.10"},
                {"Date": "04/01/2024", "Description": "Groceries", "Amount": -52.105},
                {"Date": "2024-04-01", "Description": "Groceries", "Amount": "-12.00"},
            ]
        ).index["2024-04"]

    def test_finds_same_day_description_and_amount(self) -> None:
        self.assertEqual(find_duplicates(self.bucket), [(0, 2)])

    def test_without_duplicates_keeps_first(self) -> None:
        cleaned = without_duplicates(self.bucket)
        self.assertEqual(len(cleaned.transactions), 3)
        self.assertEqual(len(self.bucket.transactions), 4)
