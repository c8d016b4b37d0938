import unittest
from datetime import date

from budgetsync.application.services.aggregation import (
    MonthlyAggregator,
    aggregate_records,
    merge_monthly_indexes,
)
from budgetsync.domain.models.month import MonthBucket, month_key, month_label
from budgetsync.domain.models.transaction import TransactionRecord


def _bucket(start: date, end: date, *descriptions: str) -> MonthBucket:
    bucket = MonthBucket.open(start)
    bucket.end_date = end
    bucket.transactions = [TransactionRecord.from_mapping({"Description": d}) for d in descriptions]
    return bucket


class TestMonthKey(unittest.TestCase):
    def test_zero_padded(self) -> None:
        self.assertEqual(month_key(date(2024, 3, 9)), "2024-03")
        self.assertEqual(month_key(date(987, 11, 1)), "0987-11")

    def test_label(self) -> None:
        self.assertEqual(month_label(date(2024, 1, 31)), "January 2024")


class TestAggregate(unittest.TestCase):
    def test_example_end_to_end(self) -> None:
        agg = MonthlyAggregator()
        index = agg.aggregate(
            [
                {"Date": "2024-01-15", "Description": "Rent", "Amount": -1200},
                {"Date": "2024-01-31", "Description": "Coffee", "Amount": -4.5},
                {"Date": "2024-02-01", "Description": "Salary", "Amount": 3000},
            ]
        )
        self.assertEqual(sorted(index), ["2024-01", "2024-02"])
        jan = index["2024-01"]
        self.assertEqual(len(jan.transactions), 2)
        self.assertEqual((jan.start_date, jan.end_date), (date(2024, 1, 15), date(2024, 1, 31)))
        self.assertEqual(jan.display_label, "January 2024")
        feb = index["2024-02"]
        self.assertEqual(len(feb.transactions), 1)
        self.assertEqual((feb.start_date, feb.end_date), (date(2024, 2, 1), date(2024, 2, 1)))

        stats = agg.monthly_statistics()
        self.assertEqual([s.month_key for s in stats], ["2024-02", "2024-01"])
        self.assertEqual(stats[1].transaction_count, 2)
        self.assertEqual(
            stats[1].to_dict()["dateRange"], {"start": "2024-01-15", "end": "2024-01-31"}
        )

    def test_out_of_order_dates_update_range(self) -> None:
        index = aggregate_records(
            [{"Date": "2024-05-20"}, {"Date": "2024-05-02"}, {"Date": "2024-05-28"}]
        ).index
        bucket = index["2024-05"]
        self.assertEqual(bucket.start_date, date(2024, 5, 2))
        self.assertEqual(bucket.end_date, date(2024, 5, 28))
        self.assertEqual(
            [t.values["Date"] for t in bucket.transactions],
            ["2024-05-20", "2024-05-02", "2024-05-28"],
        )

    def test_unresolvable_records_are_dropped_and_counted(self) -> None:
        agg = MonthlyAggregator()
        index = agg.aggregate(
            [{"Date": "2024-01-10"}, {"Description": "no date"}, {"Date": "soon"}]
        )
        self.assertEqual(list(index), ["2024-01"])
        self.assertEqual(sum(len(b.transactions) for b in index.values()), 1)
        self.assertEqual(agg.last_report.accepted, 1)
        self.assertEqual(agg.last_report.skipped, 2)
        self.assertEqual(sum(s.transaction_count for s in agg.monthly_statistics()), 1)

    def test_aggregate_replaces_previous_index(self) -> None:
        agg = MonthlyAggregator()
        agg.aggregate([{"Date": "2023-06-01"}])
        agg.aggregate([{"Date": "2024-06-01"}])
        self.assertEqual(agg.available_months(), ["2024-06"])

    def test_available_months_descending(self) -> None:
        agg = MonthlyAggregator()
        agg.aggregate([{"Date": "2024-01-05"}, {"Date": "2024-02-05"}, {"Date": "2023-12-05"}])
        self.assertEqual(agg.available_months(), ["2024-02", "2024-01", "2023-12"])
        self.assertIsNone(agg.get_month("1999-01"))


class TestMerge(unittest.TestCase):
    def test_appends_in_input_order_and_widens_range(self) -> None:
        a = {"2024-03": _bucket(date(2024, 3, 5), date(2024, 3, 20), "a1", "a2")}
        b = {"2024-03": _bucket(date(2024, 3, 1), date(2024, 3, 10), "b1", "b2", "b3")}
        merged = merge_monthly_indexes([a, b])
        bucket = merged["2024-03"]
        self.assertEqual(
            [t.description for t in bucket.transactions], ["a1", "a2", "b1", "b2", "b3"]
        )
        self.assertEqual(bucket.start_date, date(2024, 3, 1))
        self.assertEqual(bucket.end_date, date(2024, 3, 20))

    def test_inputs_are_not_mutated(self) -> None:
        a = {"2024-03": _bucket(date(2024, 3, 5), date(2024, 3, 20), "a1")}
        b = {"2024-03": _bucket(date(2024, 3, 1), date(2024, 3, 10), "b1")}
        merge_monthly_indexes([a, b])
        self.assertEqual(len(a["2024-03"].transactions), 1)
        self.assertEqual(a["2024-03"].start_date, date(2024, 3, 5))

    def test_disjoint_months_and_duplicates_kept(self) -> None:
        a = {"2024-01": _bucket(date(2024, 1, 1), date(2024, 1, 1), "x")}
        b = {
            "2024-01": _bucket(date(2024, 1, 1), date(2024, 1, 1), "x"),
            "2024-02": _bucket(date(2024, 2, 2), date(2024, 2, 2), "y"),
        }
        merged = merge_monthly_indexes([a, b])
        self.assertEqual(sorted(merged), ["2024-01", "2024-02"])
        self.assertEqual(len(merged["2024-01"].transactions), 2)

    def test_same_multiset_regardless_of_order(self) -> None:
        a = {"2024-03": _bucket(date(2024, 3, 5), date(2024, 3, 20), "a1", "a2")}
        b = {"2024-03": _bucket(date(2024, 3, 1), date(2024, 3, 10), "b1")}
        ab = merge_monthly_indexes([a, b])["2024-03"]
        ba = merge_monthly_indexes([b, a])["2024-03"]
        self.assertEqual(
            sorted(t.description for t in ab.transactions),
            sorted(t.description for t in ba.transactions),
        )
        self.assertEqual((ab.start_date, ab.end_date), (ba.start_date, ba.end_date))

    def test_empty_input(self) -> None:
        self.assertEqual(merge_monthly_indexes([]), {})
