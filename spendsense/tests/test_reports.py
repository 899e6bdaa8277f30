# spendsense/tests/test_reports.py
import datetime
import unittest

from spendsense.core import charts, reports


class TestReports(unittest.TestCase):
    def setUp(self):
        self.now = datetime.datetime(2025, 3, 15, 12, 0)
        self.expenses = [
            {"id": "e1", "amount": 100, "category": "food", "created_at": "2025-03-14T10:00:00"},
            {"id": "e2", "amount": 50, "category": "transportation", "created_at": "2025-03-02T09:00:00"},
            {"id": "e3", "amount": 30, "category": "food", "created_at": "2025-01-20T09:00:00"},
            {"id": "e4", "amount": 999, "category": "shopping", "created_at": "2024-12-31T09:00:00"},
        ]

    def ids(self, rows):
        return [row["id"] for row in rows]

    def test_filter_by_period(self):
        self.assertEqual(self.ids(reports.filter_expenses(self.expenses, "week", now=self.now)), ["e1"])
        self.assertEqual(self.ids(reports.filter_expenses(self.expenses, "month", now=self.now)), ["e1", "e2"])
        self.assertEqual(self.ids(reports.filter_expenses(self.expenses, "year", now=self.now)), ["e1", "e2", "e3"])

    def test_filter_by_category(self):
        rows = reports.filter_expenses(self.expenses, "year", "food", now=self.now)
        self.assertEqual(self.ids(rows), ["e1", "e3"])

    def test_unknown_period(self):
        with self.assertRaises(ValueError):
            reports.filter_expenses(self.expenses, "decade", now=self.now)

    def test_month_series(self):
        series = reports.chart_series(self.expenses, "month", self.now)
        self.assertEqual(len(series), 30)
        self.assertEqual(series[-1]["date"], "2025-03-15")
        self.assertEqual(series[-1]["label"], "Mar 15")
        by_date = {point["date"]: point["total"] for point in series}
        self.assertEqual(by_date["2025-03-14"], 100.0)
        self.assertEqual(by_date["2025-03-02"], 50.0)

    def test_year_series(self):
        series = reports.chart_series(self.expenses, "year", self.now)
        self.assertEqual(len(series), 12)
        self.assertEqual(series[0]["label"], "Apr")
        self.assertEqual(series[-1]["label"], "Mar")
        self.assertEqual(series[-1]["total"], 150.0)
        self.assertEqual(series[-3]["total"], 30.0)
        self.assertEqual(series[-4]["total"], 999.0)

    def test_build_report(self):
        expenses = self.expenses + [
            {"id": "e5", "amount": 20, "category": "food", "created_at": "2025-03-15T08:00:00"},
        ]
        report = reports.build_report(expenses, "month", None, 10000, 2500, self.now)

        self.assertEqual(self.ids(report["expenses"]), ["e1", "e2", "e5"])
        self.assertEqual(report["stats"]["total_amount"], 170.0)
        self.assertEqual(report["stats"]["transaction_count"], 3)
        self.assertEqual(report["stats"]["category_count"], 2)
        self.assertEqual(report["stats"]["highest_day"], 100.0)
        self.assertEqual(report["stats"]["daily_average"], 57)
        self.assertEqual(report["most_expensive"], {"category": "food", "amount": 120.0, "percentage": 70.6})
        self.assertEqual(report["breakdown"][0]["name"], "Food")
        self.assertEqual(report["spending_streak"], 2)
        self.assertEqual(report["budget_used_percentage"], 25)

    def test_empty_report(self):
        report = reports.build_report([], "week", None, 10000, 0, self.now)
        self.assertEqual(report["expenses"], [])
        self.assertEqual(len(report["series"]), 7)
        self.assertEqual(report["stats"]["total_amount"], 0)
        self.assertEqual(report["most_expensive"], {"category": "other", "amount": 0.0, "percentage": 0})
        self.assertEqual(report["spending_streak"], 0)

    def test_breakdown_merges_blank_categories_into_other(self):
        expenses = [
            {"category": "other", "amount": 10},
            {"category": "", "amount": 5},
            {"category": None, "amount": 1},
            {"category": "food", "amount": 4},
        ]
        breakdown = reports.category_breakdown(expenses)
        self.assertEqual([row["category"] for row in breakdown], ["other", "food"])
        self.assertEqual(breakdown[0]["name"], "Other")
        self.assertEqual(breakdown[0]["amount"], 16.0)
        self.assertEqual(breakdown[0]["percentage"], 80.0)

    def test_most_expensive_counts_blank_as_other(self):
        expenses = [{"category": "other", "amount": 10}, {"category": "", "amount": 5}, {"category": "food", "amount": 12}]
        self.assertEqual(reports.most_expensive_category(expenses)["category"], "other")

    def test_spending_streak_needs_today(self):
        expenses = [{"created_at": "2025-03-14T10:00:00"}, {"created_at": "2025-03-13T10:00:00"}]
        self.assertEqual(reports.spending_streak(expenses, datetime.date(2025, 3, 15)), 0)
        self.assertEqual(reports.spending_streak(expenses, datetime.date(2025, 3, 14)), 2)


class TestCharts(unittest.TestCase):
    def test_category_chart_is_png(self):
        breakdown = [{"category": "food", "name": "Food", "amount": 120.0, "percentage": 70.6}]
        buf = charts.generate_category_chart(breakdown)
        self.assertTrue(buf.getvalue().startswith(b"\x89PNG"))

    def test_no_chart_without_data(self):
        self.assertIsNone(charts.generate_category_chart([]))
        self.assertIsNone(charts.generate_trend_chart([{"label": "Mar 1", "total": 0.0}]))

    def test_trend_chart_is_png(self):
        series = reports.chart_series(
            [{"amount": 40, "category": "food", "created_at": "2025-03-14T10:00:00"}],
            "week",
            datetime.datetime(2025, 3, 15, 12, 0),
        )
        buf = charts.generate_trend_chart(series)
        self.assertTrue(buf.getvalue().startswith(b"\x89PNG"))


if __name__ == '__main__':
    unittest.main()
