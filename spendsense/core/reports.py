# spendsense/core/reports.py
import datetime
from typing import Any, Dict, List, Union

import pandas as pd

from spendsense.core.aggregation import (
    budget_used_percentage,
    by_category,
    round_half_up,
    to_amount,
    to_local,
)
from spendsense.core.models import CATEGORY_LABELS, Category

PERIODS = ("week", "month", "year")


def _expenses_frame(expenses: List[Dict[str, Any]]) -> pd.DataFrame:
    """DataFrame with local-time created_at and numeric amount, one row per expense."""
    df = pd.DataFrame(expenses)
    if df.empty:
        return pd.DataFrame({
            "amount": pd.Series(dtype="float64"),
            "category": pd.Series(dtype="object"),
            "created_at": pd.Series(dtype="datetime64[ns]"),
        })
    for column in ("amount", "category", "created_at"):
        if column not in df.columns:
            df[column] = None

    df["created_at"] = pd.to_datetime(df["created_at"].map(to_local), errors="coerce")
    df["amount"] = df["amount"].map(to_amount).astype("float64")
    return df


def _display_name(label: str) -> str:
    if label in {member.value for member in Category}:
        return CATEGORY_LABELS[Category(label)]
    return label


def filter_expenses(expenses: List[Dict[str, Any]],
                    period: str = "month",
                    category: Union[str, None] = None,
                    now: Union[datetime.datetime, None] = None) -> List[Dict[str, Any]]:
    """Keeps the expenses inside the period (and category, when given).

    week: the last 7 days up to now; month: now's calendar month; year: now's
    calendar year.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown report period: {period}")
    now = to_local(now or datetime.datetime.now())

    df = _expenses_frame(expenses)
    if df.empty:
        return []

    dates = df["created_at"]
    if period == "week":
        mask = dates >= pd.Timestamp(now - datetime.timedelta(days=7))
    elif period == "month":
        mask = (dates.dt.month == now.month) & (dates.dt.year == now.year)
    else:
        mask = dates.dt.year == now.year

    if category:
        mask = mask & (df["category"] == category)

    mask = mask.fillna(False)
    return [expenses[i] for i in df.index[mask.to_numpy(dtype=bool)]]


def chart_series(expenses: List[Dict[str, Any]],
                 period: str = "month",
                 now: Union[datetime.datetime, None] = None) -> List[Dict[str, Any]]:
    """Totals per point for the trend chart.

    year: the last 12 months labelled "Jan"; week and month: the last 7 or 30
    days labelled "Jan 5".
    """
    now = to_local(now or datetime.datetime.now())
    df = _expenses_frame(expenses).dropna(subset=["created_at"])

    if period == "year":
        month_totals = df.groupby(df["created_at"].dt.to_period("M"))["amount"].sum()
        points = []
        for offset in range(11, -1, -1):
            month_index = now.year * 12 + (now.month - 1) - offset
            first_day = datetime.date(month_index // 12, month_index % 12 + 1, 1)
            key = pd.Period(first_day, freq="M")
            points.append({
                "label": first_day.strftime("%b"),
                "total": float(month_totals.get(key, 0.0)),
            })
        return points

    days = 7 if period == "week" else 30
    day_totals = df.groupby(df["created_at"].dt.date)["amount"].sum()
    today = now.date()
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - datetime.timedelta(days=offset)
        points.append({
            "label": f"{day.strftime('%b')} {day.day}",
            "date": day.isoformat(),
            "total": float(day_totals.get(day, 0.0)),
        })
    return points


def report_stats(series: List[Dict[str, Any]], expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
    totals = [point["total"] for point in series]
    total_amount = sum(totals)
    days_with_data = len([t for t in totals if t > 0]) or 1
    return {
        "total_amount": total_amount,
        "daily_average": round_half_up(total_amount / days_with_data),
        "highest_day": max(totals + [0]),
        "transaction_count": len(expenses),
        "category_count": len({expense.get("category") for expense in expenses}),
    }


def most_expensive_category(expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
    totals = by_category(expenses, default=Category.OTHER.value)
    top_category, top_amount = Category.OTHER.value, 0.0
    for category, amount in totals.items():
        if amount > top_amount:
            top_category, top_amount = category, amount

    grand_total = sum(totals.values())
    percentage = round(top_amount / grand_total * 100, 1) if grand_total > 0 else 0
    return {"category": top_category, "amount": top_amount, "percentage": percentage}


def spending_streak(expenses: List[Dict[str, Any]], today: Union[datetime.date, None] = None) -> int:
    """Consecutive days, ending today, with at least one expense."""
    today = today or datetime.date.today()
    days = set()
    for expense in expenses:
        moment = to_local(expense.get("created_at"))
        if moment is not None:
            days.add(moment.date())

    streak = 0
    check = today
    for day in sorted(days, reverse=True):
        if day == check:
            streak += 1
            check -= datetime.timedelta(days=1)
        elif day < check:
            break
    return streak


def category_breakdown(expenses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-category totals, largest first. Blank categories are merged into "other"."""
    totals = by_category(expenses, default=Category.OTHER.value)
    grand_total = sum(totals.values())
    breakdown = [
        {
            "category": category,
            "name": _display_name(category),
            "amount": amount,
            "percentage": round(amount / grand_total * 100, 1) if grand_total > 0 else 0,
        }
        for category, amount in totals.items()
    ]
    return sorted(breakdown, key=lambda item: item["amount"], reverse=True)


def build_report(expenses: List[Dict[str, Any]],
                 period: str = "month",
                 category: Union[str, None] = None,
                 total_budget: float = 0.0,
                 total_spent: float = 0.0,
                 now: Union[datetime.datetime, None] = None) -> Dict[str, Any]:
    now = to_local(now or datetime.datetime.now())
    filtered = filter_expenses(expenses, period, category, now)
    series = chart_series(filtered, period, now)
    return {
        "period": period,
        "category": category or "",
        "expenses": filtered,
        "series": series,
        "stats": report_stats(series, filtered),
        "most_expensive": most_expensive_category(filtered),
        "breakdown": category_breakdown(filtered),
        "spending_streak": spending_streak(expenses, now.date()),
        "budget_used_percentage": budget_used_percentage(total_budget, total_spent),
    }
