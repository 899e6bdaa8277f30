# spendsense/core/dashboard.py
import asyncio
import datetime
from typing import Any, Dict, List, Union

from spendsense.config import GOAL_SPENT_WINDOW
from spendsense.core import db
from spendsense.core.aggregation import (
    budget_used_percentage,
    effective_budget,
    month_window,
    remaining_budget,
    summarize_goals,
)
from spendsense.core.context import RequestContext
from spendsense.core.models import ActionResult
from spendsense.core.reports import build_report, category_breakdown


def _errors(*results: ActionResult) -> List[str]:
    """Store failures worth showing; a missing login is reported separately."""
    return [r.error for r in results if not r.success and r.error and not r.is_not_authenticated]


def _base_amount(budget_result: ActionResult) -> Union[float, None]:
    budget = budget_result.data
    if budget is None or budget.is_default:
        return None
    return budget.amount


async def build_dashboard(ctx: RequestContext, now: Union[datetime.datetime, None] = None) -> Dict[str, Any]:
    """Collects everything the dashboard shows.

    The reads do not depend on each other, so they run concurrently in worker
    threads (the Supabase client is synchronous).
    """
    now = now or datetime.datetime.now()
    start, end = month_window(now)

    budget, spent, income, recent_expenses, recent_income, month_expenses = await asyncio.gather(
        asyncio.to_thread(db.get_or_create_budget, ctx, now.month, now.year),
        asyncio.to_thread(db.get_total_spent, ctx, now),
        asyncio.to_thread(db.get_total_income, ctx, now),
        asyncio.to_thread(db.get_recent_expenses, ctx),
        asyncio.to_thread(db.get_recent_income, ctx),
        asyncio.to_thread(db.get_expenses_in_range, ctx, start, end),
    )

    total_budget = effective_budget(_base_amount(budget), income.data)
    total_spent = spent.data

    return {
        "authenticated": ctx.is_authenticated,
        "month": now.month,
        "year": now.year,
        "base_budget": budget.data.amount,
        "month_income": income.data,
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining": remaining_budget(total_budget, total_spent),
        "budget_used_percentage": budget_used_percentage(total_budget, total_spent),
        "recent_expenses": recent_expenses.data,
        "recent_income": recent_income.data,
        "category_breakdown": category_breakdown(month_expenses.data),
        "errors": _errors(budget, spent, income, recent_expenses, recent_income, month_expenses),
    }


async def build_goals_overview(ctx: RequestContext,
                               now: Union[datetime.datetime, None] = None,
                               spent_window: str = GOAL_SPENT_WINDOW) -> Dict[str, Any]:
    """Budget goals page data.

    Goal progress has always been measured against all-time category totals
    while the budget itself is monthly; spent_window="month" limits goal
    progress to the current month instead.
    """
    now = now or datetime.datetime.now()
    since = month_window(now)[0] if spent_window == "month" else None

    goals, spent_by_category, spent, budget, income = await asyncio.gather(
        asyncio.to_thread(db.get_budget_goals, ctx),
        asyncio.to_thread(db.get_spent_by_category, ctx, since),
        asyncio.to_thread(db.get_total_spent, ctx, now),
        asyncio.to_thread(db.get_or_create_budget, ctx, now.month, now.year),
        asyncio.to_thread(db.get_total_income, ctx, now),
    )

    total_budget = effective_budget(_base_amount(budget), income.data)
    overview = summarize_goals(goals.data, spent_by_category.data, total_budget, spent.data, now)
    overview["authenticated"] = ctx.is_authenticated
    overview["spent_window"] = "month" if since is not None else "all_time"
    overview["errors"] = _errors(goals, spent_by_category, spent, budget, income)
    return overview


async def build_report_data(ctx: RequestContext,
                            period: str = "month",
                            category: Union[str, None] = None,
                            now: Union[datetime.datetime, None] = None) -> Dict[str, Any]:
    """Reports page: filtering happens in memory over the user's full history."""
    now = now or datetime.datetime.now()

    expenses, spent, budget, income = await asyncio.gather(
        asyncio.to_thread(db.get_expenses, ctx),
        asyncio.to_thread(db.get_total_spent, ctx, now),
        asyncio.to_thread(db.find_budget, ctx, now.month, now.year),
        asyncio.to_thread(db.get_total_income, ctx, now),
    )

    total_budget = effective_budget(_base_amount(budget), income.data)
    report = build_report(expenses.data, period, category, total_budget, spent.data, now)
    report["authenticated"] = ctx.is_authenticated
    report["total_budget"] = total_budget
    report["total_spent"] = spent.data
    report["errors"] = _errors(expenses, spent, budget, income)
    return report
