# spendsense/core/aggregation.py
"""Pure helpers that turn fetched rows into dashboard numbers.

Nothing in here talks to Supabase: callers fetch rows first and hand them in,
so every function can be exercised with plain lists of dicts.
"""
import calendar
import datetime
import math
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from spendsense.config import DEFAULT_BUDGET_AMOUNT
from spendsense.core.models import CATEGORY_LABELS, Category, GoalStatus, GoalTier

DEFAULT_CATEGORY_KEY = "Other"

TimestampLike = Union[str, datetime.datetime, datetime.date, None]


def to_amount(value: Any) -> float:
    """Coerces a stored amount to float; anything unusable counts as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return amount


def to_local(value: TimestampLike) -> Optional[datetime.datetime]:
    """Parses a created_at value into a naive datetime in server local time.

    Aware values (Supabase returns ISO strings with an offset) are converted to
    local time; naive values are assumed to already be local.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        moment = value
    elif isinstance(value, datetime.date):
        moment = datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            moment = datetime.datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def month_window(now: datetime.datetime) -> Tuple[datetime.datetime, datetime.datetime]:
    """First and last instant of now's calendar month, both inclusive."""
    local_now = to_local(now)
    start = datetime.datetime(local_now.year, local_now.month, 1)
    last_day = calendar.monthrange(local_now.year, local_now.month)[1]
    end = datetime.datetime(local_now.year, local_now.month, last_day, 23, 59, 59, 999999)
    return start, end


def in_window(value: TimestampLike, start: datetime.datetime, end: datetime.datetime) -> bool:
    moment = to_local(value)
    return moment is not None and start <= moment <= end


def sum_in_current_month(records: Iterable[Dict[str, Any]], now: datetime.datetime) -> float:
    """Sums amount over the records whose created_at falls inside now's month."""
    start, end = month_window(now)
    return math.fsum(
        to_amount(record.get("amount"))
        for record in records
        if in_window(record.get("created_at"), start, end)
    )


def by_category(records: Iterable[Dict[str, Any]],
                key: str = "category",
                default: str = DEFAULT_CATEGORY_KEY) -> Dict[str, float]:
    """Totals amount per label. Rows without a label are counted under default."""
    grouped: Dict[str, List[float]] = defaultdict(list)
    for record in records:
        label = record.get(key) or default
        grouped[label].append(to_amount(record.get("amount")))
    # fsum per group keeps the totals independent of row order
    return {label: math.fsum(amounts) for label, amounts in grouped.items()}


def effective_budget(base_amount: Optional[float], month_income: float) -> float:
    base = DEFAULT_BUDGET_AMOUNT if base_amount is None else to_amount(base_amount)
    return base + to_amount(month_income)


def remaining_budget(total_budget: float, spent: float) -> float:
    """Negative means the month is over budget."""
    return total_budget - spent


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def budget_used_percentage(total_budget: float, total_spent: float) -> int:
    if total_budget <= 0:
        return 0
    return round_half_up(100 * total_spent / total_budget)


def goal_status(spent: float, target: float) -> GoalStatus:
    """Classifies spend against a goal target.

    The raw percentage selects the tier; the display value is capped at 150 and
    the progress bar at 100. A zero or negative target cannot be divided by, so
    any spend at all counts as over budget and no spend as well under.
    """
    spent = to_amount(spent)
    target = to_amount(target)

    if target <= 0:
        if spent > 0:
            return GoalStatus(GoalTier.OVER_BUDGET, percentage=150, display_percentage=150, bar_percentage=100)
        return GoalStatus(GoalTier.WELL_UNDER, percentage=0, display_percentage=0, bar_percentage=0)

    percentage = round_half_up(100 * spent / target)
    if percentage >= 100:
        tier = GoalTier.OVER_BUDGET
    elif percentage >= 75:
        tier = GoalTier.APPROACHING_LIMIT
    elif percentage >= 50:
        tier = GoalTier.ON_TRACK
    else:
        tier = GoalTier.WELL_UNDER

    return GoalStatus(
        tier,
        percentage=percentage,
        display_percentage=min(percentage, 150),
        bar_percentage=max(min(percentage, 100), 0),
    )


def days_remaining_in_month(now: datetime.datetime) -> int:
    local_now = to_local(now)
    last_day = calendar.monthrange(local_now.year, local_now.month)[1]
    end_of_month = datetime.datetime(local_now.year, local_now.month, last_day)
    return math.ceil((end_of_month - local_now).total_seconds() / 86400)


def _short_label(category: str) -> str:
    if category in {member.value for member in Category}:
        return CATEGORY_LABELS[Category(category)].split(" ")[0]
    return category


def summarize_goals(goals: List[Dict[str, Any]],
                    spent_by_category: Dict[str, float],
                    total_budget: float,
                    total_spent: float,
                    now: datetime.datetime) -> Dict[str, Any]:
    """Builds the budget goals page: one row per goal plus the monthly overview."""
    rows = []
    over_budget = []
    for goal in goals:
        category = goal.get("category") or DEFAULT_CATEGORY_KEY
        target = to_amount(goal.get("target_amount"))
        spent = spent_by_category.get(category, 0.0)
        status = goal_status(spent, target)
        rows.append({
            "goal": goal,
            "name": Category.from_label(category).display_name,
            "spent": spent,
            "remaining": target - spent,
            "status": status.to_dict(),
            "suggestion": "Increase Budget" if status.percentage >= 75 else "Reduce Budget",
        })
        if spent > target:
            over_budget.append(category)

    exceeded = [_short_label(category) for category in over_budget]

    return {
        "goals": rows,
        "goals_over_budget": len(over_budget),
        "exceeded_categories": exceeded,
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining": remaining_budget(total_budget, total_spent),
        "budget_used_percentage": budget_used_percentage(total_budget, total_spent),
        "days_remaining": days_remaining_in_month(now),
    }
