# spendsense/core/db.py
import datetime
from typing import Any, Dict, Optional, Union

from spendsense.config import DEFAULT_BUDGET_AMOUNT, RECENT_ITEMS_LIMIT
from spendsense.core.aggregation import by_category, month_window, sum_in_current_month
from spendsense.core.context import RequestContext
from spendsense.core.models import ActionResult, Budget
from spendsense.utils.text_utils import clean_text, is_valid_barcode, parse_amount

EXPENSES_TABLE = "expenses"
INCOME_TABLE = "income"
BUDGETS_TABLE = "budgets"
GOALS_TABLE = "budget_goals"
PRODUCTS_TABLE = "products"


def _utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _as_iso(moment: datetime.datetime) -> str:
    """Naive datetimes are server local time; send them with their offset."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat()


def _fetch_rows(ctx: RequestContext,
                table: str,
                columns: str = "*",
                order: Union[str, None] = "created_at",
                desc: bool = True,
                limit: Union[int, None] = None,
                since: Union[datetime.datetime, None] = None,
                until: Union[datetime.datetime, None] = None,
                **filters: Any) -> ActionResult:
    """Selects the caller's rows from a table; every query is scoped by user_id."""
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated(data=[])
    try:
        query = ctx.client.table(table).select(columns).eq("user_id", ctx.user_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        if since is not None:
            query = query.gte("created_at", _as_iso(since))
        if until is not None:
            query = query.lte("created_at", _as_iso(until))
        if order:
            query = query.order(order, desc=desc)
        if limit is not None:
            query = query.limit(limit)
        response = query.execute()
        return ActionResult.ok(response.data or [])
    except Exception as e:
        print(f"Error fetching {table} from Supabase: {e}")
        return ActionResult.fail(str(e), data=[])


def _delete_owned(ctx: RequestContext, table: str, row_id: str) -> ActionResult:
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()
    try:
        ctx.client.table(table).delete().eq("id", row_id).eq("user_id", ctx.user_id).execute()
        return ActionResult.ok()
    except Exception as e:
        print(f"Error deleting from {table} in Supabase: {e}")
        return ActionResult.fail(str(e))


def _month_total(ctx: RequestContext, table: str, now: Union[datetime.datetime, None]) -> ActionResult:
    now = now or datetime.datetime.now()
    start, end = month_window(now)
    result = _fetch_rows(ctx, table, columns="amount,created_at", order=None, since=start, until=end)
    if not result.success:
        return ActionResult(success=False, error=result.error, data=0.0)
    return ActionResult.ok(sum_in_current_month(result.data, now))


def _insert_record(ctx: RequestContext, table: str, amount: Any, description: Any,
                   label_column: str, label: Any) -> ActionResult:
    """Shared add path for expenses (category) and income (source)."""
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()

    parsed_amount = parse_amount(amount)
    description = clean_text(description)
    label = clean_text(label)
    if parsed_amount is None or not description or not label:
        return ActionResult.invalid("All fields are required")

    try:
        response = ctx.client.table(table).insert({
            "user_id": ctx.user_id,
            "amount": parsed_amount,
            "description": description,
            label_column: label,
        }).execute()
        return ActionResult.ok(response.data[0] if response.data else None)
    except Exception as e:
        print(f"Error adding row to {table} in Supabase: {e}")
        return ActionResult.fail(str(e))


# --- Expenses ---
def get_expenses(ctx: RequestContext) -> ActionResult:
    """All of the user's expenses, newest first."""
    return _fetch_rows(ctx, EXPENSES_TABLE)


def get_recent_expenses(ctx: RequestContext, limit: int = RECENT_ITEMS_LIMIT) -> ActionResult:
    return _fetch_rows(ctx, EXPENSES_TABLE, limit=limit)


def get_expenses_in_range(ctx: RequestContext, start: datetime.datetime, end: datetime.datetime) -> ActionResult:
    return _fetch_rows(ctx, EXPENSES_TABLE, since=start, until=end)


def get_total_spent(ctx: RequestContext, now: Union[datetime.datetime, None] = None) -> ActionResult:
    """Sum of this calendar month's expenses (data is a float, 0.0 on failure)."""
    return _month_total(ctx, EXPENSES_TABLE, now)


def add_expense(ctx: RequestContext, amount: Any, description: Any, category: Any) -> ActionResult:
    return _insert_record(ctx, EXPENSES_TABLE, amount, description, "category", category)


def delete_expense(ctx: RequestContext, expense_id: str) -> ActionResult:
    return _delete_owned(ctx, EXPENSES_TABLE, expense_id)


# --- Income ---
def get_all_income(ctx: RequestContext) -> ActionResult:
    return _fetch_rows(ctx, INCOME_TABLE)


def get_recent_income(ctx: RequestContext, limit: int = RECENT_ITEMS_LIMIT) -> ActionResult:
    return _fetch_rows(ctx, INCOME_TABLE, limit=limit)


def get_total_income(ctx: RequestContext, now: Union[datetime.datetime, None] = None) -> ActionResult:
    return _month_total(ctx, INCOME_TABLE, now)


def add_income(ctx: RequestContext, amount: Any, description: Any, source: Any) -> ActionResult:
    return _insert_record(ctx, INCOME_TABLE, amount, description, "source", source)


def delete_income(ctx: RequestContext, income_id: str) -> ActionResult:
    return _delete_owned(ctx, INCOME_TABLE, income_id)


# --- Budgets ---
def find_budget(ctx: RequestContext, month: int, year: int) -> ActionResult:
    """Returns the stored budget for (month, year), or an unsaved default one.

    Never writes; see get_or_create_budget for the variant that persists the
    default row.
    """
    default = Budget(user_id=ctx.user_id, amount=float(DEFAULT_BUDGET_AMOUNT), month=month, year=year)
    result = _fetch_rows(ctx, BUDGETS_TABLE, order=None, limit=1, month=month, year=year)
    if not result.success:
        return ActionResult(success=False, error=result.error, data=default)
    if result.data:
        return ActionResult.ok(Budget.from_row(result.data[0]))
    return ActionResult.ok(default)


def get_or_create_budget(ctx: RequestContext, month: int, year: int) -> ActionResult:
    """Like find_budget, but saves the default row on the first access of the month."""
    result = find_budget(ctx, month, year)
    if not result.success or not result.data.is_default:
        return result

    try:
        response = ctx.client.table(BUDGETS_TABLE).upsert({
            "user_id": ctx.user_id,
            "amount": DEFAULT_BUDGET_AMOUNT,
            "month": month,
            "year": year,
        }, on_conflict="user_id,month,year", ignore_duplicates=True).execute()
    except Exception as e:
        print(f"Error creating default budget in Supabase: {e}")
        return ActionResult(success=False, error=str(e), data=result.data)

    if response.data:
        return ActionResult.ok(Budget.from_row(response.data[0]))
    # Nothing returned: a concurrent request created the row first
    return find_budget(ctx, month, year)


def update_budget(ctx: RequestContext, amount: Any, month: int, year: int) -> ActionResult:
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()

    parsed_amount = parse_amount(amount)
    if parsed_amount is None:
        return ActionResult.invalid("Invalid budget amount")

    try:
        ctx.client.table(BUDGETS_TABLE).upsert({
            "user_id": ctx.user_id,
            "amount": parsed_amount,
            "month": month,
            "year": year,
        }, on_conflict="user_id,month,year").execute()
        return ActionResult.ok(Budget(user_id=ctx.user_id, amount=parsed_amount, month=month, year=year))
    except Exception as e:
        print(f"Error updating budget in Supabase: {e}")
        return ActionResult.fail(str(e))


# --- Budget goals ---
def get_budget_goals(ctx: RequestContext) -> ActionResult:
    return _fetch_rows(ctx, GOALS_TABLE)


def get_budget_goal_by_category(ctx: RequestContext, category: str) -> ActionResult:
    """data is the goal row, or None when the user has no goal for the category."""
    result = _fetch_rows(ctx, GOALS_TABLE, order=None, limit=1, category=category)
    return ActionResult(success=result.success, error=result.error,
                        data=result.data[0] if result.data else None)


def upsert_budget_goal(ctx: RequestContext, category: Any, target_amount: Any) -> ActionResult:
    """One goal per (user, category); setting it again replaces the target."""
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()

    category = clean_text(category)
    parsed_target = parse_amount(target_amount)
    if not category:
        return ActionResult.invalid("Category is required")
    if parsed_target is None:
        return ActionResult.invalid("Target amount must be a positive number")

    try:
        ctx.client.table(GOALS_TABLE).upsert({
            "user_id": ctx.user_id,
            "category": category,
            "target_amount": parsed_target,
            "updated_at": _utc_now_iso(),
        }, on_conflict="user_id,category").execute()
        return ActionResult.ok()
    except Exception as e:
        print(f"Error upserting budget goal in Supabase: {e}")
        return ActionResult.fail(str(e))


def delete_budget_goal(ctx: RequestContext, goal_id: str) -> ActionResult:
    return _delete_owned(ctx, GOALS_TABLE, goal_id)


def get_spent_by_category(ctx: RequestContext, since: Union[datetime.datetime, None] = None) -> ActionResult:
    """Totals per category label; all-time unless since is given."""
    result = _fetch_rows(ctx, EXPENSES_TABLE, columns="category,amount,created_at", order=None, since=since)
    if not result.success:
        return ActionResult(success=False, error=result.error, data={})
    return ActionResult.ok(by_category(result.data))


# --- Products (barcode cache) ---
def find_user_product(ctx: RequestContext, barcode: str) -> ActionResult:
    result = _fetch_rows(ctx, PRODUCTS_TABLE, order=None, limit=1, barcode=barcode)
    return ActionResult(success=result.success, error=result.error,
                        data=result.data[0] if result.data else None)


def save_user_product(ctx: RequestContext, barcode: Any, name: Any, price: Any, category: Any) -> ActionResult:
    """Upserts the user's cached product for a barcode."""
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()

    barcode = clean_text(barcode)
    name = clean_text(name)
    category = clean_text(category)
    parsed_price = parse_amount(price)
    if not is_valid_barcode(barcode):
        return ActionResult.invalid("Invalid barcode format")
    if not name or parsed_price is None or not category:
        return ActionResult.invalid("Missing required fields")

    try:
        ctx.client.table(PRODUCTS_TABLE).upsert({
            "user_id": ctx.user_id,
            "barcode": barcode,
            "name": name,
            "price": parsed_price,
            "category": category,
            "updated_at": _utc_now_iso(),
        }, on_conflict="user_id,barcode").execute()
        return ActionResult.ok()
    except Exception as e:
        print(f"Error saving product to Supabase: {e}")
        return ActionResult.fail(str(e))


def get_user_products(ctx: RequestContext) -> ActionResult:
    return _fetch_rows(ctx, PRODUCTS_TABLE, order="name", desc=False)


def delete_user_product(ctx: RequestContext, product_id: str) -> ActionResult:
    return _delete_owned(ctx, PRODUCTS_TABLE, product_id)


# --- Profile ---
def get_profile_data(ctx: RequestContext) -> Optional[Dict[str, Any]]:
    if not ctx.is_authenticated:
        return None
    metadata = ctx.user_metadata or {}
    email = ctx.email or ""
    return {
        "id": ctx.user_id,
        "email": email,
        "username": metadata.get("username") or (email.split("@")[0] if email else "") or "User",
        "avatar_url": metadata.get("avatar_url"),
        "created_at": ctx.created_at or _utc_now_iso(),
    }


def update_profile(ctx: RequestContext, username: Any) -> ActionResult:
    if not ctx.is_authenticated:
        return ActionResult.not_authenticated()

    username = clean_text(username)
    if len(username) < 2:
        return ActionResult.invalid("Username must be at least 2 characters")

    try:
        ctx.client.auth.update_user({"data": {"username": username}})
        return ActionResult.ok({"username": username})
    except Exception as e:
        print(f"Error updating profile in Supabase: {e}")
        return ActionResult.fail(str(e))
