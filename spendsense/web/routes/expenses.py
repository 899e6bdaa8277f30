# spendsense/web/routes/expenses.py
from flask import Blueprint, jsonify

from spendsense.core import db
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("expenses", __name__)


@bp.route("/expenses", methods=["GET"])
def list_expenses():
    """All expenses, newest first, with the goals used to badge categories."""
    ctx = get_request_context()
    expenses = db.get_expenses(ctx)
    goals = db.get_budget_goals(ctx)
    return jsonify({
        "expenses": expenses.data,
        "budget_goals": goals.data,
        "error": expenses.error,
    })


@bp.route("/expenses", methods=["POST"])
def create_expense():
    form = json_body()
    result = db.add_expense(get_request_context(), form.get("amount"), form.get("description"), form.get("category"))
    return result_response(result, 201, {"expense": result.data})


@bp.route("/expenses/<expense_id>", methods=["DELETE"])
def remove_expense(expense_id: str):
    return result_response(db.delete_expense(get_request_context(), expense_id))
