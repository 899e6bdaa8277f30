# spendsense/web/routes/goals.py
from flask import Blueprint, jsonify

from spendsense.core import db
from spendsense.core.dashboard import build_goals_overview
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("goals", __name__)


@bp.route("/budget-goals", methods=["GET"])
async def goals_overview():
    ctx = get_request_context()
    return jsonify(await build_goals_overview(ctx))


@bp.route("/budget-goals", methods=["POST", "PUT"])
def set_goal():
    form = json_body()
    result = db.upsert_budget_goal(get_request_context(), form.get("category"), form.get("target_amount"))
    return result_response(result)


@bp.route("/budget-goals/<goal_id>", methods=["DELETE"])
def remove_goal(goal_id: str):
    return result_response(db.delete_budget_goal(get_request_context(), goal_id))
