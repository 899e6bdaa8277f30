# spendsense/web/routes/budget.py
import datetime

from flask import Blueprint, jsonify

from spendsense.core import db
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("budget", __name__)


@bp.route("/budget", methods=["GET"])
def current_budget():
    """This month's base budget; the default row is created on first access."""
    now = datetime.datetime.now()
    result = db.get_or_create_budget(get_request_context(), now.month, now.year)
    return jsonify({"budget": result.data.to_dict(), "error": result.error})


@bp.route("/budget", methods=["PUT", "POST"])
def set_budget():
    now = datetime.datetime.now()
    result = db.update_budget(get_request_context(), json_body().get("amount"), now.month, now.year)
    return result_response(result, payload={"budget": result.data.to_dict() if result.data else None})
