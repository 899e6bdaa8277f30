# spendsense/web/routes/dashboard.py
from flask import Blueprint, jsonify

from spendsense.core.dashboard import build_dashboard
from spendsense.web.auth import get_request_context

bp = Blueprint("dashboard", __name__)


@bp.route("/dashboard", methods=["GET"])
async def dashboard():
    """Budget, spent and remaining for this month plus recent activity.

    Anonymous callers get zeroed defaults rather than an error.
    """
    ctx = get_request_context()
    data = await build_dashboard(ctx)
    return jsonify(data)
