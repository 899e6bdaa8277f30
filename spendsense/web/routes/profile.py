# spendsense/web/routes/profile.py
from flask import Blueprint, jsonify

from spendsense.core import db
from spendsense.core.models import NOT_AUTHENTICATED
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("profile", __name__)


@bp.route("/profile", methods=["GET"])
def show_profile():
    profile = db.get_profile_data(get_request_context())
    if profile is None:
        return jsonify({"profile": None, "error": NOT_AUTHENTICATED}), 401
    return jsonify({"profile": profile, "error": None})


@bp.route("/profile", methods=["PUT", "POST"])
def edit_profile():
    result = db.update_profile(get_request_context(), json_body().get("username"))
    return result_response(result, payload={"profile": result.data})
