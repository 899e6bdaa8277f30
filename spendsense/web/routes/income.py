# spendsense/web/routes/income.py
from flask import Blueprint, jsonify

from spendsense.core import db
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("income", __name__)


@bp.route("/income", methods=["GET"])
def list_income():
    result = db.get_all_income(get_request_context())
    return jsonify({"income": result.data, "error": result.error})


@bp.route("/income", methods=["POST"])
def create_income():
    form = json_body()
    result = db.add_income(get_request_context(), form.get("amount"), form.get("description"), form.get("source"))
    return result_response(result, 201, {"income": result.data})


@bp.route("/income/<income_id>", methods=["DELETE"])
def remove_income(income_id: str):
    return result_response(db.delete_income(get_request_context(), income_id))
