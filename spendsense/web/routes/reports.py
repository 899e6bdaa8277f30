# spendsense/web/routes/reports.py
from flask import Blueprint, jsonify, request, send_file

from spendsense.core import charts
from spendsense.core.dashboard import build_report_data
from spendsense.core.reports import PERIODS
from spendsense.web.auth import get_request_context

bp = Blueprint("reports", __name__, url_prefix="/reports")

CHART_NAMES = ("categories", "trend")


def _report_args():
    period = request.args.get("period", "month")
    category = request.args.get("category") or None
    return period, category


@bp.route("", methods=["GET"])
async def report():
    period, category = _report_args()
    if period not in PERIODS:
        return jsonify({"error": f"period must be one of: {', '.join(PERIODS)}"}), 400
    return jsonify(await build_report_data(get_request_context(), period, category))


@bp.route("/charts/<name>.png", methods=["GET"])
async def report_chart(name: str):
    period, category = _report_args()
    if name not in CHART_NAMES:
        return jsonify({"error": f"Unknown chart: {name}"}), 404
    if period not in PERIODS:
        return jsonify({"error": f"period must be one of: {', '.join(PERIODS)}"}), 400

    data = await build_report_data(get_request_context(), period, category)
    if name == "categories":
        chart_buffer = charts.generate_category_chart(data["breakdown"])
    else:
        chart_buffer = charts.generate_trend_chart(data["series"])

    if chart_buffer is None:
        # Nothing recorded for this filter yet
        return "", 204
    return send_file(chart_buffer, mimetype="image/png", download_name=f"{name}.png")
