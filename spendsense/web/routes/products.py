# spendsense/web/routes/products.py
from flask import Blueprint, jsonify, request

from spendsense.core import db
from spendsense.core.lookup import lookup_product, scanned_expense
from spendsense.core.models import NOT_AUTHENTICATED
from spendsense.web.auth import get_request_context, json_body, result_response

bp = Blueprint("products", __name__, url_prefix="/products")


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


@bp.route("", methods=["GET"])
def list_products():
    result = db.get_user_products(get_request_context())
    return jsonify({"products": result.data, "error": result.error})


@bp.route("", methods=["POST"])
def save_product():
    """Saves confirmed product details so the next scan resolves from the user's cache."""
    form = json_body()
    result = db.save_user_product(
        get_request_context(),
        form.get("barcode"),
        form.get("name"),
        form.get("price"),
        form.get("category"),
    )
    return result_response(result)


@bp.route("/<product_id>", methods=["DELETE"])
def remove_product(product_id: str):
    return result_response(db.delete_user_product(get_request_context(), product_id))


@bp.route("/lookup", methods=["GET"])
def lookup():
    barcode = request.args.get("barcode")
    if not barcode:
        return jsonify({"product": None, "source": None, "error": "Barcode is required"}), 400

    result = lookup_product(get_request_context(), barcode)
    if result.error:
        return jsonify(result.to_dict()), 400

    payload = result.to_dict()
    if not result.found:
        payload["message"] = "Product not found"
    return jsonify(payload)


@bp.route("/scan", methods=["POST"])
def scan_to_expense():
    """Logs the expense for a scanned product, then optionally caches the product."""
    ctx = get_request_context()
    if not ctx.is_authenticated:
        return jsonify({"success": False, "error": NOT_AUTHENTICATED}), 401

    form = json_body()
    category = form.get("category")
    try:
        draft = scanned_expense(form.get("name"), form.get("price"), form.get("quantity", 1))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    result = db.add_expense(ctx, draft["amount"], draft["description"], category)
    if not result.success:
        # Expense first: a failed insert leaves the product cache untouched
        return result_response(result)

    product_saved = False
    barcode = form.get("barcode")
    if barcode and _truthy(form.get("save_for_later", True)):
        saved = db.save_user_product(ctx, barcode, form.get("name"), draft["unit_price"], category)
        product_saved = saved.success
        if not saved.success:
            print(f"Could not save scanned product {barcode}: {saved.error}")

    return result_response(result, 201, {"expense": result.data, "product_saved": product_saved})
