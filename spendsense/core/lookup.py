# spendsense/core/lookup.py
"""Barcode to product resolution: the user's own saved products first, then
the public catalog. Saving a result back is a separate call (db.save_user_product)."""
from typing import Any, Callable, Dict, Union

from spendsense.core import db
from spendsense.core.aggregation import to_amount
from spendsense.core.catalog import fetch_from_catalog
from spendsense.core.context import RequestContext
from spendsense.core.models import CatalogProduct, LookupResult, ProductInfo
from spendsense.utils.text_utils import clean_text, is_valid_barcode, parse_amount

SOURCE_USER = "user"
SOURCE_CATALOG = "catalog"

CatalogFetcher = Callable[[str], Union[CatalogProduct, None]]


def lookup_product(ctx: RequestContext, barcode: Any,
                   fetch: CatalogFetcher = fetch_from_catalog) -> LookupResult:
    if not is_valid_barcode(barcode):
        return LookupResult(error="Invalid barcode format")
    barcode = barcode.strip()

    if ctx.is_authenticated:
        cached = db.find_user_product(ctx, barcode)
        if not cached.success:
            print(f"Product cache check failed for barcode {barcode}, trying catalog: {cached.error}")
        elif cached.data:
            row = cached.data
            price = row.get("price")
            return LookupResult(
                product=ProductInfo(
                    barcode=row.get("barcode", barcode),
                    name=row.get("name", ""),
                    price=to_amount(price) if price is not None else None,
                    category=row.get("category", ""),
                ),
                source=SOURCE_USER,
            )

    try:
        catalog_product = fetch(barcode)
    except Exception as e:
        print(f"Catalog lookup failed for barcode {barcode}: {e}")
        catalog_product = None
    if catalog_product is None:
        return LookupResult()

    return LookupResult(
        product=ProductInfo(
            barcode=catalog_product.barcode,
            name=catalog_product.name,
            price=None,
            category=catalog_product.category,
        ),
        source=SOURCE_CATALOG,
        details={"brand": catalog_product.brand, "image_url": catalog_product.image_url},
    )


def scanned_expense(name: Any, unit_price: Any, quantity: Any = 1) -> Dict[str, Any]:
    """Turns a confirmed scan into expense fields.

    Ex: ("Rice 1kg", 55.0, 2) -> {"description": "Rice 1kg (x2)", "amount": 110.0}
    Raises ValueError when the name is blank or the price is not positive.
    """
    name = clean_text(name)
    price = parse_amount(unit_price)
    if not name:
        raise ValueError("Please enter a product name")
    if price is None:
        raise ValueError("Please enter a valid price")

    try:
        count = int(quantity)
    except (TypeError, ValueError):
        count = 1
    if count < 1:
        count = 1

    return {
        "description": f"{name} (x{count})" if count > 1 else name,
        "amount": price * count,
        "unit_price": price,
        "quantity": count,
    }
