# spendsense/core/catalog.py
import requests
from typing import Union

from spendsense.config import (
    CATALOG_BASE_URL,
    CATALOG_FIELDS,
    CATALOG_TIMEOUT,
    CATALOG_USER_AGENT,
)
from spendsense.core.models import CatalogProduct

UNKNOWN_PRODUCT_NAME = "Unknown Product"


def catalog_product_url(barcode: str, base_url: str = CATALOG_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/api/v2/product/{barcode}"


def fetch_from_catalog(barcode: str, timeout: float = CATALOG_TIMEOUT) -> Union[CatalogProduct, None]:
    """Looks a barcode up on Open Food Facts.

    Returns None for every kind of miss: timeout, network error, non-200 answer,
    unreadable JSON, or a payload whose status says the product is unknown.
    """
    headers = {
        "User-Agent": CATALOG_USER_AGENT,
        "Accept": "application/json",
    }
    try:
        response = requests.get(
            catalog_product_url(barcode),
            params={"fields": CATALOG_FIELDS},
            headers=headers,
            timeout=timeout,
        )
    except requests.exceptions.Timeout:
        print(f"Open Food Facts request timed out for barcode {barcode}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"Error fetching barcode {barcode} from Open Food Facts: {e}")
        return None

    if response.status_code != 200:
        print(f"Open Food Facts API error for barcode {barcode}: {response.status_code}")
        return None

    try:
        data = response.json()
    except ValueError as e:
        print(f"Invalid JSON from Open Food Facts for barcode {barcode}: {e}")
        return None

    # v2 answers 200 for unknown products too; status 1 is the only "found"
    if not isinstance(data, dict) or data.get("status") != 1 or not data.get("product"):
        return None

    product = data["product"]
    if not isinstance(product, dict):
        return None

    name = product.get("product_name")
    name = name.strip() if isinstance(name, str) else ""

    return CatalogProduct(
        barcode=barcode,
        name=name or UNKNOWN_PRODUCT_NAME,
        brand=product.get("brands") or None,
        image_url=product.get("image_url") or None,
    )
