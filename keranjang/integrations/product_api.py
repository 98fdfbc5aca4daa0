"""
Public product database lookups (OpenFoodFacts API).
Both calls only suggest data to the user; nothing here is authoritative.
"""
import logging
from typing import List, Optional

from ..errors import TransientNetworkError, ValidationError
from ..models import CatalogProduct
from ..settings import settings
from . import http_client

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 20
UNKNOWN_PRODUCT = "Unknown Product"


async def fetch_product_name(barcode: str) -> Optional[str]:
    """Look up a product name by barcode; None when unknown or unreachable."""
    barcode = (barcode or "").strip()
    if not barcode:
        raise ValidationError("Barcode is required")

    url = f"{settings.PRODUCT_API_BASE_URL}/api/v0/product/{barcode}.json"
    try:
        resp = await http_client.get(url)
        data = resp.json()
    except TransientNetworkError as e:
        logger.warning(f"Product lookup for {barcode} failed: {e}")
        return None
    except ValueError as e:
        logger.warning(f"Product lookup for {barcode} returned invalid JSON: {e}")
        return None

    if not isinstance(data, dict):
        return None
    # status 1 means found
    product = data.get("product")
    if data.get("status") == 1 and isinstance(product, dict) and product.get("product_name"):
        return product["product_name"]
    logger.info(f"Barcode {barcode} not found in product database")
    return None


async def search_global_products(query: str) -> List[CatalogProduct]:
    """Free-text search in the public catalog, for manual cross-reference."""
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query is required")

    params = {
        "search_terms": query,
        "search_simple": 1,
        "action": "process",
        "json": 1,
        "page_size": SEARCH_PAGE_SIZE,
    }
    try:
        resp = await http_client.get(f"{settings.PRODUCT_API_BASE_URL}/cgi/search.pl", params=params)
        data = resp.json()
    except TransientNetworkError as e:
        logger.warning(f"Catalog search for {query!r} failed: {e}")
        return []
    except ValueError as e:
        logger.warning(f"Catalog search for {query!r} returned invalid JSON: {e}")
        return []

    products = data.get("products") if isinstance(data, dict) else None
    if not isinstance(products, list):
        return []

    results = []
    for p in products:
        if not isinstance(p, dict):
            continue
        barcode = p.get("code") or ""
        if not barcode:
            continue
        results.append(CatalogProduct(
            name=p.get("product_name") or UNKNOWN_PRODUCT,
            brand=p.get("brands") or "",
            barcode=str(barcode),
        ))
    return results
