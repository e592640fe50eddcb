from typing import Any, Dict, Optional

import requests

from allersafe.models import Product
from allersafe.services.products.base import ProductSource


class UPCItemDBSource(ProductSource):
    name = "UPCItemDB"
    BASE_URL = "https://api.upcitemdb.com/prod/trial/lookup"

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds

    def lookup(self, barcode: str) -> Optional[Product]:
        response = requests.get(self.BASE_URL, params={"upc": barcode}, timeout=self.timeout_seconds)
        # The trial API answers unknown codes with 400/404 and a JSON body.
        if response.status_code in (400, 404):
            return None
        response.raise_for_status()
        data = response.json()

        items = data.get("items") or []
        if data.get("code") != "OK" or not items:
            return None
        return self._adapt(items[0])

    def _adapt(self, item: Dict[str, Any]) -> Product:
        images = item.get("images") or []
        # UPCItemDB has no ingredient field; the description is the closest text.
        return Product(
            name=item.get("title") or "Unknown Product",
            brand=item.get("brand") or "",
            ingredients=item.get("description") or "",
            image_url=images[0] if images else "",
            categories=item.get("category") or "",
            source=self.name
        )
