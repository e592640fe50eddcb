import time
from typing import Any, Dict, List, Optional

import requests

from allersafe.core.logging_config import get_logger
from allersafe.models import Product
from allersafe.services.products.base import ProductSource

logger = get_logger(__name__)


class OpenFoodFactsSource(ProductSource):
    name = "OpenFoodFacts"
    BASE_URL = "https://world.openfoodfacts.org/api/v0/product/"
    HEADERS = {"User-Agent": "AllerSafe/0.1 (+allergen-analyzer)"}

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds

    def lookup(self, barcode: str) -> Optional[Product]:
        api_start = time.time()
        response = requests.get(
            f"{self.BASE_URL}{barcode}.json",
            headers=self.HEADERS,
            timeout=self.timeout_seconds
        )
        response.raise_for_status()
        data = response.json()
        logger.debug(f"OpenFoodFacts lookup for {barcode}: {time.time() - api_start:.2f}s")

        product = data.get("product")
        if data.get("status") != 1 or not product:
            return None
        return self._adapt(product)

    def _adapt(self, product: Dict[str, Any]) -> Product:
        return Product(
            name=product.get("product_name") or product.get("product_name_en") or "Unknown Product",
            brand=product.get("brands") or "",
            ingredients=product.get("ingredients_text") or product.get("ingredients_text_en") or "",
            ingredients_list=self._ingredient_names(product.get("ingredients") or []),
            allergens=product.get("allergens") or "",
            nutrition_grade=product.get("nutrition_grades") or "",
            image_url=product.get("image_front_url") or product.get("image_url") or "",
            categories=product.get("categories") or "",
            source=self.name
        )

    @staticmethod
    def _ingredient_names(raw: List[Any]) -> List[str]:
        """Flatten the ingredient tree; compound ingredients list their parts under 'ingredients'."""
        names = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if isinstance(text, str) and text.strip():
                names.append(text.strip())
            names.extend(OpenFoodFactsSource._ingredient_names(item.get("ingredients") or []))
        return names
