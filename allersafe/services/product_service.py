import time
from typing import Dict, List, Optional

from allersafe.core.engine_config import load_engine_config
from allersafe.core.logging_config import get_logger
from allersafe.models import Product
from allersafe.services.products.base import ProductSource
from allersafe.services.products.openfoodfacts import OpenFoodFactsSource
from allersafe.services.products.upcitemdb import UPCItemDBSource
from allersafe.utils.ingredient_text import split_ingredients_text

logger = get_logger(__name__)

NOT_FOUND_SUGGESTIONS = [
    "Try entering ingredients manually",
    "Check if the barcode is clear and readable",
    "This might be a local or new product not yet in databases",
]


class ProductNotFoundError(Exception):
    def __init__(self, barcode: str, sources: List[str], errors: List[str]):
        super().__init__(f"Product {barcode} not found in any source")
        self.barcode = barcode
        self.sources = sources
        self.errors = errors
        self.suggestions = list(NOT_FOUND_SUGGESTIONS)


class ProductService:
    def __init__(self, sources: Optional[List[ProductSource]] = None):
        config = load_engine_config()
        self.cache: Dict[str, Dict[str, object]] = {}
        self.cache_ttl_seconds = config.product_cache_ttl_seconds
        if sources is not None:
            self.sources: List[ProductSource] = list(sources)
        else:
            timeout = config.product_lookup_timeout_seconds
            self.sources = [OpenFoodFactsSource(timeout), UPCItemDBSource(timeout)]

    def lookup(self, barcode: str) -> Product:
        """
        Try each source in order and return the first product found.
        Raises ProductNotFoundError when no source knows the barcode.
        """
        barcode = barcode.strip()
        now = time.time()
        cached = self.cache.get(barcode)
        if cached:
            if now - cached["timestamp"] < self.cache_ttl_seconds:
                return cached["product"]
            del self.cache[barcode]

        errors = []
        for source in self.sources:
            try:
                product = source.lookup(barcode)
            except Exception as e:
                logger.warning(f"{source.name} lookup failed for {barcode}: {e}")
                errors.append(f"{source.name}: {e}")
                continue
            if product is None:
                continue

            # The label text is authoritative; structured lists can omit sub-ingredients.
            if product.ingredients:
                product.ingredients_list = split_ingredients_text(product.ingredients)
            logger.info(f"Product lookup successful: barcode={barcode} name={product.name!r} source={product.source}")
            self.cache[barcode] = {"timestamp": now, "product": product}
            return product

        raise ProductNotFoundError(barcode, [s.name for s in self.sources], errors)


product_service = ProductService()
