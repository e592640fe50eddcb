from abc import ABC, abstractmethod
from typing import Optional
from allersafe.models import Product


class ProductSource(ABC):
    name: str = "Unknown"

    @abstractmethod
    def lookup(self, barcode: str) -> Optional[Product]:
        """
        Resolve a barcode to a product.
        Returns None when the source does not know the barcode; raises on transport errors.
        """
        pass
