import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from allersafe.models import Product
from allersafe.services.product_service import ProductNotFoundError

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "scan_barcode.py"


@pytest.fixture
def scan_script():
    spec = importlib.util.spec_from_file_location("scan_barcode", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _product_service(product=None, error=None):
    service = MagicMock()
    if error is not None:
        service.lookup.side_effect = error
    else:
        service.lookup.return_value = product
    return service


def test_scan_analyzes_product_ingredients(scan_script, monkeypatch):
    product = Product(name="Choco Bar", ingredients="sugar, milk powder",
                      ingredients_list=["sugar", "milk powder"], source="OpenFoodFacts")
    monkeypatch.setattr(scan_script, "product_service", _product_service(product))

    result = scan_script.scan("123", ["milk"])

    assert result["product"]["name"] == "Choco Bar"
    assert result["analysis"]["user_allergies_detected"] is True
    assert result["analysis"]["barcode"] == "123"


def test_scan_refuses_product_without_ingredients(scan_script, monkeypatch):
    analyzer = MagicMock()
    monkeypatch.setattr(scan_script, "food_analyzer", analyzer)
    monkeypatch.setattr(scan_script, "product_service", _product_service(
        Product(name="Mystery Snack", source="UPCItemDB")
    ))

    with pytest.raises(SystemExit) as excinfo:
        scan_script.scan("456", ["milk"])

    assert "No ingredient data for 456" in str(excinfo.value)
    analyzer.analyze.assert_not_called()


def test_scan_reports_unknown_barcode(scan_script, monkeypatch):
    monkeypatch.setattr(scan_script, "product_service", _product_service(
        error=ProductNotFoundError("000", ["OpenFoodFacts"], [])
    ))

    with pytest.raises(SystemExit) as excinfo:
        scan_script.scan("000", [])

    assert "Product 000 not found" in str(excinfo.value)
