import argparse
import json
from typing import Any, Dict, List

from allersafe.services.food_analyzer import food_analyzer
from allersafe.services.product_service import ProductNotFoundError, product_service


def scan(barcode: str, allergies: List[str]) -> Dict[str, Any]:
    """Look up a barcode and analyze its ingredients.

    Raises SystemExit when the product is unknown or carries no ingredient
    data, since an empty ingredient list would score as all-clear.
    """
    try:
        product = product_service.lookup(barcode)
    except ProductNotFoundError as exc:
        raise SystemExit(f"Product {exc.barcode} not found ({', '.join(exc.errors) or 'no match'}).")

    if not product.ingredients_list and not product.ingredients.strip():
        raise SystemExit(f"No ingredient data for {barcode}; enter ingredients manually.")

    analysis = food_analyzer.analyze(
        product.ingredients_list,
        food_name=product.name,
        allergies=allergies,
        barcode=barcode
    )
    return {"product": product.model_dump(), "analysis": analysis.model_dump()}


def main():
    parser = argparse.ArgumentParser(description="Look up a barcode and check it for allergens.")
    parser.add_argument("barcode")
    parser.add_argument(
        "--allergies",
        default="",
        help="Comma separated allergy names, e.g. 'nuts, milk'"
    )
    args = parser.parse_args()

    allergies = [a.strip() for a in args.allergies.split(",") if a.strip()]
    print(json.dumps(scan(args.barcode, allergies), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
