from allersafe.utils.ingredient_text import (
    clean_ingredient_list,
    dedupe,
    format_allergen_name,
    parse_allergy_profile,
    split_ingredients_text,
)


def test_split_on_all_separators():
    text = "Sugar, wheat flour; cocoa butter.\nmilk powder"
    assert split_ingredients_text(text) == ["Sugar", "wheat flour", "cocoa butter", "milk powder"]


def test_split_drops_empty_and_numeric_tokens():
    assert split_ingredients_text("salt,, 12 ,  ; water. 3") == ["salt", "water"]


def test_split_empty_input():
    assert split_ingredients_text("") == []
    assert split_ingredients_text(None) == []


def test_clean_list_resplits_each_entry():
    assert clean_ingredient_list(["milk, eggs", "  ", "flour"]) == ["milk", "eggs", "flour"]


def test_parse_allergy_profile_keeps_order():
    assert parse_allergy_profile(" nuts , milk,, shellfish ") == ["nuts", "milk", "shellfish"]
    assert parse_allergy_profile("") == []


def test_dedupe_preserves_first_seen_order():
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_format_allergen_name():
    assert format_allergen_name("tree_nuts") == "Tree Nuts"
    assert format_allergen_name("milk") == "Milk"


def test_decimal_amounts_are_not_split():
    assert split_ingredients_text("Vitamin B12 (0.5 mg). salt") == ["Vitamin B12 (0.5 mg)", "salt"]
    assert clean_ingredient_list(["Vitamin B12 (0.5 mg)"]) == ["Vitamin B12 (0.5 mg)"]
