"""
Static product category catalog and the regulatory triggers derived from it.

Triggers:
  auto-meat           subcategory always contains meat -> USDA section, no meat question
  meat-inquiry        subcategory may or may not contain meat -> ask the user
  cold-chain          refrigerated/frozen handling required (main OR subcategory level)
"""
from typing import Optional

from .category_schema import MainCategory, SubCategory, CUSTOM_MAIN_CATEGORY_ID


def _main(main_id: str, sub_ids: list[str]) -> MainCategory:
    return MainCategory(
        id=main_id,
        label_key=f"categories.main.{main_id}",
        subcategories=tuple(SubCategory(id=s, label_key=f"categories.sub.{s}") for s in sub_ids),
    )


FOOD_CATEGORIES: tuple[MainCategory, ...] = (
    _main("snacks", [
        "chips", "cookies", "candy", "nuts", "dried_fruits", "crackers",
        "popcorn", "puffed_snacks", "jerky",
    ]),
    _main("beverages", [
        "carbonated", "juice", "tea_drinks", "coffee_drinks", "energy_drinks",
        "water", "plant_protein_drinks",
    ]),
    _main("condiments", [
        "soy_sauce", "vinegar", "chili_sauce", "ketchup", "oyster_sauce",
        "salad_dressing", "spice_powder", "cooking_oil",
    ]),
    _main("convenience", [
        "instant_noodles", "noodles_pasta", "rice", "instant_porridge",
        "self_heating", "canned_food", "ready_meals",
    ]),
    _main("bakery", [
        "bread", "cake", "pastry", "mooncake", "pie_tart", "chocolate", "jelly_pudding",
    ]),
    _main("dairy", ["milk", "yogurt", "cheese", "butter", "cream", "tofu_soy"]),
    _main("frozen", [
        "frozen_meat", "frozen_seafood", "frozen_vegetables", "frozen_dumplings",
        "frozen_pizza", "ice_cream",
    ]),
    _main("health", [
        "supplements", "protein_powder", "nutrition_bars", "meal_replacement",
        "organic_food", "sugar_free",
    ]),
    _main("ingredients", [
        "rice_grains", "flour", "dried_goods", "beans", "sugar", "salt", "tea_leaves", "spices",
    ]),
    MainCategory(
        id=CUSTOM_MAIN_CATEGORY_ID,
        label_key=f"categories.main.{CUSTOM_MAIN_CATEGORY_ID}",
        subcategories=(),
        allow_custom=True,
    ),
)

# Certainly contain meat: USDA/FSIS jurisdiction without asking
AUTO_MEAT_SUBCATEGORIES = frozenset({"jerky", "frozen_meat"})

# May contain meat depending on the recipe
MEAT_INQUIRY_SUBCATEGORIES = frozenset({
    "canned_food",
    "ready_meals",
    "instant_noodles",
    "self_heating",
    "instant_porridge",
    "frozen_dumplings",
    "frozen_pizza",
    "mooncake",
    "pastry",
    "pie_tart",
})

COLD_CHAIN_MAIN_CATEGORIES = frozenset({"dairy", "frozen"})
COLD_CHAIN_SUBCATEGORIES = frozenset({"ready_meals", "cake", "plant_protein_drinks"})

_BY_ID: dict[str, MainCategory] = {c.id: c for c in FOOD_CATEGORIES}
_MAIN_BY_SUB: dict[str, str] = {s.id: c.id for c in FOOD_CATEGORIES for s in c.subcategories}

assert not (AUTO_MEAT_SUBCATEGORIES & MEAT_INQUIRY_SUBCATEGORIES)
assert (AUTO_MEAT_SUBCATEGORIES | MEAT_INQUIRY_SUBCATEGORIES | COLD_CHAIN_SUBCATEGORIES) <= set(_MAIN_BY_SUB)


def list_main_categories() -> list[MainCategory]:
    return list(FOOD_CATEGORIES)


def get_main_category(main_id: Optional[str]) -> Optional[MainCategory]:
    if not main_id:
        return None
    return _BY_ID.get(main_id)


def subcategories_of(main_id: Optional[str]) -> list[SubCategory]:
    """Ordered subcategories; empty for the custom entry and unknown ids."""
    main = get_main_category(main_id)
    return list(main.subcategories) if main else []


def get_subcategory(sub_id: Optional[str]) -> Optional[SubCategory]:
    main = get_main_category(_MAIN_BY_SUB.get(sub_id or ""))
    if main is None:
        return None
    return next(s for s in main.subcategories if s.id == sub_id)


def find_main_for_subcategory(sub_id: Optional[str]) -> Optional[str]:
    return _MAIN_BY_SUB.get(sub_id or "")


def allows_custom(main_id: Optional[str]) -> bool:
    main = get_main_category(main_id)
    return bool(main and main.allow_custom)


def is_auto_meat(sub_id: Optional[str]) -> bool:
    return bool(sub_id) and sub_id in AUTO_MEAT_SUBCATEGORIES


def needs_meat_inquiry(sub_id: Optional[str]) -> bool:
    return bool(sub_id) and sub_id in MEAT_INQUIRY_SUBCATEGORIES


def requires_cold_chain(main_id: Optional[str], sub_id: Optional[str]) -> bool:
    if main_id and main_id in COLD_CHAIN_MAIN_CATEGORIES:
        return True
    return bool(sub_id) and sub_id in COLD_CHAIN_SUBCATEGORIES
