from .category_schema import (
    MainCategory,
    SubCategory,
    CategoryToken,
    CategoryTokenError,
    CUSTOM_MAIN_CATEGORY_ID,
)
from .category_registry import (
    list_main_categories,
    get_main_category,
    get_subcategory,
    subcategories_of,
    find_main_for_subcategory,
    allows_custom,
    is_auto_meat,
    needs_meat_inquiry,
    requires_cold_chain,
)
from .category_token import encode, encode_token, decode, display_text, validate_token

__all__ = [
    "MainCategory",
    "SubCategory",
    "CategoryToken",
    "CategoryTokenError",
    "CUSTOM_MAIN_CATEGORY_ID",
    "list_main_categories",
    "get_main_category",
    "get_subcategory",
    "subcategories_of",
    "find_main_for_subcategory",
    "allows_custom",
    "is_auto_meat",
    "needs_meat_inquiry",
    "requires_cold_chain",
    "encode",
    "encode_token",
    "decode",
    "display_text",
    "validate_token",
]
