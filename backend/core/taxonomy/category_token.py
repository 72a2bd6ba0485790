"""
Compact category token stored with each assessment.

  "<main>:<sub>"     two-level selection
  "custom:<name>"    free-text product under the custom main category
  "<main>"           legacy single-level token (decode only; older data)
"""
from typing import Optional

from .category_schema import (
    CategoryToken,
    CategoryTokenError,
    CUSTOM_MAIN_CATEGORY_ID,
    CUSTOM_TOKEN_PREFIX,
    TOKEN_SEPARATOR,
)
from .category_registry import get_main_category, get_subcategory

_CUSTOM_PREFIX = CUSTOM_TOKEN_PREFIX + TOKEN_SEPARATOR


def encode(main_id: str, sub_id: Optional[str] = None, custom_name: Optional[str] = None) -> str:
    """Serialize a category selection. Raises CategoryTokenError on an invalid combination."""
    main = get_main_category(main_id)
    if main is None:
        raise CategoryTokenError(f"unknown main category: {main_id!r}")
    if custom_name is not None:
        if not main.allow_custom:
            raise CategoryTokenError(f"custom name not allowed for main category {main_id!r}")
        if sub_id is not None:
            raise CategoryTokenError("custom name and subcategory are mutually exclusive")
        if not custom_name:
            raise CategoryTokenError("custom name must not be empty")
        return _CUSTOM_PREFIX + custom_name
    if main.allow_custom:
        raise CategoryTokenError(f"main category {main_id!r} requires a custom name")
    if sub_id is not None:
        if not main.has_subcategory(sub_id):
            raise CategoryTokenError(f"subcategory {sub_id!r} does not belong to {main_id!r}")
        return f"{main_id}{TOKEN_SEPARATOR}{sub_id}"
    return main_id


def encode_token(token: CategoryToken) -> str:
    return encode(token.main_id, token.sub_id, token.custom_name)


def decode(token: str) -> CategoryToken:
    """Parse any stored token form, including legacy bare identifiers."""
    if not token:
        raise CategoryTokenError("empty category token")
    if token.startswith(_CUSTOM_PREFIX):
        name = token[len(_CUSTOM_PREFIX):]
        if not name:
            raise CategoryTokenError("custom category token without a name")
        return CategoryToken(main_id=CUSTOM_MAIN_CATEGORY_ID, custom_name=name)
    main_id, sep, sub_id = token.partition(TOKEN_SEPARATOR)
    if not sep:
        return CategoryToken(main_id=main_id)
    if not main_id or not sub_id:
        raise CategoryTokenError(f"malformed category token: {token!r}")
    return CategoryToken(main_id=main_id, sub_id=sub_id)


def display_text(token: str) -> str:
    """
    Text (or label key) shown for a stored token. Custom names are returned verbatim.
    Legacy flat tokens such as "chips" were subcategory names, so they resolve to the subcategory label.
    """
    parsed = decode(token)
    if parsed.is_custom:
        return parsed.custom_name
    main = get_main_category(parsed.main_id)
    if parsed.sub_id is not None:
        sub = get_subcategory(parsed.sub_id)
        sub_text = sub.label_key if sub else parsed.sub_id
        main_text = main.label_key if main else parsed.main_id
        return f"{main_text} > {sub_text}"
    legacy_sub = get_subcategory(parsed.main_id)
    if legacy_sub is not None:
        return legacy_sub.label_key
    return main.label_key if main else parsed.main_id


def validate_token(token: str) -> CategoryToken:
    """
    Decode a token and check it against the catalog. Bare tokens are accepted only as
    legacy data: a known subcategory id, or a main category that is not the custom one.
    """
    parsed = decode(token)
    if parsed.is_legacy:
        if get_subcategory(parsed.main_id) is not None:
            return parsed
        main = get_main_category(parsed.main_id)
        if main is None or main.allow_custom:
            raise CategoryTokenError(f"unknown category token: {token!r}")
        return parsed
    if encode_token(parsed) != token:
        raise CategoryTokenError(f"category token does not match the catalog: {token!r}")
    return parsed
