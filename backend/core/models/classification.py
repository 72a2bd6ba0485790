"""
Product classification state and its transitions.

Every transition returns a new ClassificationState. Selecting a main category clears
everything downstream of it (subcategory, custom name, meat answer), so the
"subcategory belongs to main category" invariant only has to be enforced here.
"""
from dataclasses import dataclass, replace
from typing import Optional

from core.taxonomy import (
    allows_custom,
    encode,
    get_main_category,
    is_auto_meat,
    needs_meat_inquiry,
)


class ClassificationError(ValueError):
    """Selection does not fit the category catalog."""


@dataclass(frozen=True)
class ClassificationState:
    main_id: Optional[str] = None
    sub_id: Optional[str] = None
    custom_name: Optional[str] = None
    contains_meat: Optional[bool] = None  # None = not answered

    def to_dict(self) -> dict:
        return {
            "main_id": self.main_id,
            "sub_id": self.sub_id,
            "custom_name": self.custom_name,
            "contains_meat": self.contains_meat,
        }


EMPTY_CLASSIFICATION = ClassificationState()


def select_main_category(state: ClassificationState, main_id: str) -> ClassificationState:
    if get_main_category(main_id) is None:
        raise ClassificationError(f"unknown main category: {main_id!r}")
    return ClassificationState(main_id=main_id)


def clear_main_category(state: ClassificationState) -> ClassificationState:
    return EMPTY_CLASSIFICATION


def select_subcategory(state: ClassificationState, sub_id: str) -> ClassificationState:
    main = get_main_category(state.main_id)
    if main is None:
        raise ClassificationError("select a main category first")
    if not main.has_subcategory(sub_id):
        raise ClassificationError(f"subcategory {sub_id!r} does not belong to {main.id!r}")
    return replace(state, sub_id=sub_id, custom_name=None, contains_meat=None)


def set_custom_name(state: ClassificationState, name: str) -> ClassificationState:
    if not allows_custom(state.main_id):
        raise ClassificationError(f"main category {state.main_id!r} does not take a custom name")
    return replace(state, custom_name=name)


def answer_meat_inquiry(state: ClassificationState, contains_meat: bool) -> ClassificationState:
    if not needs_meat_inquiry(state.sub_id):
        raise ClassificationError(f"subcategory {state.sub_id!r} does not ask about meat")
    return replace(state, contains_meat=bool(contains_meat))


def is_complete(state: ClassificationState) -> bool:
    """Category step can be left: custom name filled in, or main + sub chosen."""
    if state.main_id is None:
        return False
    if allows_custom(state.main_id):
        return bool((state.custom_name or "").strip())
    return state.sub_id is not None


def meat_inquiry_required(state: ClassificationState) -> bool:
    return needs_meat_inquiry(state.sub_id)


def effective_contains_meat(state: ClassificationState) -> Optional[bool]:
    """Auto-meat subcategories count as meat without asking."""
    if is_auto_meat(state.sub_id):
        return True
    return state.contains_meat


def to_token(state: ClassificationState) -> str:
    if not is_complete(state):
        raise ClassificationError("classification is incomplete")
    if allows_custom(state.main_id):
        return encode(state.main_id, custom_name=state.custom_name.strip())
    return encode(state.main_id, state.sub_id)
