"""
Two-level product category types. The catalog itself lives in category_registry.
"""
from dataclasses import dataclass
from typing import Optional

# Main category that takes a free-text product name instead of a subcategory
CUSTOM_MAIN_CATEGORY_ID = "other"
CUSTOM_TOKEN_PREFIX = "custom"
TOKEN_SEPARATOR = ":"


@dataclass(frozen=True)
class SubCategory:
    id: str
    label_key: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label_key": self.label_key}


@dataclass(frozen=True)
class MainCategory:
    id: str
    label_key: str
    subcategories: tuple[SubCategory, ...] = ()
    allow_custom: bool = False

    def subcategory_ids(self) -> list[str]:
        return [s.id for s in self.subcategories]

    def has_subcategory(self, sub_id: Optional[str]) -> bool:
        return bool(sub_id) and any(s.id == sub_id for s in self.subcategories)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label_key": self.label_key,
            "subcategories": [s.to_dict() for s in self.subcategories],
            "allow_custom": self.allow_custom,
        }


@dataclass(frozen=True)
class CategoryToken:
    """
    Decoded product category.
    Either (main_id, sub_id), ("other", custom_name), or bare main_id (legacy data).
    """
    main_id: str
    sub_id: Optional[str] = None
    custom_name: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.custom_name is not None

    @property
    def is_legacy(self) -> bool:
        return self.sub_id is None and self.custom_name is None

    def to_dict(self) -> dict:
        return {
            "main_id": self.main_id,
            "sub_id": self.sub_id,
            "custom_name": self.custom_name,
        }


class CategoryTokenError(ValueError):
    """Category token could not be encoded or decoded."""
