"""
Active section resolution from the product classification.
Order is fixed: base -> usda -> coldChain -> shelfLife.
"""
import logging
from typing import Mapping, Optional

from core.taxonomy.category_registry import (
    find_main_for_subcategory,
    is_auto_meat,
    needs_meat_inquiry,
    requires_cold_chain,
)
from core.taxonomy.category_token import decode
from .section_catalog import BASE_SECTIONS, USDA_SECTION, COLD_CHAIN_SECTION, SHELF_LIFE_SECTION
from .section_schema import Section

logger = logging.getLogger(__name__)


def requires_usda(sub_id: Optional[str], contains_meat: Optional[bool]) -> bool:
    return is_auto_meat(sub_id) or contains_meat is True


def resolve_sections(
    main_id: Optional[str],
    sub_id: Optional[str],
    contains_meat: Optional[bool] = None,
) -> list[Section]:
    """contains_meat: True / False / None (not asked yet)."""
    sections = list(BASE_SECTIONS)
    if requires_usda(sub_id, contains_meat):
        sections.append(USDA_SECTION)
    if requires_cold_chain(main_id, sub_id):
        sections.append(COLD_CHAIN_SECTION)
    sections.append(SHELF_LIFE_SECTION)
    logger.debug(
        "SECTIONS_RESOLVED main=%s sub=%s contains_meat=%s sections=%s",
        main_id, sub_id, contains_meat, section_ids(sections),
    )
    return sections


def section_ids(sections: list[Section]) -> list[str]:
    return [s.id for s in sections]


def answers_for_sections(answers: Mapping[str, str], sections: list[Section]) -> dict[str, str]:
    """Drop answers to questions outside the given sections (e.g. usda after a "no meat" answer)."""
    active = {q.id for s in sections for q in s.questions}
    return {qid: value for qid, value in answers.items() if qid in active}


def resolve_for_state(state) -> list[Section]:
    """Resolve from a ClassificationState (or anything with main_id, sub_id, contains_meat)."""
    return resolve_sections(state.main_id, state.sub_id, state.contains_meat)


def resolve_for_record(
    product_category: str,
    answers: Mapping[str, str],
    contains_meat: Optional[bool] = None,
) -> list[Section]:
    """
    Sections of a stored assessment. contains_meat is the stored meat answer; it only counts for
    subcategories that ask about meat. Older records without it are treated as containing meat
    when any USDA question was answered.
    Legacy flat tokens ("chips") are subcategory ids and are mapped back to their main category.
    """
    token = decode(product_category)
    main_id, sub_id = token.main_id, token.sub_id
    if token.is_legacy and find_main_for_subcategory(main_id):
        main_id, sub_id = find_main_for_subcategory(token.main_id), token.main_id
    if not needs_meat_inquiry(sub_id):
        contains_meat = None
    elif contains_meat is None and any(qid in answers for qid in USDA_SECTION.question_ids()):
        contains_meat = True
    return resolve_sections(main_id, sub_id, contains_meat)
