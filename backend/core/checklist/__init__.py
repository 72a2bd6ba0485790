from .section_schema import AnswerValue, ANSWER_OPTIONS, Question, Section, SectionId
from .section_catalog import (
    BASE_SECTIONS,
    LABELING_SECTION,
    USDA_SECTION,
    COLD_CHAIN_SECTION,
    SHELF_LIFE_SECTION,
    all_sections,
    get_section,
    get_question,
)
from .section_resolver import (
    resolve_sections,
    resolve_for_state,
    resolve_for_record,
    answers_for_sections,
    requires_usda,
    section_ids,
)

__all__ = [
    "AnswerValue",
    "ANSWER_OPTIONS",
    "Question",
    "Section",
    "SectionId",
    "BASE_SECTIONS",
    "LABELING_SECTION",
    "USDA_SECTION",
    "COLD_CHAIN_SECTION",
    "SHELF_LIFE_SECTION",
    "all_sections",
    "get_section",
    "get_question",
    "resolve_sections",
    "resolve_for_state",
    "resolve_for_record",
    "answers_for_sections",
    "requires_usda",
    "section_ids",
]
