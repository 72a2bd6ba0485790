"""
Unit tests: section catalog content and active section resolution.
Run from backend: python -m pytest tests/test_section_resolver.py -v
"""
import pytest

from core.checklist import (
    BASE_SECTIONS,
    all_sections,
    answers_for_sections,
    get_question,
    get_section,
    resolve_for_record,
    resolve_sections,
    section_ids,
)


def test_catalog_weights():
    weights = {s.id: [q.weight for q in s.questions] for s in all_sections()}
    assert weights == {
        "labeling": [15, 15, 20, 10, 10, 10],
        "facility": [25, 20, 15],
        "safety": [15, 20, 15, 10],
        "usda": [25, 20, 25],
        "coldChain": [20, 20, 15],
        "shelfLife": [15, 10, 15],
    }


def test_question_ids_globally_unique_and_lookup():
    ids = [q.id for s in all_sections() for q in s.questions]
    assert len(ids) == len(set(ids))
    assert get_question("allergenDeclaration").section_id == "labeling"
    assert get_question("nope") is None
    assert get_section("coldChain").title_key == "assessment.sections.coldChain"


def test_base_only_product():
    assert section_ids(resolve_sections("snacks", "chips", None)) == [
        "labeling", "facility", "safety", "shelfLife",
    ]


def test_jerky_auto_meat_includes_usda_regardless_of_answer():
    """Scenario B: auto-meat subcategory ignores any manual meat answer."""
    for contains_meat in (None, True, False):
        ids = section_ids(resolve_sections("snacks", "jerky", contains_meat))
        assert ids == ["labeling", "facility", "safety", "usda", "shelfLife"]


@pytest.mark.parametrize("contains_meat,has_usda", [(True, True), (False, False), (None, False)])
def test_canned_food_meat_answer_drives_usda(contains_meat, has_usda):
    """Scenario C."""
    ids = section_ids(resolve_sections("convenience", "canned_food", contains_meat))
    assert ("usda" in ids) is has_usda


@pytest.mark.parametrize("sub_id", ["milk", "yogurt", "cheese", "butter", "cream", "tofu_soy"])
@pytest.mark.parametrize("contains_meat", [None, True, False])
def test_dairy_always_cold_chain(sub_id, contains_meat):
    """Scenario D."""
    assert "coldChain" in section_ids(resolve_sections("dairy", sub_id, contains_meat))


def test_meat_and_cold_chain_combined_canonical_order():
    ids = section_ids(resolve_sections("frozen", "frozen_meat", None))
    assert ids == ["labeling", "facility", "safety", "usda", "coldChain", "shelfLife"]


def test_ready_meals_with_meat_combines_triggers():
    ids = section_ids(resolve_sections("convenience", "ready_meals", True))
    assert ids == ["labeling", "facility", "safety", "usda", "coldChain", "shelfLife"]


def test_resolution_never_duplicates():
    from core.taxonomy import list_main_categories
    for main in list_main_categories():
        for sub in list(main.subcategories) or [None]:
            for meat in (None, True, False):
                ids = section_ids(resolve_sections(main.id, sub.id if sub else None, meat))
                assert len(ids) == len(set(ids))
                assert ids[:3] == [s.id for s in BASE_SECTIONS]
                assert ids[-1] == "shelfLife"


def test_resolve_for_record_infers_meat_from_usda_answers():
    ids = section_ids(resolve_for_record("convenience:canned_food", {"fsisEquivalence": "yes"}))
    assert "usda" in ids
    ids = section_ids(resolve_for_record("convenience:canned_food", {"haccp": "yes"}))
    assert "usda" not in ids
    ids = section_ids(resolve_for_record("convenience:canned_food", {}, contains_meat=True))
    assert "usda" in ids


def test_resolve_for_record_stored_meat_answer_wins():
    """A stored "no meat" answer keeps usda out even if usda answers are present."""
    ids = section_ids(resolve_for_record(
        "convenience:canned_food", {"fsisEquivalence": "no"}, contains_meat=False,
    ))
    assert "usda" not in ids


def test_resolve_for_record_ignores_meat_answer_where_not_asked():
    assert "usda" not in section_ids(resolve_for_record("snacks:chips", {}, contains_meat=True))
    assert "usda" not in section_ids(resolve_for_record("snacks:chips", {"labelApproval": "no"}))
    assert "usda" in section_ids(resolve_for_record("snacks:jerky", {}, contains_meat=False))


def test_answers_for_sections_keeps_active_questions_only():
    sections = resolve_sections("convenience", "canned_food", False)
    answers = {"nutritionFacts": "yes", "labelApproval": "no", "foo": "yes"}
    assert answers_for_sections(answers, sections) == {"nutritionFacts": "yes"}


def test_resolve_for_record_legacy_and_custom_tokens():
    assert section_ids(resolve_for_record("custom:Artisan Spice Mix", {})) == [
        "labeling", "facility", "safety", "shelfLife",
    ]
    # legacy flat token "jerky" is mapped back to snacks:jerky
    assert "usda" in section_ids(resolve_for_record("jerky", {}))
