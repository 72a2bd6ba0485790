"""
Fixed checklist content. Weights are compliance-content constants.

labeling, facility, safety   always asked
usda                         meat products (FSIS jurisdiction)
coldChain                    refrigerated / frozen products
shelfLife                    always asked, last
"""
from typing import Optional

from .section_schema import Question, Section, SectionId


def _section(section_id: SectionId, questions: list[tuple[str, int, str]]) -> Section:
    return Section(
        id=section_id.value,
        questions=tuple(
            Question(id=qid, section_id=section_id.value, weight=weight, text=text)
            for qid, weight, text in questions
        ),
    )


LABELING_SECTION = _section(SectionId.LABELING, [
    ("nutritionFacts", 15, "Nutrition Facts panel in FDA format"),
    ("ingredientList", 15, "Ingredient list in descending order by weight"),
    ("allergenDeclaration", 20, "Major food allergen declaration"),
    ("netQuantity", 10, "Net quantity in metric and US customary units"),
    ("manufacturerInfo", 10, "Manufacturer or distributor name and address"),
    ("countryOfOrigin", 10, "Country of origin marking"),
])

FACILITY_SECTION = _section(SectionId.FACILITY, [
    ("fdaRegistration", 25, "FDA food facility registration"),
    ("priorNotice", 20, "Prior notice of imported food shipments"),
    ("fsvp", 15, "Foreign Supplier Verification Program importer"),
])

SAFETY_SECTION = _section(SectionId.SAFETY, [
    ("haccp", 15, "HACCP plan"),
    ("fsma", 20, "FSMA preventive controls"),
    ("gmp", 15, "Current Good Manufacturing Practices"),
    ("hazardAnalysis", 10, "Documented hazard analysis"),
])

USDA_SECTION = _section(SectionId.USDA, [
    ("fsisEquivalence", 25, "Exporting country eligible under FSIS equivalence"),
    ("establishmentEligibility", 20, "Producing establishment certified eligible by FSIS"),
    ("labelApproval", 25, "Meat product label approved by FSIS"),
])

COLD_CHAIN_SECTION = _section(SectionId.COLD_CHAIN, [
    ("temperatureControl", 20, "Temperature-controlled storage and transport"),
    ("temperatureMonitoring", 20, "Continuous temperature monitoring records"),
    ("storageInstructions", 15, "Keep refrigerated / keep frozen instructions on label"),
])

SHELF_LIFE_SECTION = _section(SectionId.SHELF_LIFE, [
    ("dateMarking", 15, "Best-by or use-by date marking"),
    ("storageConditions", 10, "Storage conditions stated on label"),
    ("shelfLifeValidation", 15, "Shelf life validated by testing"),
])

BASE_SECTIONS: tuple[Section, ...] = (LABELING_SECTION, FACILITY_SECTION, SAFETY_SECTION)

_ALL_SECTIONS: tuple[Section, ...] = BASE_SECTIONS + (USDA_SECTION, COLD_CHAIN_SECTION, SHELF_LIFE_SECTION)
_SECTIONS_BY_ID: dict[str, Section] = {s.id: s for s in _ALL_SECTIONS}
_QUESTIONS_BY_ID: dict[str, Question] = {q.id: q for s in _ALL_SECTIONS for q in s.questions}

assert len(_QUESTIONS_BY_ID) == sum(len(s.questions) for s in _ALL_SECTIONS), "duplicate question id"
assert all(q.weight > 0 for q in _QUESTIONS_BY_ID.values())


def all_sections() -> list[Section]:
    return list(_ALL_SECTIONS)


def get_section(section_id: str) -> Optional[Section]:
    return _SECTIONS_BY_ID.get(section_id)


def get_question(question_id: str) -> Optional[Question]:
    return _QUESTIONS_BY_ID.get(question_id)
