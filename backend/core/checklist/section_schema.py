"""
Checklist types: weighted questions grouped into sections, and the answer vocabulary.
"""
from dataclasses import dataclass
from enum import Enum


class AnswerValue(str, Enum):
    YES = "yes"
    NO = "no"
    PARTIAL = "partial"
    NOT_APPLICABLE = "notApplicable"


ANSWER_OPTIONS: tuple[str, ...] = tuple(a.value for a in AnswerValue)


class SectionId(str, Enum):
    LABELING = "labeling"
    FACILITY = "facility"
    SAFETY = "safety"
    USDA = "usda"
    COLD_CHAIN = "coldChain"
    SHELF_LIFE = "shelfLife"


@dataclass(frozen=True)
class Question:
    id: str
    section_id: str
    weight: int
    text: str  # short English statement; prompt/display text for the AI summary

    @property
    def question_key(self) -> str:
        return f"questions.{self.section_id}.{self.id}.question"

    @property
    def help_key(self) -> str:
        return f"questions.{self.section_id}.{self.id}.help"

    @property
    def recommendation_key(self) -> str:
        return f"recommendations.{self.id}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "section": self.section_id,
            "weight": self.weight,
            "question_key": self.question_key,
            "help_key": self.help_key,
            "text": self.text,
        }


@dataclass(frozen=True)
class Section:
    id: str
    questions: tuple[Question, ...]

    @property
    def title_key(self) -> str:
        return f"assessment.sections.{self.id}"

    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title_key": self.title_key,
            "questions": [q.to_dict() for q in self.questions],
        }
