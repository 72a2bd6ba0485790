"""
Maps the image-analysis answer vocabulary onto the checklist answer vocabulary.
"notVisible" (cannot be determined from the photo) becomes notApplicable; anything unknown is rejected.
"""
from typing import Mapping

from core.checklist.section_schema import AnswerValue

NOT_VISIBLE = "notVisible"

EXTERNAL_ANSWER_VALUES = frozenset({
    AnswerValue.YES.value,
    AnswerValue.NO.value,
    AnswerValue.PARTIAL.value,
    AnswerValue.NOT_APPLICABLE.value,
    NOT_VISIBLE,
})


class UnknownAnswerValueError(ValueError):
    def __init__(self, question_id: str, value: object):
        self.question_id = question_id
        self.value = value
        super().__init__(f"unknown answer value {value!r} for question {question_id!r}")


def normalize_answer(question_id: str, value: object) -> str:
    if value == NOT_VISIBLE:
        return AnswerValue.NOT_APPLICABLE.value
    if isinstance(value, str) and value in EXTERNAL_ANSWER_VALUES:
        return value
    raise UnknownAnswerValueError(question_id, value)


def normalize_answers(raw: Mapping[str, object]) -> dict[str, str]:
    return {qid: normalize_answer(qid, value) for qid, value in raw.items()}
