"""
Deterministic weighted scoring. Same accumulation for the whole assessment and a single section.

Per question:
  notApplicable    excluded from earned AND total weight
  yes              full weight earned
  partial          half weight earned
  no / unanswered  nothing earned, weight still counted
"""
import logging
import math
from typing import Iterable, Mapping, Optional

from core.checklist.section_schema import AnswerValue, Question, Section
from core.models.assessment import AssessmentStatus, QuestionStatus, ScoreResult

logger = logging.getLogger(__name__)

PASSED_THRESHOLD = 80
PARTIAL_THRESHOLD = 50


def status_for_percentage(percentage: int) -> AssessmentStatus:
    """Shared by overall and per-section status."""
    if percentage >= PASSED_THRESHOLD:
        return AssessmentStatus.PASSED
    if percentage >= PARTIAL_THRESHOLD:
        return AssessmentStatus.PARTIAL
    return AssessmentStatus.FAILED


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _accumulate(answers: Mapping[str, str], questions: Iterable[Question]) -> tuple[float, int]:
    earned = 0.0
    total = 0
    for q in questions:
        answer = answers.get(q.id)
        if answer == AnswerValue.NOT_APPLICABLE.value:
            continue
        total += q.weight
        if answer == AnswerValue.YES.value:
            earned += q.weight
        elif answer == AnswerValue.PARTIAL.value:
            earned += q.weight * 0.5
    return earned, total


def _result(earned: float, total: int) -> ScoreResult:
    percentage = _round_half_up(100 * earned / total) if total > 0 else 0
    return ScoreResult(
        percentage=percentage,
        status=status_for_percentage(percentage),
        earned_weight=earned,
        total_weight=total,
    )


def score(answers: Mapping[str, str], sections: Iterable[Section]) -> ScoreResult:
    """Overall score over the active sections. Zero total weight -> 0%, failed."""
    sections = list(sections)
    earned, total = _accumulate(answers, (q for s in sections for q in s.questions))
    result = _result(earned, total)
    logger.debug(
        "SCORE sections=%s answered=%d earned=%.1f total=%d percentage=%d status=%s",
        [s.id for s in sections], len(answers), earned, total, result.percentage, result.status.value,
    )
    return result


def section_score(section: Section, answers: Mapping[str, str]) -> ScoreResult:
    earned, total = _accumulate(answers, section.questions)
    return _result(earned, total)


def section_status(
    section_id: str,
    answers: Mapping[str, str],
    sections: Iterable[Section],
) -> AssessmentStatus:
    """Status of one section of the given set; a section not in the set is failed."""
    section = _find_section(section_id, sections)
    if section is None:
        return AssessmentStatus.FAILED
    return section_score(section, answers).status


def _find_section(section_id: str, sections: Iterable[Section]) -> Optional[Section]:
    return next((s for s in sections if s.id == section_id), None)


def question_status(answer: Optional[str]) -> QuestionStatus:
    if answer == AnswerValue.YES.value:
        return QuestionStatus.PASSED
    if answer == AnswerValue.PARTIAL.value:
        return QuestionStatus.PARTIAL
    if answer == AnswerValue.NOT_APPLICABLE.value:
        return QuestionStatus.NOT_APPLICABLE
    return QuestionStatus.FAILED


def failed_questions(answers: Mapping[str, str], sections: Iterable[Section]) -> list[Question]:
    """Questions explicitly answered "no", in section order."""
    return [
        q for s in sections for q in s.questions
        if answers.get(q.id) == AnswerValue.NO.value
    ]


def section_breakdown(answers: Mapping[str, str], sections: Iterable[Section]) -> list[dict]:
    """Per-section result with item statuses; failed items carry a recommendation key."""
    breakdown = []
    for section in sections:
        result = section_score(section, answers)
        items = []
        for q in section.questions:
            status = question_status(answers.get(q.id))
            item = {
                "question_id": q.id,
                "question_key": q.question_key,
                "answer": answers.get(q.id),
                "status": status.value,
            }
            if status == QuestionStatus.FAILED:
                item["recommendation_key"] = q.recommendation_key
            items.append(item)
        breakdown.append({
            "section_id": section.id,
            "title_key": section.title_key,
            "percentage": result.percentage,
            "status": result.status.value,
            "items": items,
        })
    return breakdown
