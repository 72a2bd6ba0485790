"""
One assessment interview. Owns the WizardState from mode pick to submit/abandon.

Steps, labels and the live score are recomputed from the state on every read,
so reclassifying a product immediately changes which sections are asked.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from core.ai.answer_normalizer import UnknownAnswerValueError, normalize_answers
from core.ai.ollama_client import AIServiceError
from core.ai.packaging_analysis import ANALYZED_QUESTION_IDS, PackagingAnalysis
from core.checklist.section_resolver import answers_for_sections, resolve_for_state
from core.checklist.section_schema import ANSWER_OPTIONS, Section
from core.evaluation.score_engine import score
from core.models import classification as cls
from core.models.assessment import AssessmentRecord, ScoreResult
from .step_sequencer import (
    CaptureMode,
    Step,
    WizardState,
    build_steps,
    can_advance,
    step_labels as labels_for_steps,
)

logger = logging.getLogger(__name__)

# image -> analysis; image is whatever the caller selected (bytes, upload handle, ...)
Analyzer = Callable[[Any], PackagingAnalysis]


class SessionClosedError(RuntimeError):
    """Session was already submitted or abandoned."""


class StepBlockedError(RuntimeError):
    """Current step's requirements are not met yet."""


class AssessmentSession:
    def __init__(self):
        self.state = WizardState()
        self.image: Optional[Any] = None
        self.analysis: Optional[PackagingAnalysis] = None
        self.error: Optional[str] = None
        self.closed = False
        self._step = Step.MODE

    # --- derived views ---

    @property
    def classification(self) -> cls.ClassificationState:
        return self.state.classification

    @property
    def answers(self) -> dict[str, str]:
        return dict(self.state.answers)

    def active_sections(self) -> list[Section]:
        return resolve_for_state(self.state.classification)

    def steps(self) -> list[Step]:
        return build_steps(self.state.mode, self.state.classification, self.active_sections())

    def step_labels(self) -> list[str]:
        return labels_for_steps(self.steps())

    @property
    def current_step(self) -> Step:
        if self._step not in self.steps():
            # e.g. meatInquiry vanished after reclassification
            self._step = Step.CATEGORY
        return self._step

    @property
    def current_step_index(self) -> int:
        return self.steps().index(self.current_step)

    def can_advance(self) -> bool:
        return can_advance(self.current_step, self.state, self.active_sections())

    def live_score(self) -> ScoreResult:
        return score(self.state.answers, self.active_sections())

    # --- mutations ---

    def _check_open(self) -> None:
        if self.closed:
            raise SessionClosedError("assessment session is closed")

    def _set_classification(self, new_state: cls.ClassificationState) -> None:
        self.state.classification = new_state
        logger.info("WIZARD_CLASSIFICATION %s", new_state.to_dict())

    def choose_mode(self, mode: CaptureMode) -> None:
        self._check_open()
        self.state.mode = CaptureMode(mode)

    def select_main_category(self, main_id: str) -> None:
        self._check_open()
        self._set_classification(cls.select_main_category(self.state.classification, main_id))

    def clear_main_category(self) -> None:
        self._check_open()
        self._set_classification(cls.clear_main_category(self.state.classification))

    def select_subcategory(self, sub_id: str) -> None:
        self._check_open()
        self._set_classification(cls.select_subcategory(self.state.classification, sub_id))

    def set_custom_name(self, name: str) -> None:
        self._check_open()
        self._set_classification(cls.set_custom_name(self.state.classification, name))

    def answer_meat_inquiry(self, contains_meat: bool) -> None:
        self._check_open()
        self._set_classification(cls.answer_meat_inquiry(self.state.classification, contains_meat))

    def set_answer(self, question_id: str, value: str) -> None:
        self._check_open()
        if value not in ANSWER_OPTIONS:
            raise ValueError(f"unknown answer value {value!r}")
        active_ids = {q.id for s in self.active_sections() for q in s.questions}
        if question_id not in active_ids:
            raise ValueError(f"question {question_id!r} is not part of this assessment")
        self.state.answers[question_id] = value

    def _labeling_only(self, proposed: dict[str, str]) -> dict[str, str]:
        kept = {qid: value for qid, value in proposed.items() if qid in ANALYZED_QUESTION_IDS}
        if len(kept) != len(proposed):
            logger.info("WIZARD_ANALYSIS dropped=%s", sorted(set(proposed) - set(kept)))
        return kept

    def select_image(self, image: Optional[Any]) -> None:
        """Any new selection (or clearing it) drops the previous analysis."""
        self._check_open()
        self.image = image
        self.state.image_selected = image is not None
        self.analysis = None

    def analyze_image(self, analyzer: Analyzer) -> bool:
        """
        Run one analysis of the selected image. On success merge the proposed answers and
        advance one step; on failure keep answers and classification and record the error.
        """
        self._check_open()
        if self.current_step != Step.UPLOAD:
            raise StepBlockedError("image analysis runs from the upload step")
        if self.image is None:
            raise StepBlockedError("no image selected")
        self.error = None
        try:
            result = analyzer(self.image)
            if result.success:
                merged = self._labeling_only(normalize_answers(result.answers))
        except (AIServiceError, UnknownAnswerValueError) as e:
            result = PackagingAnalysis(success=False, error=str(e))
        if not result.success:
            self.error = result.error or "Analysis failed"
            logger.warning("WIZARD_ANALYSIS failed error=%s", self.error)
            return False

        self.analysis = replace(result, answers=merged)
        self.state.answers.update(merged)
        logger.info("WIZARD_ANALYSIS merged=%d", len(merged))
        self.next_step()
        return True

    # --- navigation ---

    def next_step(self) -> Step:
        self._check_open()
        if not self.can_advance():
            raise StepBlockedError(f"step {self.current_step.value} is not complete")
        steps = self.steps()
        idx = steps.index(self.current_step)
        if idx + 1 < len(steps):
            self._step = steps[idx + 1]
        logger.info("WIZARD_STEP %s (%d/%d)", self._step.value, steps.index(self._step) + 1, len(steps))
        return self._step

    def previous_step(self) -> Step:
        self._check_open()
        steps = self.steps()
        idx = steps.index(self.current_step)
        if idx > 0:
            self._step = steps[idx - 1]
        return self._step

    # --- lifecycle ---

    def finalize(self) -> AssessmentRecord:
        self._check_open()
        if self.current_step != Step.REVIEW:
            raise StepBlockedError("assessment can only be submitted from the review step")
        token = cls.to_token(self.state.classification)
        sections = self.active_sections()
        # answers to sections that dropped out (e.g. usda after "no meat") are not part of the record
        answers = answers_for_sections(self.state.answers, sections)
        result = score(answers, sections)
        record = AssessmentRecord(
            product_category=token,
            answers=answers,
            score=result.percentage,
            status=result.status,
            contains_meat=self.state.classification.contains_meat,
        )
        self.closed = True
        logger.info(
            "WIZARD_SUBMIT category=%s score=%d status=%s answered=%d",
            token, result.percentage, result.status.value, len(record.answers),
        )
        return record

    def abandon(self) -> None:
        self.closed = True
        logger.info("WIZARD_ABANDON step=%s", self._step.value)
