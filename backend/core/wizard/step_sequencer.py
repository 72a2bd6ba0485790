"""
Interview step sequence, step labels, and per-step advance gating.

Fixed relative order (bracketed steps are conditional):
  mode -> category -> [meatInquiry] -> [upload] -> labeling -> facility -> safety
       -> [usda] -> [coldChain] -> shelfLife -> review

usda / coldChain are never decided here: they are copied from the resolved active sections.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.checklist.section_schema import Section
from core.models.classification import (
    ClassificationState,
    EMPTY_CLASSIFICATION,
    is_complete,
    meat_inquiry_required,
)


class CaptureMode(str, Enum):
    UPLOAD = "upload"
    MANUAL = "manual"


class Step(str, Enum):
    MODE = "mode"
    CATEGORY = "category"
    MEAT_INQUIRY = "meatInquiry"
    UPLOAD = "upload"
    LABELING = "labeling"
    FACILITY = "facility"
    SAFETY = "safety"
    USDA = "usda"
    COLD_CHAIN = "coldChain"
    SHELF_LIFE = "shelfLife"
    REVIEW = "review"


SECTION_STEPS = frozenset({
    Step.LABELING, Step.FACILITY, Step.SAFETY, Step.USDA, Step.COLD_CHAIN, Step.SHELF_LIFE,
})

_FIXED_LABELS = {
    Step.MODE: "assessmentMode.title",
    Step.CATEGORY: "assessment.selectCategory",
    Step.MEAT_INQUIRY: "assessment.meatInquiry.title",
    Step.UPLOAD: "assessment.uploadImage",
    Step.REVIEW: "common.save",
}


@dataclass
class WizardState:
    mode: Optional[CaptureMode] = None
    classification: ClassificationState = EMPTY_CLASSIFICATION
    answers: dict[str, str] = field(default_factory=dict)
    image_selected: bool = False


def build_steps(
    mode: Optional[CaptureMode],
    classification: ClassificationState,
    active_sections: list[Section],
) -> list[Step]:
    steps = [Step.MODE, Step.CATEGORY]
    if meat_inquiry_required(classification):
        steps.append(Step.MEAT_INQUIRY)
    if mode == CaptureMode.UPLOAD:
        steps.append(Step.UPLOAD)
    # Section steps mirror the resolver output, in its order
    steps.extend(Step(s.id) for s in active_sections)
    steps.append(Step.REVIEW)
    return steps


def step_label(step: Step) -> str:
    if step in SECTION_STEPS:
        return f"assessment.sections.{step.value}"
    return _FIXED_LABELS[step]


def step_labels(steps: list[Step]) -> list[str]:
    return [step_label(s) for s in steps]


def can_advance(step: Step, state: WizardState, active_sections: list[Section]) -> bool:
    if step == Step.MODE:
        return state.mode is not None
    if step == Step.CATEGORY:
        return is_complete(state.classification)
    if step == Step.MEAT_INQUIRY:
        return state.classification.contains_meat is not None
    if step == Step.UPLOAD:
        return state.image_selected
    if step == Step.REVIEW:
        # Terminal; finishing is gated on explicit submit
        return True
    section = next((s for s in active_sections if s.id == step.value), None)
    if section is None:
        return False
    return all(state.answers.get(q.id) for q in section.questions)
