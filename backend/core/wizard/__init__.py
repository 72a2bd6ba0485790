from .step_sequencer import (
    CaptureMode,
    Step,
    WizardState,
    build_steps,
    step_label,
    step_labels,
    can_advance,
)
from .session import AssessmentSession, SessionClosedError, StepBlockedError

__all__ = [
    "CaptureMode",
    "Step",
    "WizardState",
    "build_steps",
    "step_label",
    "step_labels",
    "can_advance",
    "AssessmentSession",
    "SessionClosedError",
    "StepBlockedError",
]
