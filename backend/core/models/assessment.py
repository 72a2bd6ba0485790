"""
Score result and finalized assessment record. Single format for live preview and storage.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AssessmentStatus(str, Enum):
    PASSED = "passed"
    PARTIAL = "partial"
    FAILED = "failed"


class QuestionStatus(str, Enum):
    PASSED = "passed"
    PARTIAL = "partial"
    FAILED = "failed"
    NOT_APPLICABLE = "na"


@dataclass(frozen=True)
class ScoreResult:
    percentage: int
    status: AssessmentStatus
    earned_weight: float = 0.0
    total_weight: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "percentage": self.percentage,
            "status": self.status.value,
            "earned_weight": self.earned_weight,
            "total_weight": self.total_weight,
        }


@dataclass
class AssessmentRecord:
    """What the persistence layer stores verbatim; score/status are always computed by the engine."""
    product_category: str
    answers: dict[str, str] = field(default_factory=dict)
    score: int = 0
    status: AssessmentStatus = AssessmentStatus.FAILED
    contains_meat: Optional[bool] = None  # meat answer; None when not asked

    def to_dict(self) -> dict[str, Any]:
        return {
            "productCategory": self.product_category,
            "answers": dict(self.answers),
            "score": self.score,
            "status": self.status.value,
            "containsMeat": self.contains_meat,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssessmentRecord":
        status = data.get("status", AssessmentStatus.FAILED.value)
        if isinstance(status, str):
            status = AssessmentStatus(status)
        return cls(
            product_category=str(data.get("productCategory", "")),
            answers=dict(data.get("answers") or {}),
            score=int(data.get("score", 0)),
            status=status,
            contains_meat=data.get("containsMeat"),
        )
