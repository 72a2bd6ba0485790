"""
AI inspection of a product package photo for the labeling checklist.

The model proposes an answer, a confidence level and an observation per labeling question.
It never scores: proposed answers are normalized and merged into the answer map like user input.
"""
import base64
import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Literal, Optional

from PIL import Image, UnidentifiedImageError

from core.checklist.section_catalog import LABELING_SECTION
from core.config import (
    ALLOWED_IMAGE_TYPES,
    LLM_ANALYSIS_TIMEOUT,
    MAX_IMAGE_BYTES,
    get_ollama_vision_model,
)
from .answer_normalizer import UnknownAnswerValueError, normalize_answers
from .ollama_client import AIServiceError, call_ollama, extract_json_object

logger = logging.getLogger(__name__)

ConfidenceLevel = Literal["high", "medium", "low"]
CONFIDENCE_LEVELS = ("high", "medium", "low")

ANALYZED_QUESTION_IDS: tuple[str, ...] = tuple(LABELING_SECTION.question_ids())

_HINTS = {
    "nutritionFacts": "Is there a Nutrition Facts panel in FDA format? Look for serving size, calories, nutrients.",
    "ingredientList": "Is there an ingredient list? Check if ingredients appear to be in descending order by weight.",
    "allergenDeclaration": (
        'Are allergens declared? Look for a "Contains:" statement or bold allergens '
        "(milk, eggs, fish, shellfish, tree nuts, peanuts, wheat, soybeans, sesame)."
    ),
    "netQuantity": "Is net quantity shown in both metric (g, ml) and US customary (oz) units?",
    "manufacturerInfo": "Is there a manufacturer/distributor name and address?",
    "countryOfOrigin": 'Is country of origin marked (e.g., "Product of...", "Made in...")?',
}


class ImageValidationError(ValueError):
    """Uploaded file is not an acceptable package photo."""


@dataclass
class PackagingAnalysis:
    success: bool
    answers: dict[str, str] = field(default_factory=dict)
    confidence: dict[str, ConfidenceLevel] = field(default_factory=dict)
    observations: dict[str, str] = field(default_factory=dict)
    overall_notes: str = ""
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "analysis": {
                "answers": dict(self.answers),
                "confidence": dict(self.confidence),
                "observations": dict(self.observations),
                "overallNotes": self.overall_notes,
            },
        }


def validate_image(image_bytes: bytes, content_type: Optional[str]) -> None:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ImageValidationError("Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed.")
    if not image_bytes:
        raise ImageValidationError("No image uploaded")
    if len(image_bytes) > MAX_IMAGE_BYTES:
        raise ImageValidationError(f"Image exceeds {MAX_IMAGE_BYTES} bytes")
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError("File is not a readable image") from e


def build_analysis_prompt(language: str) -> str:
    language_note = (
        "Provide observations in Chinese (Simplified)."
        if language == "zh"
        else "Provide observations in English."
    )
    requirements = "\n".join(
        f"{i}. {qid} - {_HINTS[qid]}" for i, qid in enumerate(ANALYZED_QUESTION_IDS, start=1)
    )
    answers_shape = ",\n".join(f'    "{qid}": "yes|no|partial|notVisible"' for qid in ANALYZED_QUESTION_IDS)
    confidence_shape = ",\n".join(f'    "{qid}": "high|medium|low"' for qid in ANALYZED_QUESTION_IDS)
    observation_shape = ",\n".join(f'    "{qid}": "observation text"' for qid in ANALYZED_QUESTION_IDS)
    return f"""You are an FDA compliance expert analyzing food packaging images. Analyze this image for the following {len(ANALYZED_QUESTION_IDS)} FDA labeling requirements and provide your assessment.

For each requirement, respond with:
- answer: "yes" (fully compliant), "no" (not present/non-compliant), "partial" (present but incomplete), or "notVisible" (cannot determine from image)
- confidence: "high", "medium", or "low"
- observation: Brief explanation of what you observed

Requirements to analyze:
{requirements}

{language_note}

Respond ONLY with valid JSON in this exact format:
{{
  "answers": {{
{answers_shape}
  }},
  "confidence": {{
{confidence_shape}
  }},
  "observations": {{
{observation_shape}
  }},
  "overallNotes": "Brief overall assessment of the packaging compliance"
}}"""


def _mapping_field(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise AIServiceError("Failed to parse AI response")
    return value


def parse_analysis(data: dict) -> PackagingAnalysis:
    """
    Normalize a decoded model response. Only labeling questions are kept; anything else the
    model answers is dropped. Raises UnknownAnswerValueError on out-of-vocabulary answers and
    AIServiceError when a field has the wrong shape.
    """
    raw_answers = data.get("answers")
    if not isinstance(raw_answers, dict):
        raise AIServiceError("Failed to parse AI response")
    raw_confidence = _mapping_field(data, "confidence")
    raw_observations = _mapping_field(data, "observations")

    dropped = sorted(str(qid) for qid in raw_answers if qid not in ANALYZED_QUESTION_IDS)
    if dropped:
        logger.info("AI_ANALYSIS dropped non-labeling answers=%s", dropped)
    answers = normalize_answers({qid: v for qid, v in raw_answers.items() if qid in ANALYZED_QUESTION_IDS})

    confidence: dict[str, ConfidenceLevel] = {}
    for qid, level in raw_confidence.items():
        if qid not in ANALYZED_QUESTION_IDS:
            continue
        if level in CONFIDENCE_LEVELS:
            confidence[qid] = level
        else:
            logger.info("AI_ANALYSIS unknown confidence question=%s value=%r -> low", qid, level)
            confidence[qid] = "low"

    observations = {qid: str(text) for qid, text in raw_observations.items() if qid in ANALYZED_QUESTION_IDS}
    return PackagingAnalysis(
        success=True,
        answers=answers,
        confidence=confidence,
        observations=observations,
        overall_notes=str(data.get("overallNotes") or ""),
    )


def analyze_packaging(image_bytes: bytes, content_type: str, language: str = "en") -> PackagingAnalysis:
    """Single analysis request. Failures come back as success=False with an error message."""
    try:
        validate_image(image_bytes, content_type)
        text = call_ollama(
            build_analysis_prompt(language),
            timeout=LLM_ANALYSIS_TIMEOUT,
            model=get_ollama_vision_model(),
            images=[base64.b64encode(image_bytes).decode("ascii")],
        )
        analysis = parse_analysis(extract_json_object(text))
    except (ImageValidationError, AIServiceError, UnknownAnswerValueError) as e:
        logger.warning("AI_ANALYSIS failed content_type=%s language=%s error=%s", content_type, language, e)
        return PackagingAnalysis(success=False, error=str(e))

    logger.info(
        "AI_ANALYSIS ok answers=%s low_confidence=%s",
        analysis.answers, [q for q, c in analysis.confidence.items() if c == "low"],
    )
    return analysis
