"""
AI-written improvement plan for a finished assessment.
The narrative is layered on top of the deterministic score and never changes it.
"""
import logging
from dataclasses import dataclass, field
from typing import Literal, Mapping

from core.config import LLM_SUMMARY_TIMEOUT
from .ollama_client import AIServiceError, call_ollama, extract_json_object

logger = logging.getLogger(__name__)

Priority = Literal["high", "medium", "low"]


@dataclass
class PriorityAction:
    item: str
    priority: Priority
    action: str

    def to_dict(self) -> dict:
        return {"item": self.item, "priority": self.priority, "action": self.action}


@dataclass
class ResultsSummary:
    overview: str
    priority_actions: list[PriorityAction] = field(default_factory=list)
    detailed_steps: list[str] = field(default_factory=list)
    estimated_effort: str = ""

    def to_dict(self) -> dict:
        return {
            "overview": self.overview,
            "priorityActions": [a.to_dict() for a in self.priority_actions],
            "detailedSteps": list(self.detailed_steps),
            "estimatedEffort": self.estimated_effort,
        }


def build_summary_prompt(product_category: str, failed_items: list[str], score: int, language: str) -> str:
    language_instruction = "请用中文回复。" if language == "zh" else "Please respond in English."
    failed = "\n".join(f"{i}. {item}" for i, item in enumerate(failed_items, start=1))
    return f"""You are an FDA food compliance expert. Based on the following assessment results, provide personalized compliance improvement suggestions.

Product Category: {product_category}
Assessment Score: {score}%
Failed Compliance Items:
{failed}

Please provide:
1. Overview (2-3 sentences summarizing the compliance status)
2. Priority Actions (sorted by importance, mark priority as high/medium/low)
3. Detailed Improvement Steps
4. Estimated effort to complete these improvements

{language_instruction}

Respond ONLY with valid JSON in this exact format:
{{
  "overview": "Brief overall assessment...",
  "priorityActions": [
    {{
      "item": "Item name",
      "priority": "high|medium|low",
      "action": "Specific action to take"
    }}
  ],
  "detailedSteps": [
    "Step 1...",
    "Step 2..."
  ],
  "estimatedEffort": "Estimated time/effort description"
}}"""


def _list_field(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise AIServiceError("Failed to parse AI response")
    return value


def parse_summary(data: dict) -> ResultsSummary:
    """Raises AIServiceError when priorityActions or detailedSteps is not a list."""
    raw_actions = _list_field(data, "priorityActions")
    raw_steps = _list_field(data, "detailedSteps")
    actions = []
    for raw in raw_actions:
        if not isinstance(raw, dict):
            continue
        priority = raw.get("priority")
        actions.append(PriorityAction(
            item=str(raw.get("item", "")),
            priority=priority if priority in ("high", "medium", "low") else "medium",
            action=str(raw.get("action", "")),
        ))
    return ResultsSummary(
        overview=str(data.get("overview") or ""),
        priority_actions=actions,
        detailed_steps=[str(s) for s in raw_steps],
        estimated_effort=str(data.get("estimatedEffort") or ""),
    )


def summarize_results(
    product_category: str,
    failed_items: list[str],
    answers: Mapping[str, str],
    score: int,
    language: str = "en",
) -> ResultsSummary:
    """
    Raises ValueError when there is nothing to summarize, AIServiceError when the model
    call or its JSON fails. answers are accepted for the request contract; the prompt only needs failed items.
    """
    if not failed_items:
        raise ValueError("No failed items to summarize")
    logger.info(
        "AI_SUMMARY request category=%s score=%s failed=%d answered=%d language=%s",
        product_category, score, len(failed_items), len(answers), language,
    )
    text = call_ollama(
        build_summary_prompt(product_category, failed_items, score, language or "en"),
        timeout=LLM_SUMMARY_TIMEOUT,
    )
    return parse_summary(extract_json_object(text))

