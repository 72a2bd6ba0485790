"""
AI collaborators: packaging photo analysis and results summary (Ollama), plus answer normalization.
"""
from .answer_normalizer import UnknownAnswerValueError, normalize_answer, normalize_answers
from .ollama_client import AIServiceError
from .packaging_analysis import PackagingAnalysis, ImageValidationError, analyze_packaging, validate_image
from .results_summary import ResultsSummary, PriorityAction, summarize_results

__all__ = [
    "UnknownAnswerValueError",
    "normalize_answer",
    "normalize_answers",
    "AIServiceError",
    "PackagingAnalysis",
    "ImageValidationError",
    "analyze_packaging",
    "validate_image",
    "ResultsSummary",
    "PriorityAction",
    "summarize_results",
]
