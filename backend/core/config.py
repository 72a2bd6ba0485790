"""
Paths, AI service settings, and centralized configuration.
All resolution relative to the backend directory.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Repo root: backend/core/config.py -> parent=core, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

# --- Persistence ---
def get_assessments_path() -> Path:
    override = os.environ.get("ASSESSMENTS_PATH", "").strip()
    if override:
        return Path(override)
    return _REPO_ROOT / "data" / "assessments.json"

def get_assessment_store_backend() -> str:
    """json (default) or supabase."""
    return os.environ.get("ASSESSMENT_STORE", "json").strip().lower() or "json"

def get_supabase_url() -> str:
    return (os.environ.get("SUPABASE_URL") or os.environ.get("NEXT_PUBLIC_SUPABASE_URL") or "").strip()

def get_supabase_key() -> str:
    return (os.environ.get("SUPABASE_SERVICE_ROLE_KEY") or os.environ.get("NEXT_PUBLIC_SUPABASE_ANON_KEY") or "").strip()

SUPABASE_ASSESSMENTS_TABLE = "assessments"

# --- LLM / Ollama ---
def get_ollama_url() -> str:
    return os.environ.get("OLLAMA_API_URL", "http://localhost:11434/api/generate")

def get_ollama_model() -> str:
    return os.environ.get("OLLAMA_MODEL", "llama3.2:3b")

def get_ollama_vision_model() -> str:
    return os.environ.get("OLLAMA_VISION_MODEL", "llama3.2-vision:11b")

# LLM timeout defaults (seconds)
LLM_ANALYSIS_TIMEOUT = int(os.environ.get("LLM_ANALYSIS_TIMEOUT", "120"))
LLM_SUMMARY_TIMEOUT = int(os.environ.get("LLM_SUMMARY_TIMEOUT", "60"))

# --- Image uploads ---
MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")

# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: store=%s assessments=%s supabase_url=%s ollama_model=%s vision_model=%s "
        "analysis_timeout=%ds summary_timeout=%ds max_image_bytes=%d",
        get_assessment_store_backend(), get_assessments_path(),
        bool(get_supabase_url()), get_ollama_model(), get_ollama_vision_model(),
        LLM_ANALYSIS_TIMEOUT, LLM_SUMMARY_TIMEOUT, MAX_IMAGE_BYTES,
    )
