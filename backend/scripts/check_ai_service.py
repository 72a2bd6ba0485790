#!/usr/bin/env python3
"""
Check that the Ollama server is reachable and has the summary and vision models pulled.
Run from backend: python scripts/check_ai_service.py
Exit 0 if both models are available; 1 otherwise.
"""
import sys
from pathlib import Path
from typing import Tuple

import requests

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8


def list_models(generate_url: str) -> Tuple[bool, list, str]:
    """Return (reachable, model names, message)."""
    base = generate_url.split("/api/", 1)[0]
    try:
        resp = requests.get(f"{base}/api/tags", timeout=HEALTH_TIMEOUT)
        resp.raise_for_status()
        names = [m.get("name", "") for m in resp.json().get("models", [])]
    except requests.RequestException as e:
        return False, [], f"{type(e).__name__}: {e}"
    except ValueError:
        return False, [], "non-JSON response from /api/tags"
    return True, names, f"ok ({len(names)} models)"


def has_model(names: list, wanted: str) -> bool:
    """Ollama reports "llama3.2:3b"; an untagged name means ":latest"."""
    if ":" not in wanted:
        wanted = f"{wanted}:latest"
    return wanted in names


def main() -> int:
    from core.config import get_ollama_url, get_ollama_model, get_ollama_vision_model
    print("Checking AI service...")
    ok, names, msg = list_models(get_ollama_url())
    print(f"  Ollama:        {'OK' if ok else 'FAIL'} - {msg}")
    if not ok:
        return 1
    all_ok = True
    for label, model in (("summary model", get_ollama_model()), ("vision model", get_ollama_vision_model())):
        present = has_model(names, model)
        all_ok = all_ok and present
        print(f"  {label}: {'OK' if present else 'MISSING'} - {model}")
    if all_ok:
        print("AI service ready.")
        return 0
    print("Pull the missing models with: ollama pull <model>")
    return 1


if __name__ == "__main__":
    sys.exit(main())
