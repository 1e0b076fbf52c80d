"""
Runtime configuration for SurfSensei.

Settings come from environment variables.  A ``.env`` file at the project
root is read on first use so keys like ``GEMINI_API_KEY`` can live outside
the shell environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_FEEDBACK_PATH = PROJECT_ROOT / ".data" / "feedback.json"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _load_env_from_dotenv(root: Path = PROJECT_ROOT) -> None:
    """Lightweight .env loader.

    Loads KEY=VALUE pairs from a .env file at the project root, only setting
    variables that are not already present in the process environment. Lines
    starting with '#' are ignored. Quotes around values are stripped.
    """
    dotenv_path = root / ".env"
    if not dotenv_path.exists():
        return
    try:
        lines = dotenv_path.read_text().splitlines()
    except OSError as exc:
        logger.warning("Could not read %s: %s", dotenv_path, exc)
        return
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip("\"'")
        if key and key not in os.environ:
            os.environ[key] = val


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if not raw or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric SURFSENSEI_REQUEST_TIMEOUT=%r", raw)
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    # None means requests waits until the service answers or the socket fails
    request_timeout: Optional[float] = None
    feedback_path: Path = DEFAULT_FEEDBACK_PATH
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment (after reading ``.env``)."""
    _load_env_from_dotenv()
    feedback_path = os.getenv("SURFSENSEI_FEEDBACK_PATH")
    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "",
        model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        base_url=os.getenv("GEMINI_BASE_URL") or DEFAULT_BASE_URL,
        request_timeout=_parse_timeout(os.getenv("SURFSENSEI_REQUEST_TIMEOUT")),
        feedback_path=Path(feedback_path) if feedback_path else DEFAULT_FEEDBACK_PATH,
        log_level=(os.getenv("SURFSENSEI_LOG_LEVEL") or "INFO").upper(),
    )
