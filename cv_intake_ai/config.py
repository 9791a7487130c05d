"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# API keys – never hardcode
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# LLM call settings
LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
LLM_MAX_RETRIES: int = int(os.getenv("LLM_MAX_RETRIES", "1"))  # Extra attempts before fallback

# Persistence
DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{(_base.parent / 'cv_intake.db').as_posix()}"
)

# Upload policy (caller side; the pipeline core does not enforce formats by size)
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
SUPPORTED_EXTENSIONS: tuple = ("pdf", "doc", "docx", "txt")

# Text cleanup
MAX_TEXT_CHARS: int = 50000
OCR_CORRECTION_ENABLED: bool = _env_bool("OCR_CORRECTION_ENABLED", True)

# CV layouts offered by the renderer (key -> label)
CV_DESIGNS: dict = {
    "classic": "Classic",
    "modern": "Modern",
    "compact": "Compact",
}
