import os
import logging
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

IS_HF = os.environ.get("SPACE_ID") is not None

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None):
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
    )


@dataclass(frozen=True)
class Settings:
    llm_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3.1-pro-preview"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"
    groq_url: str = "https://api.groq.com/openai/v1/chat/completions"
    temperature: float = 0.2
    timeout: float = 120.0
    base_dir: str = "data"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def model_name(self) -> str:
        return self.groq_model if self.llm_provider == "groq" else self.gemini_model

    @property
    def db_path(self) -> str:
        return os.path.join(self.base_dir, "app.db")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"Ignoring non-numeric {name}={raw!r}")
        return default


def get_settings() -> Settings:
    """Read settings from the environment (values from .env included)."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        llm_provider=os.getenv("LLM_PROVIDER", "gemini").strip().lower(),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", Settings.gemini_model),
        gemini_api_base=os.getenv("GEMINI_API_BASE", Settings.gemini_api_base).rstrip("/"),
        groq_api_key=os.getenv("GROQ_API_KEY", ""),
        groq_model=os.getenv("MODEL_NAME", Settings.groq_model),
        temperature=_float_env("LLM_TEMPERATURE", Settings.temperature),
        timeout=_float_env("LLM_TIMEOUT", Settings.timeout),
        base_dir=os.getenv("BASE_DIR", "/tmp/data" if IS_HF else "data"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
    )
