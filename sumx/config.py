"""Environment-driven settings for the SumX backend."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .models import ModelDescriptor

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_MODEL_NAMES = (
    "meta-llama/llama-3.2-3b-instruct:free",
    "mistralai/mistral-7b-instruct:free",
    "microsoft/phi-3-mini-128k-instruct:free",
)
_DEFAULT_MODEL_DESCRIPTIONS = {
    "meta-llama/llama-3.2-3b-instruct:free": "Primary model - fast and reliable for research analysis",
    "mistralai/mistral-7b-instruct:free": "Fallback model - strong on scientific content",
    "microsoft/phi-3-mini-128k-instruct:free": "Secondary fallback - good for detailed analysis",
}


class Settings(BaseModel):
    """Runtime configuration resolved from the process environment."""

    environment: str = "development"
    log_level: str = "INFO"

    openrouter_api_key: str = ""
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_http_referer: Optional[str] = "https://github.com/saky-semicolon/SumX"
    openrouter_title: Optional[str] = "SumX Research Paper Analyzer"

    analysis_models: List[ModelDescriptor] = Field(default_factory=list)
    analysis_timeout_s: float = Field(default=60.0, gt=0)
    min_input_length: int = Field(default=100, ge=1)
    max_input_length: int = Field(default=50_000, ge=1)
    min_output_length: int = Field(default=100, ge=1)
    analysis_log_dir: Optional[Path] = None

    max_upload_size: int = Field(default=10 * 1024 * 1024, gt=0)
    allowed_mime_types: List[str] = Field(
        default_factory=lambda: ["application/pdf", "text/plain"]
    )
    allowed_extensions: List[str] = Field(default_factory=lambda: [".pdf", ".txt"])

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def _env_value(name: str) -> Optional[str]:
    """Stripped value of ``name``; blank values count as unset."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_list(name: str) -> Optional[List[str]]:
    raw = os.getenv(name)
    if raw is None:
        return None
    values = [item.strip() for item in raw.split(",")]
    return [item for item in values if item]


def _build_model_chain() -> List[ModelDescriptor]:
    names = _env_list("ANALYSIS_MODELS") or list(DEFAULT_MODEL_NAMES)
    max_tokens = int(_env_value("ANALYSIS_MAX_TOKENS") or "2048")
    temperature = float(_env_value("ANALYSIS_TEMPERATURE") or "0.1")
    chain: List[ModelDescriptor] = []
    for name in dict.fromkeys(names):
        chain.append(
            ModelDescriptor(
                name=name,
                max_output_tokens=max_tokens,
                temperature=temperature,
                description=_DEFAULT_MODEL_DESCRIPTIONS.get(name),
            )
        )
    return chain


def _load_settings() -> Settings:
    values: dict[str, object] = {"analysis_models": _build_model_chain()}
    scalar_env = {
        "environment": "APP_ENV",
        "log_level": "LOG_LEVEL",
        "openrouter_api_key": "OPENROUTER_API_KEY",
        "openrouter_api_url": "OPENROUTER_API_URL",
        "openrouter_http_referer": "OPENROUTER_HTTP_REFERER",
        "openrouter_title": "OPENROUTER_TITLE",
        "analysis_timeout_s": "ANALYSIS_TIMEOUT_S",
        "min_input_length": "MIN_INPUT_LENGTH",
        "max_input_length": "MAX_INPUT_LENGTH",
        "min_output_length": "MIN_OUTPUT_LENGTH",
        "analysis_log_dir": "ANALYSIS_LOG_DIR",
        "max_upload_size": "MAX_UPLOAD_SIZE",
    }
    for field_name, env_name in scalar_env.items():
        raw = _env_value(env_name)
        if raw is not None:
            values[field_name] = raw
    cors_origins = _env_list("CORS_ORIGINS")
    if cors_origins:
        values["cors_origins"] = cors_origins
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings."""

    load_dotenv()
    return _load_settings()


def reset_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""

    get_settings.cache_clear()


__all__ = ["PROJECT_ROOT", "Settings", "get_settings", "reset_settings_cache"]
