"""Pydantic models describing the model chain and analysis outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelDescriptor(BaseModel):
    """A single entry of the fallback chain."""

    model_config = ConfigDict(frozen=True)

    name: str
    max_output_tokens: int = Field(default=2048, gt=0)
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("model name must not be empty")
        return value


class FailureReason(str, Enum):
    """Machine readable reason attached to each failed attempt."""

    TRANSPORT = "transport"
    REMOTE = "remote"
    MALFORMED = "malformed"
    TOO_SHORT = "too_short"


class AttemptFailure(BaseModel):
    """Diagnostics for one failed model attempt."""

    model_name: str
    error_message: str
    http_status: Optional[int] = None
    reason: FailureReason = FailureReason.TRANSPORT


class AnalysisResult(BaseModel):
    """Successful generation returned by the fallback client."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    model_used: str
    attempt_index: int = Field(ge=1)


__all__ = ["AnalysisResult", "AttemptFailure", "FailureReason", "ModelDescriptor"]
