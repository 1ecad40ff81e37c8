"""Sequential model fallback for research paper analysis."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from sumx.errors import (
    AggregateFailure,
    AttemptError,
    InputValidationError,
    MalformedResponseError,
    OutputTooShortError,
    TransportError,
)
from sumx.llm_client import LLMClient, LLMRequest, create_default_client
from sumx.models import AnalysisResult, AttemptFailure, FailureReason, ModelDescriptor

from .prompt import SYSTEM_PROMPT, build_user_prompt
from .reporting import AnalysisReporter

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 60.0
DEFAULT_MIN_INPUT_LENGTH = 100
DEFAULT_MAX_INPUT_LENGTH = 50_000
DEFAULT_MIN_OUTPUT_LENGTH = 100


class ModelFallbackClient:
    """Try each model of an ordered chain until one yields a usable analysis.

    The chain is immutable after construction and no cursor survives a call:
    every ``analyze`` starts at the front of the chain unless the caller
    passes an explicit ``start_index``. Attempts are strictly sequential.
    """

    def __init__(
        self,
        chain: Sequence[ModelDescriptor],
        *,
        llm_client: Optional[LLMClient] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        min_input_length: int = DEFAULT_MIN_INPUT_LENGTH,
        max_input_length: int = DEFAULT_MAX_INPUT_LENGTH,
        min_output_length: int = DEFAULT_MIN_OUTPUT_LENGTH,
    ) -> None:
        if not chain:
            raise ValueError("fallback chain must contain at least one model")
        names = [descriptor.name for descriptor in chain]
        if len(set(names)) != len(names):
            raise ValueError("model names in the fallback chain must be unique")
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        if min_input_length > max_input_length:
            raise ValueError("min_input_length cannot exceed max_input_length")
        self._chain = tuple(chain)
        self._client = llm_client or create_default_client()
        self._timeout_s = timeout_s
        self._min_input_length = min_input_length
        self._max_input_length = max_input_length
        self._min_output_length = min_output_length

    @classmethod
    def from_settings(
        cls, settings, *, llm_client: Optional[LLMClient] = None
    ) -> "ModelFallbackClient":
        return cls(
            settings.analysis_models,
            llm_client=llm_client or create_default_client(settings),
            timeout_s=settings.analysis_timeout_s,
            min_input_length=settings.min_input_length,
            max_input_length=settings.max_input_length,
            min_output_length=settings.min_output_length,
        )

    @property
    def chain(self) -> tuple[ModelDescriptor, ...]:
        return self._chain

    @property
    def current_model(self) -> ModelDescriptor:
        """Preferred model for the next call (always the head of the chain)."""

        return self._chain[0]

    def validate_input(self, content: object) -> str:
        """Return the stripped content or raise :class:`InputValidationError`."""

        if not content or not isinstance(content, str):
            raise InputValidationError("Invalid content provided")
        trimmed = content.strip()
        if not trimmed:
            raise InputValidationError("Invalid content provided")
        if len(trimmed) < self._min_input_length:
            raise InputValidationError(
                f"Content too short. Minimum {self._min_input_length} characters required."
            )
        if len(trimmed) > self._max_input_length:
            raise InputValidationError(
                f"Content too long. Maximum {self._max_input_length} characters allowed."
            )
        return trimmed

    def ordered_chain(self, start_index: int = 0) -> List[ModelDescriptor]:
        """Return the chain rotated to begin at ``start_index`` (wrapping)."""

        start = start_index % len(self._chain)
        return list(self._chain[start:] + self._chain[:start])

    async def analyze(
        self,
        content: object,
        *,
        start_index: int = 0,
        reporter: Optional[AnalysisReporter] = None,
    ) -> AnalysisResult:
        """Run the fallback loop and return the first valid analysis."""

        validated = self.validate_input(content)
        reporter = reporter or AnalysisReporter.disabled()
        prompt = build_user_prompt(validated)
        chain = self.ordered_chain(start_index)
        reporter.log(
            "analysis.start",
            content_length=len(validated),
            chain=[descriptor.name for descriptor in chain],
        )

        failures: List[AttemptFailure] = []
        for attempt_index, descriptor in enumerate(chain, start=1):
            LOGGER.info(
                "Attempting analysis with model %s (%d/%d)",
                descriptor.name,
                attempt_index,
                len(chain),
            )
            reporter.log("attempt.start", model=descriptor.name, attempt_index=attempt_index)
            start = time.perf_counter()
            try:
                text = await self._attempt(descriptor, prompt)
            except AttemptError as exc:
                failure = AttemptFailure(
                    model_name=descriptor.name,
                    error_message=str(exc),
                    http_status=exc.status_code,
                    reason=FailureReason(exc.reason),
                )
                failures.append(failure)
                LOGGER.warning("Model %s failed: %s", descriptor.name, exc)
                reporter.log(
                    "attempt.failed",
                    attempt_index=attempt_index,
                    duration_s=round(time.perf_counter() - start, 3),
                    **failure.model_dump(mode="json"),
                )
                continue

            reporter.log(
                "attempt.succeeded",
                model=descriptor.name,
                attempt_index=attempt_index,
                duration_s=round(time.perf_counter() - start, 3),
                output_length=len(text),
            )
            reporter.finalize("success", model=descriptor.name, attempts=attempt_index)
            return AnalysisResult(
                text=text, model_used=descriptor.name, attempt_index=attempt_index
            )

        LOGGER.error(
            "Analysis failed with all %d models: %s",
            len(failures),
            "; ".join(
                f"{failure.model_name} [{failure.reason.value}"
                f"{'/' + str(failure.http_status) if failure.http_status else ''}]: "
                f"{failure.error_message}"
                for failure in failures
            ),
        )
        reporter.finalize(
            "failure",
            attempts=len(failures),
            failures=[failure.model_dump(mode="json") for failure in failures],
        )
        raise AggregateFailure(failures)

    async def _attempt(self, descriptor: ModelDescriptor, prompt: str) -> str:
        request = LLMRequest(
            model=descriptor.name,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=prompt,
            timeout=self._timeout_s,
            max_tokens=descriptor.max_output_tokens,
            temperature=descriptor.temperature,
        )
        try:
            raw = await asyncio.wait_for(self._client.complete(request), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"Request to {descriptor.name} timed out after {self._timeout_s:g}s"
            ) from exc
        except AttemptError:
            raise
        except Exception as exc:
            raise TransportError(f"Request setup error: {exc}") from exc

        if not isinstance(raw, str) or not raw.strip():
            raise MalformedResponseError("Invalid response format from AI service")
        text = raw.strip()
        if len(text) < self._min_output_length:
            raise OutputTooShortError(
                f"Generated analysis is too short ({len(text)} < {self._min_output_length} characters)"
            )
        return text


__all__ = ["ModelFallbackClient"]
