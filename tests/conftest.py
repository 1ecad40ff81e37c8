"""Test configuration for SumX."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sumx.analysis import ModelFallbackClient  # noqa: E402
from sumx.config import reset_settings_cache  # noqa: E402
from sumx.llm_client import LLMClient, LLMRequest  # noqa: E402
from sumx.models import ModelDescriptor  # noqa: E402

LONG_ANALYSIS = "# RESEARCH SYNTHESIS ANALYSIS\n" + (
    "The study design is sound and the statistical methods are appropriate. " * 4
)

PAPER_TEXT = (
    "Abstract. We study the effect of sleep duration on memory consolidation in "
    "adults. Methods: a randomized trial of 120 participants (2019) compared "
    "short and long sleep groups [ 12 ]. Results showed improved recall in the "
    "long sleep group. Conclusion: sleep supports memory."
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    for name in (
        "OPENROUTER_API_KEY",
        "ANALYSIS_MODELS",
        "ANALYSIS_MAX_TOKENS",
        "ANALYSIS_TEMPERATURE",
        "ANALYSIS_LOG_DIR",
        "MIN_INPUT_LENGTH",
        "MAX_INPUT_LENGTH",
        "MIN_OUTPUT_LENGTH",
        "APP_ENV",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ANALYSIS_TIMEOUT_S", "5")
    monkeypatch.setenv("MAX_UPLOAD_SIZE", str(1024 * 1024))
    reset_settings_cache()
    yield
    reset_settings_cache()


class MockLLM(LLMClient):
    """Mock LLM client with a simple FIFO response queue."""

    def __init__(self) -> None:
        super().__init__(transport=self._dispatch)
        self._queue: list[str | Exception] = []
        self.requests: list[LLMRequest] = []

    def enqueue(self, response: str | Exception) -> None:
        self._queue.append(response)

    @property
    def models_called(self) -> list[str]:
        return [request.model for request in self.requests]

    async def _dispatch(self, request: LLMRequest) -> str:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError("MockLLM was called without a queued response")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def mock_llm() -> MockLLM:
    return MockLLM()


@pytest.fixture
def chain() -> list[ModelDescriptor]:
    return [
        ModelDescriptor(name="model-a", max_output_tokens=1024, temperature=0.1),
        ModelDescriptor(name="model-b", max_output_tokens=2048, temperature=0.2),
        ModelDescriptor(name="model-c", max_output_tokens=4000, temperature=0.0),
    ]


@pytest.fixture
def analyzer(chain, mock_llm) -> ModelFallbackClient:
    return ModelFallbackClient(chain, llm_client=mock_llm, timeout_s=1)


@pytest.fixture
def paper_text() -> str:
    return PAPER_TEXT


@pytest.fixture
def long_analysis() -> str:
    return LONG_ANALYSIS


@pytest.fixture()
def client(analyzer) -> Generator[TestClient, None, None]:
    """Return a test client whose analyzer is backed by ``MockLLM``."""

    from sumx.app import create_app
    from sumx.routers.analysis import get_analyzer

    app = create_app()
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    with TestClient(app) as test_client:
        yield test_client
