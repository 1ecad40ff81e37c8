"""Text normalization and model fallback orchestration for paper analysis."""

from .fallback import ModelFallbackClient
from .normalize import normalize_paper_text, strip_layout_noise
from .reporting import AnalysisReporter

__all__ = [
    "AnalysisReporter",
    "ModelFallbackClient",
    "normalize_paper_text",
    "strip_layout_noise",
]
