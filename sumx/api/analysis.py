"""Pydantic schemas for the analysis HTTP API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models import ModelDescriptor


class AnalyzeTextRequest(BaseModel):
    """Pasted paper text submitted for analysis."""

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("content", "paperContent"),
        description="Raw research paper text; ``paperContent`` is accepted as an alias.",
    )


class FileInfo(BaseModel):
    filename: str
    size: int
    type: str
    pages: int
    wordCount: int
    characterCount: int
    info: Dict[str, Any] = Field(default_factory=dict)


class AnalysisData(BaseModel):
    """Successful analysis payload."""

    analysis: str
    model: str
    attempt: int = Field(ge=1)
    wordCount: Optional[int] = None
    characterCount: Optional[int] = None
    fileInfo: Optional[FileInfo] = None
    extractedText: Optional[str] = Field(
        default=None, description="Preview of the cleaned text sent to the model."
    )


class AnalysisResponse(BaseModel):
    success: bool = True
    data: AnalysisData


class ExtractData(BaseModel):
    filename: str
    text: str
    fileInfo: FileInfo


class ExtractResponse(BaseModel):
    success: bool = True
    data: ExtractData


class ModelsData(BaseModel):
    models: List[ModelDescriptor]
    currentModel: ModelDescriptor


class ModelsResponse(BaseModel):
    success: bool = True
    data: ModelsData


class ErrorResponse(BaseModel):
    """Failure envelope shared by every endpoint."""

    success: bool = False
    error: str
    details: Optional[Any] = None


__all__ = [
    "AnalysisData",
    "AnalysisResponse",
    "AnalyzeTextRequest",
    "ErrorResponse",
    "ExtractData",
    "ExtractResponse",
    "FileInfo",
    "ModelsData",
    "ModelsResponse",
]
