"""Research paper analysis endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ..analysis import AnalysisReporter, ModelFallbackClient, normalize_paper_text
from ..api.analysis import (
    AnalysisData,
    AnalysisResponse,
    AnalyzeTextRequest,
    ExtractData,
    ExtractResponse,
    FileInfo,
    ModelsData,
    ModelsResponse,
)
from ..config import Settings, get_settings
from ..errors import InputValidationError
from ..services.document_text import ExtractedDocument, count_words, extract_document

LOGGER = logging.getLogger(__name__)

PREVIEW_LENGTH = 500
# Raw text above this multiple of the input maximum is rejected before cleanup.
RAW_INPUT_FACTOR = 2

router = APIRouter(prefix="/api", tags=["analysis"])


def get_analyzer(settings: Settings = Depends(get_settings)) -> ModelFallbackClient:
    """Build a request-scoped fallback client from the current settings."""

    return ModelFallbackClient.from_settings(settings)


async def _read_upload(file: UploadFile, settings: Settings) -> ExtractedDocument:
    data = await file.read()
    filename = file.filename or "upload"
    return await asyncio.to_thread(
        extract_document,
        data,
        filename,
        file.content_type,
        max_size=settings.max_upload_size,
        allowed_mime_types=settings.allowed_mime_types,
        allowed_extensions=settings.allowed_extensions,
    )


async def _clean_text(text: str, settings: Settings) -> str:
    limit = settings.max_input_length * RAW_INPUT_FACTOR
    if len(text) > limit:
        LOGGER.warning("Rejected %d characters of raw text (limit %d)", len(text), limit)
        raise InputValidationError(
            f"Content too long. Maximum {settings.max_input_length} characters allowed."
        )
    return await asyncio.to_thread(normalize_paper_text, text)


def _file_info(document: ExtractedDocument, cleaned: str) -> FileInfo:
    return FileInfo(
        filename=document.filename,
        size=document.size,
        type=document.media_type,
        pages=document.pages,
        wordCount=count_words(cleaned),
        characterCount=len(cleaned),
        info=document.info,
    )


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[:PREVIEW_LENGTH] + "..."


@router.post("/analyze/text", response_model=AnalysisResponse, response_model_exclude_none=True)
async def analyze_text(
    payload: AnalyzeTextRequest,
    *,
    analyzer: ModelFallbackClient = Depends(get_analyzer),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    """Normalize pasted paper text and run it through the model chain."""

    if payload.content is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="content is required"
        )
    cleaned = await _clean_text(payload.content, settings)
    reporter = AnalysisReporter.from_settings(settings)
    result = await analyzer.analyze(cleaned, reporter=reporter)
    return AnalysisResponse(
        data=AnalysisData(
            analysis=result.text,
            model=result.model_used,
            attempt=result.attempt_index,
            wordCount=count_words(cleaned),
            characterCount=len(cleaned),
        )
    )


@router.post("/analyze/file", response_model=AnalysisResponse, response_model_exclude_none=True)
async def analyze_file(
    file: UploadFile = File(...),
    *,
    analyzer: ModelFallbackClient = Depends(get_analyzer),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    """Extract an uploaded PDF or text file and analyze its cleaned text."""

    document = await _read_upload(file, settings)
    cleaned = await _clean_text(document.text, settings)
    reporter = AnalysisReporter.from_settings(settings)
    reporter.log("document.extracted", filename=document.filename, source=document.source)
    result = await analyzer.analyze(cleaned, reporter=reporter)
    return AnalysisResponse(
        data=AnalysisData(
            analysis=result.text,
            model=result.model_used,
            attempt=result.attempt_index,
            fileInfo=_file_info(document, cleaned),
            extractedText=_preview(cleaned),
        )
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract_text(
    file: UploadFile = File(...),
    *,
    settings: Settings = Depends(get_settings),
) -> ExtractResponse:
    """Return the cleaned text of an upload without calling a model."""

    document = await _read_upload(file, settings)
    cleaned = await _clean_text(document.text, settings)
    return ExtractResponse(
        data=ExtractData(
            filename=document.filename,
            text=cleaned,
            fileInfo=_file_info(document, cleaned),
        )
    )


@router.get("/models", response_model=ModelsResponse)
async def list_models(
    analyzer: ModelFallbackClient = Depends(get_analyzer),
) -> ModelsResponse:
    """Describe the configured fallback chain."""

    return ModelsResponse(
        data=ModelsData(models=list(analyzer.chain), currentModel=analyzer.current_model)
    )


__all__ = ["get_analyzer", "router"]
