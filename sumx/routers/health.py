"""Health check and public configuration endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import Settings, get_settings
from ..services.document_text import format_file_size

router = APIRouter(prefix="/api", tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {
        "success": True,
        "data": {
            "status": "healthy",
            "environment": settings.environment,
            "version": __version__,
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
            "aiConfigured": bool(settings.openrouter_api_key.strip()),
        },
    }


@router.get("/info")
async def info(settings: Settings = Depends(get_settings)):
    """Describe the application and its upload limits."""

    return {
        "success": True,
        "data": {
            "name": "SumX Research Paper Analyzer",
            "version": __version__,
            "description": "AI-powered scientific research paper analysis platform",
            "environment": settings.environment,
            "features": [
                "PDF text extraction",
                "Research paper analysis",
                "Scientific evaluation",
                "Multiple AI model fallback",
            ],
            "limits": {
                "maxFileSize": format_file_size(settings.max_upload_size),
                "allowedTypes": settings.allowed_mime_types,
                "minInputLength": settings.min_input_length,
                "maxInputLength": settings.max_input_length,
            },
        },
    }


@router.get("/config")
async def public_config(settings: Settings = Depends(get_settings)):
    return {
        "success": True,
        "data": {
            "upload": {
                "maxFileSize": settings.max_upload_size,
                "allowedMimeTypes": settings.allowed_mime_types,
                "allowedExtensions": settings.allowed_extensions,
            },
            "features": {
                "pdfExtraction": True,
                "textAnalysis": True,
                "multiModel": len(settings.analysis_models) > 1,
                "fileUpload": True,
            },
        },
    }


__all__ = ["router"]
