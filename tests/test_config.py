from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sumx.config import DEFAULT_MODEL_NAMES, get_settings, reset_settings_cache


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("ANALYSIS_TIMEOUT_S", raising=False)
    monkeypatch.delenv("MAX_UPLOAD_SIZE", raising=False)
    reset_settings_cache()

    settings = get_settings()

    assert [model.name for model in settings.analysis_models] == list(DEFAULT_MODEL_NAMES)
    assert settings.analysis_models[0].description
    assert settings.analysis_timeout_s == 60.0
    assert settings.min_input_length == 100
    assert settings.max_input_length == 50_000
    assert settings.min_output_length == 100
    assert settings.max_upload_size == 10 * 1024 * 1024
    assert settings.analysis_log_dir is None
    assert settings.is_production is False


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("ANALYSIS_MODELS", "a/one, b/two,,a/one")
    monkeypatch.setenv("ANALYSIS_MAX_TOKENS", "4000")
    monkeypatch.setenv("ANALYSIS_TEMPERATURE", "0.3")
    monkeypatch.setenv("MIN_INPUT_LENGTH", "20")
    monkeypatch.setenv("ANALYSIS_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://sumx.example")
    monkeypatch.setenv("APP_ENV", "production")
    reset_settings_cache()

    settings = get_settings()

    assert [model.name for model in settings.analysis_models] == ["a/one", "b/two"]
    assert {model.max_output_tokens for model in settings.analysis_models} == {4000}
    assert settings.analysis_models[0].temperature == pytest.approx(0.3)
    assert settings.min_input_length == 20
    assert settings.analysis_log_dir == Path(tmp_path)
    assert settings.cors_origins == ["http://localhost:3000", "https://sumx.example"]
    assert settings.is_production is True


def test_settings_are_cached_until_reset(monkeypatch) -> None:
    first = get_settings()
    monkeypatch.setenv("MIN_OUTPUT_LENGTH", "250")
    assert get_settings() is first

    reset_settings_cache()
    assert get_settings().min_output_length == 250


def test_invalid_values_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("ANALYSIS_TIMEOUT_S", "0")
    reset_settings_cache()

    with pytest.raises(ValidationError):
        get_settings()


def test_blank_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("ANALYSIS_MAX_TOKENS", "")
    monkeypatch.setenv("ANALYSIS_TEMPERATURE", "   ")
    monkeypatch.setenv("MIN_INPUT_LENGTH", "")
    reset_settings_cache()

    settings = get_settings()

    assert {model.max_output_tokens for model in settings.analysis_models} == {2048}
    assert all(model.temperature == pytest.approx(0.1) for model in settings.analysis_models)
    assert settings.min_input_length == 100
