"""JSONL trail of the events of a single analysis run."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sumx.config import PROJECT_ROOT


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class AnalysisReporter:
    """Collect analysis events and append them to ``<base_dir>/<run>.jsonl``.

    A disabled reporter still accepts every call and records nothing, so the
    fallback client can log unconditionally.
    """

    def __init__(
        self,
        *,
        base_dir: Path | str | None = None,
        run_id: Optional[str] = None,
        enabled: bool = True,
    ) -> None:
        self.enabled = enabled
        self.run_id = run_id or uuid4().hex
        self.events: List[Dict[str, Any]] = []
        self._path: Optional[Path] = None
        if not enabled:
            return

        directory = Path(base_dir) if base_dir is not None else Path("logs/analysis")
        if not directory.is_absolute():
            directory = PROJECT_ROOT / directory
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        self._path = directory / f"{stamp}_{self.run_id}.jsonl"

    @classmethod
    def disabled(cls) -> "AnalysisReporter":
        return cls(enabled=False)

    @classmethod
    def from_settings(cls, settings) -> "AnalysisReporter":
        """Enabled only when ``ANALYSIS_LOG_DIR`` is configured."""

        if settings.analysis_log_dir is None:
            return cls.disabled()
        return cls(base_dir=settings.analysis_log_dir)

    @property
    def log_path(self) -> Optional[str]:
        if self._path is None:
            return None
        try:
            return str(self._path.relative_to(PROJECT_ROOT))
        except ValueError:
            return str(self._path)

    def log(self, event: str, **details: Any) -> None:
        if not self.enabled:
            return
        entry: Dict[str, Any] = {"timestamp": _utcnow(), "run_id": self.run_id, "event": event}
        if details:
            entry["details"] = details
        self.events.append(entry)
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")

    def finalize(self, status: str, **details: Any) -> Optional[str]:
        """Record the terminal state and return the log path."""

        self.log("analysis.complete", status=status, **details)
        return self.log_path


__all__ = ["AnalysisReporter"]
