from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any


class MetricsClient:
    """Writes one JSON line per timed action to the ``metrics.actions`` logger."""

    def __init__(self):
        self._logger = logging.getLogger("metrics.actions")

    def configure(self, logger: logging.Logger | None = None) -> None:
        if logger:
            self._logger = logger

    def _emit(self, action: str, duration_ms: float, success: bool, *, source: str | None, extra: dict | None) -> None:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "duration_ms": round(duration_ms, 3),
            "success": success,
        }
        if source:
            payload["source"] = source
        if extra:
            payload.update(extra)
        self._logger.info(json.dumps(payload, ensure_ascii=False))

    @asynccontextmanager
    async def span_async(self, action: str, *, source: str | None = None, extra: dict | None = None):
        start = time.perf_counter()
        success = True
        try:
            yield
        except Exception:
            success = False
            raise
        finally:
            duration = (time.perf_counter() - start) * 1000
            self._emit(action, duration, success, source=source, extra=extra)


metrics = MetricsClient()
