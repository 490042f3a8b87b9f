from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

from ...infrastructure.metrics import MetricsClient

METRICS_LOGGER_NAME = "metrics.actions"


class MetricsFileHandler(TimedRotatingFileHandler):
    """Daily JSON-lines file, recreated when it is removed while the bot runs."""

    def __init__(self, path: str, *, when: str = "midnight", backups: int = 14):
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        super().__init__(path, when=when, backupCount=backups, encoding="utf-8", delay=True)
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record):
        if self.stream is not None and not os.path.exists(self.baseFilename):
            self.stream.close()
            # FileHandler opens a fresh stream on the next emit.
            self.stream = None
        super().emit(record)


def attach_metrics_file(
    client: MetricsClient,
    path: str,
    *,
    when: str = "midnight",
    backups: int = 14,
    logger_name: str = METRICS_LOGGER_NAME,
) -> logging.Logger:
    """
    Point ``client`` at a logger that writes only to ``path``.

    Attaching the same path twice keeps the open handler.
    """
    target = os.path.abspath(path)
    metrics_logger = logging.getLogger(logger_name)
    metrics_logger.setLevel(logging.INFO)
    metrics_logger.propagate = False

    kept = False
    for handler in metrics_logger.handlers[:]:
        if not kept and isinstance(handler, MetricsFileHandler) and handler.baseFilename == target:
            kept = True
            continue
        metrics_logger.removeHandler(handler)
        handler.close()
    if not kept:
        metrics_logger.addHandler(MetricsFileHandler(target, when=when, backups=backups))

    client.configure(metrics_logger)
    return metrics_logger
