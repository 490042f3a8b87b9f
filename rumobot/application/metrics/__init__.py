from .logger import MetricsFileHandler, attach_metrics_file

__all__ = ["MetricsFileHandler", "attach_metrics_file"]
