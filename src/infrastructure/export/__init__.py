"""Invoice export sinks."""

from src.infrastructure.export.local_sink import LocalExportSink

__all__ = ["LocalExportSink"]
