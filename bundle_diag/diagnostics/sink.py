"""Destinations for human-readable diagnostic lines."""
import logging
from typing import Iterable, Protocol

logger = logging.getLogger("bundle_diag.diagnostics")


class DiagnosticSink(Protocol):
    """Anything that accepts one diagnostic line at a time."""

    def emit(self, line: str) -> None: ...


class LoggingSink:
    """Writes diagnostic lines to a logger."""

    def __init__(self, level: int = logging.INFO, log: logging.Logger = logger) -> None:
        self.level = level
        self.log = log

    def emit(self, line: str) -> None:
        self.log.log(self.level, line)


class CollectingSink:
    """Keeps diagnostic lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)


class TeeSink:
    """Forwards each line to several sinks."""

    def __init__(self, sinks: Iterable[DiagnosticSink]) -> None:
        self.sinks = list(sinks)

    def emit(self, line: str) -> None:
        for sink in self.sinks:
            sink.emit(line)


class NullSink:
    def emit(self, line: str) -> None:
        pass
