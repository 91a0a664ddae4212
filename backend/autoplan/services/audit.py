from __future__ import annotations

import logging
from typing import Protocol

from autoplan.schemas.generator import MessageLevel, RunMessage

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class MessageSink(Protocol):
    def log(self, level: MessageLevel, message: str) -> None: ...


class LoggingMessageSink:
    def __init__(self, target: logging.Logger | None = None):
        self.target = target or logger

    def log(self, level: MessageLevel, message: str) -> None:
        self.target.log(LOG_LEVELS.get(level, logging.INFO), message)


class RunJournal:
    """Collects the messages of one run and forwards them to an optional sink."""

    def __init__(self, sink: MessageSink | None = None):
        self.sink = sink or LoggingMessageSink()
        self.messages: list[RunMessage] = []

    def log(self, level: MessageLevel, message: str) -> None:
        self.messages.append(RunMessage(level=level, message=message))
        self.sink.log(level, message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def success(self, message: str) -> None:
        self.log("success", message)

    def warning(self, message: str) -> None:
        self.log("warning", message)

    def error(self, message: str) -> None:
        self.log("error", message)
