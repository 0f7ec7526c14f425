"""Logger setup and forwarding of log records to the client."""

from __future__ import annotations

import logging
import sys
from typing import IO, Protocol

from lsprotocol.types import LogMessageParams, MessageType

LOGGER_NAME = "emmet_ls"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_MESSAGE_TYPES = {
    logging.DEBUG: MessageType.Log,
    logging.INFO: MessageType.Info,
    logging.WARNING: MessageType.Warning,
    logging.ERROR: MessageType.Error,
    logging.CRITICAL: MessageType.Error,
}


class _LogSink(Protocol):
    def window_log_message(self, params: LogMessageParams) -> None: ...


def parse_level(raw: object) -> int | None:
    if not isinstance(raw, str):
        return None
    return _LEVELS.get(raw.strip().lower())


def setup_logger(level: int = logging.WARNING, stream: IO[str] | None = None) -> logging.Logger:
    """Send package logs to stderr; stdout carries the protocol in stdio mode."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if not isinstance(handler, ClientLogHandler):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def apply_log_level(raw: object) -> None:
    level = parse_level(raw)
    if level is not None:
        logging.getLogger(LOGGER_NAME).setLevel(level)


class ClientLogHandler(logging.Handler):
    """Mirror records to the client's ``window/logMessage`` channel."""

    def __init__(self, sink: _LogSink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            message_type = _MESSAGE_TYPES.get(record.levelno, MessageType.Log)
            self.sink.window_log_message(LogMessageParams(type=message_type, message=message))
        except Exception:
            self.handleError(record)


def attach_client_logging(sink: _LogSink) -> ClientLogHandler:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        if isinstance(handler, ClientLogHandler) and handler.sink is sink:
            return handler
    handler = ClientLogHandler(sink)
    logger.addHandler(handler)
    return handler
