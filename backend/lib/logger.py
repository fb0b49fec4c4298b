"""
Backend Logging Utility

Console logging for the assistant API. Each line carries a timestamp,
a per-component icon and the level, optionally colored; request and
response logs carry a small key/value payload.
"""

import json
import logging
import sys
from datetime import datetime
from pprint import pformat
from typing import Any, Dict, Optional

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[90m'

# level name -> (ANSI color, fallback icon)
LEVEL_STYLES = {
    'DEBUG': ('\033[36m', '🔍'),
    'INFO': ('\033[32m', 'ℹ️'),
    'WARNING': ('\033[33m', '⚠️'),
    'ERROR': ('\033[31m', '❌'),
    'CRITICAL': ('\033[35m', '🚨'),
}

# Keyed by the last component of the logger name
COMPONENT_ICONS = {
    'main': '🌐',
    'assistant': '🤖',
    'intent_matcher': '🎯',
    'scheduler': '⏳',
    'session_state': '💾',
    'events': '📣',
    'dashboard': '📊',
    'stats_client': '📈',
    'preference_store': '🗄️',
    'supabase_client': '🗄️',
    'knowledge_base': '📚',
}


class ColoredFormatter(logging.Formatter):
    """One line per record: [time] icon LEVEL logger | message."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        color, level_icon = LEVEL_STYLES.get(record.levelname, (RESET, '•'))
        icon = COMPONENT_ICONS.get(record.name.rsplit('.', 1)[-1], level_icon)
        clock = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]

        message = record.getMessage()
        if message.lstrip()[:1] in ('{', '['):
            # Pretty-print messages that are plain JSON documents
            try:
                message = "\n" + pformat(json.loads(message), indent=2, width=100)
            except ValueError:
                pass

        line = (
            f"{self._paint(f'[{clock}]', DIM)} {icon} "
            f"{self._paint(f'{record.levelname:8s}', color)} "
            f"{self._paint(record.name, BOLD)} | {message}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def format_data(data: Dict[str, Any]) -> str:
    """Render a flat payload as indented `key: value` lines."""
    return "\n".join(f"    {key}: {value}" for key, value in data.items() if value is not None)


class StructuredLogger:
    """Wraps a logging.Logger; every call accepts an optional data dict."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(name)

    def _log(self, level: int, message: str, data: Optional[Dict[str, Any]] = None, **kwargs):
        if data:
            message = f"{message}\n{format_data(data)}"
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, data)

    def info(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, data)

    def warning(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, data)

    def error(self, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        if error is not None:
            message = f"{message} ({type(error).__name__}: {error})"
        self._log(logging.ERROR, message, data, exc_info=error)

    def success(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, f"✅ {message}", data)

    def request(self, method: str, path: str, session_id: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, f"📥 {method} {path}", {"session_id": session_id, **(data or {})})

    def response(self, status: int, path: str, duration: Optional[float] = None, data: Optional[Dict[str, Any]] = None):
        payload = {"status": status}
        if duration is not None:
            payload["duration_ms"] = f"{duration * 1000:.2f}"
        payload.update(data or {})
        self._log(logging.INFO, f"📤 {status} {path}", payload)


def setup_logging(level: int = logging.INFO, use_colors: bool = True) -> logging.Logger:
    """Replace root handlers with a single colored stdout handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for noisy in ('asyncio', 'httpx', 'httpcore', 'urllib3', 'hpack'):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return root


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
