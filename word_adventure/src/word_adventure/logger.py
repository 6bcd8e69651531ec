"""
Console Logging Utility

Provides readable, structured logging for the session engine with:
- Color-coded log levels
- Per-component icons (store, storage, channel, generator)
- Pretty printing for snapshot dictionaries
"""

import logging
import sys
import json
from datetime import datetime
from typing import Any, Dict, Optional
from pprint import pformat


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    DEBUG = '\033[36m'      # Cyan
    INFO = '\033[32m'       # Green
    WARNING = '\033[33m'    # Yellow
    ERROR = '\033[31m'      # Red
    CRITICAL = '\033[35m'   # Magenta

    SECTION = '\033[94m'    # Bright Blue
    KEY = '\033[93m'        # Bright Yellow
    VALUE = '\033[92m'      # Bright Green
    TIMESTAMP = '\033[90m'  # Dark Gray


class ColoredFormatter(logging.Formatter):
    """Formatter with level colors and component icons."""

    ICONS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️',
        'WARNING': '⚠️',
        'ERROR': '❌',
        'CRITICAL': '🚨',
    }

    # Keyed by the last dotted part of the logger name
    COMPONENT_ICONS = {
        'session_store': '💾',
        'storage': '🗄️',
        'channel': '📡',
        'word_session_generator': '🎲',
        'progression': '📈',
        'session_tool': '🧰',
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        icon = self.COMPONENT_ICONS.get(
            record.name.split('.')[-1],
            self.ICONS.get(record.levelname, '•')
        )
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]

        if self.use_colors:
            level_color = getattr(Colors, record.levelname, Colors.RESET)
            reset = Colors.RESET
            timestamp_color = Colors.TIMESTAMP
            bold = Colors.BOLD
        else:
            level_color = reset = timestamp_color = bold = ''

        message = record.getMessage()

        # Snapshots are often logged as raw JSON
        stripped = message.strip()
        if stripped.startswith('{') or stripped.startswith('['):
            try:
                message = f"\n{pformat(json.loads(stripped), indent=2, width=100)}"
            except (json.JSONDecodeError, ValueError):
                pass

        formatted = (
            f"{timestamp_color}[{timestamp}]{reset} "
            f"{icon} {level_color}{record.levelname:8s}{reset} "
            f"{bold}{record.name}{reset} "
            f"| {message}"
        )

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


class StructuredLogger:
    """Logger wrapper that accepts an optional data dict per message."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(name)

    def _format_data(self, data: Any, indent: int = 2) -> str:
        """Format data structure for pretty printing."""
        if isinstance(data, dict):
            items = []
            for key, value in data.items():
                if isinstance(value, (dict, list)):
                    items.append(f"{' ' * indent}{key}: {self._format_data(value, indent + 2)}")
                else:
                    items.append(f"{' ' * indent}{key}: {value}")
            return "{\n" + "\n".join(items) + f"\n{' ' * (indent - 2)}}}"
        elif isinstance(data, list):
            # Word id lists get long, keep the head only
            if len(data) > 5:
                head = ", ".join(str(item) for item in data[:3])
                return f"[{head}, ... ({len(data)} items total)]"
            return "[" + ", ".join(str(item) for item in data) + "]"
        return str(data)

    def _with_data(self, message: str, data: Optional[Dict[str, Any]]) -> str:
        if data:
            return f"{message}\n{self._format_data(data)}"
        return message

    def debug(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.debug(self._with_data(message, data))

    def info(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.info(self._with_data(message, data))

    def warning(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.warning(self._with_data(message, data))

    def error(self, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        """Log error message with exception and optional data."""
        error_info = f" Error: {type(error).__name__}: {error}" if error else ""
        self.logger.error(self._with_data(f"{message}{error_info}", data), exc_info=error)

    def success(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.info(self._with_data(f"✅ {message}", data))

    def section(self, title: str, data: Optional[Dict[str, Any]] = None):
        """Print a section banner (used by command-line tools)."""
        separator = "=" * 80
        color = Colors.SECTION if sys.stdout.isatty() else ''
        reset = Colors.RESET if sys.stdout.isatty() else ''
        print(f"\n{color}{separator}{reset}")
        print(f"{color}📋 {title.upper()}{reset}")
        if data:
            print(self._format_data(data))
        print(f"{color}{separator}{reset}\n")


def setup_logging(level: int = logging.INFO, use_colors: bool = True):
    """Install the colored console handler on the root logger."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    logging.getLogger('asyncio').setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, logging.getLogger(name))
