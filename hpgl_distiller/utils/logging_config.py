"""Unified logging configuration for the distiller entry points.

Provides consistent logging for the CLI and for library callers:
    - Console handler on stderr (stdout may be the distilled stream)
    - Optional file handler
    - JSON output mode for ingestion
    - Contextual fields (app, input) carried by contextvars
    - Warning capture (Python warnings -> logging)

Public API:
    setup_logging(log_level="DEBUG", context={"app": "hpgl-distiller"})
    push_context(input="drawing.hpgl")
    pop_context(keys=["input"])

Format examples:
    Human: 2026-10-16T13:45:12.345Z | INFO     | app=hpgl-distiller | Distilled 12/40 tokens
    JSON: {"t":"2026-10-16T13:45:12.345Z","lvl":"INFO","app":"hpgl-distiller","msg":"..."}

Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

from __future__ import annotations

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "hpgl_distiller_logging_context", default={}
)

_configured = False
_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formatter that appends contextual fields to every record.

    Supports a human-readable format with optional colours and a JSON
    line format for machine ingestion.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def __init__(self, fmt_mode: str = "human", use_color: bool = True) -> None:
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: Dict[str, Any],
    ) -> str:
        log_dict: Dict[str, Any] = {
            "t": ts.isoformat(),
            "lvl": record.levelname,
            "name": record.name,
            "pid": os.getpid(),
            "msg": record.getMessage(),
        }
        log_dict.update(context)
        if record.exc_info:
            log_dict["exc"] = self.formatException(record.exc_info)
        return json.dumps(log_dict)

    def _format_human(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: Dict[str, Any],
    ) -> str:
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.COLORS['RESET']}"

        parts = [ts_str, "|", level, "|"]
        context_str = " ".join(f"{k}={v}" for k, v in context.items())
        if context_str:
            parts.append(f"{context_str} |")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    capture_warnings: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    log_file : str, optional
        Log file path; None for no file logging
    json : bool
        Use JSON lines for every handler, default False
    color : bool
        Use ANSI colours on the console (only when stderr is a TTY)
    to_stderr : bool
        Log to stderr, default True
    capture_warnings : bool
        Route Python warnings into logging, default True
    context : dict, optional
        Initial contextual fields (e.g. {"app": "hpgl-distiller"})

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger by this call

    Raises
    ------
    ValueError
        If *log_level* is not a known level name
    """
    global _configured

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    if _configured:
        for handler in _handlers:
            root.removeHandler(handler)
            handler.close()
        _handlers.clear()

    root.setLevel(level)
    fmt_mode = "json" if json else "human"

    if to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ContextFormatter(fmt_mode, color))
        root.addHandler(console_handler)
        _handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        root.addHandler(file_handler)
        _handlers.append(file_handler)

    if context:
        push_context(**context)

    if capture_warnings:
        logging.captureWarnings(True)

    _configured = True
    return list(_handlers)


def push_context(**kwargs: Any) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(app="hpgl-distiller")
    >>> push_context(input="drawing.hpgl")
    """
    current = _context_var.get()
    _context_var.set({**current, **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; ``None`` clears all of them."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    """Return a copy of the current contextual fields."""
    return dict(_context_var.get())


def shutdown() -> None:
    """Flush and detach the handlers installed by :func:`setup_logging`.

    Call at the end of ``main()`` so log files are complete.
    """
    global _configured

    root = logging.getLogger()
    for handler in _handlers:
        handler.flush()
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()
    _configured = False
