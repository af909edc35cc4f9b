"""
core/logging/logic/logger.py
============================

Bootstrap for the stdlib ``logging`` tree. Modules log through
``logging.getLogger(__name__)``; this module only installs the handler
and level taken from the ``[Logging]`` config section.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from core.config.config_service import ConfigService, config_service

_HANDLER_NAME = "pdfsign"
_lock = threading.Lock()


def configure_logging(level: Optional[str | int] = None, *,
                      config: Optional[ConfigService] = None) -> logging.Logger:
    """
    Install a single stream handler on the root logger.

    Calling it again only updates level and format, it never stacks handlers.
    """
    service = config or config_service
    cfg = service.logging
    resolved = level if level is not None else cfg.level
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level or cfg.level!r}")

    root = logging.getLogger()
    with _lock:
        handler = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
        if handler is None:
            handler = logging.StreamHandler()
            handler.set_name(_HANDLER_NAME)
            root.addHandler(handler)
        handler.setFormatter(logging.Formatter(cfg.format))
        root.setLevel(resolved)
    if level is None:
        origin = service.meta_source("Logging", "level") or {}
        logging.getLogger(__name__).debug(
            "Log level %s taken from %s (%s)", cfg.level,
            origin.get("layer", "?"), origin.get("source", "?"))
    return root
