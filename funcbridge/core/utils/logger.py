#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Rich-backed logging mixin for funcbridge components.

Components inherit ``ModernLogger`` and log through ``self.debug``,
``self.info``, ``self.warning``, ``self.error`` and ``self.exception`` using
the usual ``%``-style arguments and ``exc_info``.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import logging
import os
import threading
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_LOCK = threading.Lock()
_DEFAULT_LEVEL_ENV = "FUNCBRIDGE_LOG_LEVEL"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.environ.get(_DEFAULT_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def _build_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True, soft_wrap=True, highlight=False),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    return handler


class ModernLogger:
    """
    Logging base that attaches a single ``RichHandler`` per logger name.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        level: Optional[Union[int, str]] = None,
    ) -> None:
        self._logger = logging.getLogger(name or self.__class__.__name__)
        self._logger.setLevel(_resolve_level(level))
        with _HANDLER_LOCK:
            if not any(
                isinstance(handler, RichHandler) for handler in self._logger.handlers
            ):
                self._logger.addHandler(_build_handler())
                self._logger.propagate = False

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_level(self, level: Union[int, str]) -> None:
        self._logger.setLevel(_resolve_level(level))

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._logger.error(message, *args, **kwargs)
