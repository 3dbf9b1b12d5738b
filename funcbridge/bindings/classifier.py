#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Failure classification for funcbridge.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import logging
from typing import Callable, Optional

from ..core.identity import DEFAULT_DOMAIN, DomainIdentity
from ..core.utils.exceptions import ExceptionFormatter, ExceptionTranslator
from ..core.utils.logger import ModernLogger

TraceSink = Callable[[BaseException], None]

_fallback_logger = logging.getLogger(__name__)


class LoggingTraceSink(ModernLogger):
    """
    Default trace sink: logs the failure with its traceback at error level.
    """

    def __init__(self, name: str = "funcbridge.trace", level: Optional[str] = None):
        super().__init__(name=name, level=level)

    def __call__(self, error: BaseException) -> None:
        self.error(
            "Service invocation failed: %s",
            ExceptionFormatter.format_exception_summary(error),
            exc_info=(type(error), error, error.__traceback__),
        )


def emit_trace(sink: TraceSink, error: BaseException) -> None:
    """
    Hand ``error`` to ``sink``; a failing sink is reported on the module logger.
    """
    try:
        sink(error)
    except Exception as sink_exc:
        # completion must proceed even when the log sink is broken
        _fallback_logger.error(
            "Trace sink failed (%s) while reporting %s",
            ExceptionFormatter.format_exception_summary(sink_exc),
            type(error).__name__,
            exc_info=(type(sink_exc), sink_exc, sink_exc.__traceback__),
        )


class ErrorClassifier:
    """
    Decides whether a failure reaches the host as-is or wrapped.

    Errors tagged with ``domain`` pass through untouched so callers keep
    recognisable error kinds. Every other failure becomes a
    ``ServiceExecutionError`` whose ``__cause__`` is the original.
    """

    def __init__(
        self,
        domain: DomainIdentity = DEFAULT_DOMAIN,
        trace_sink: Optional[TraceSink] = None,
    ):
        self.domain = domain
        self.trace_sink: TraceSink = trace_sink or LoggingTraceSink()

    def is_domain_error(self, error: BaseException) -> bool:
        return self.domain.owns(error)

    def classify(
        self, error: BaseException, function_name: Optional[str] = None
    ) -> BaseException:
        """
        Trace ``error`` and return the error to report for the invocation.
        """
        emit_trace(self.trace_sink, error)
        if self.is_domain_error(error):
            return error
        return ExceptionTranslator.as_service_execution_error(
            error,
            domain=self.domain,
            function_name=function_name,
        )
