#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invocation completion callback for funcbridge.

``FunctionCallback`` is handed to the invocation mechanism, which reports the
outcome of one service method call through exactly one of
``notify_success`` or ``notify_failure``. The callback shapes or classifies
that outcome and fulfils the caller's ``CompletionSignal``.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Iterable, Optional

from ..config import FuncBridgeConfig, get_config
from ..core.utils.concurrency import CompletionSignal
from ..core.utils.exceptions import (
    SERVICE_EXECUTION_FAILED_PREFIX,
    BindingResolutionError,
    ServiceExecutionError,
)
from ..core.utils.logger import ModernLogger
from .classifier import ErrorClassifier, LoggingTraceSink, TraceSink, emit_trace
from .models import ResponseEnvelope
from .projector import ResponseProjector
from .resolver import BindingResolver


class FunctionCallback(ModernLogger):
    """
    Terminal consumer of one service invocation outcome.

    Args:
        signal: Completion signal the caller is waiting on.
        output_bindings: Output binding annotation names, qualified or not,
            in declaration order. The first one is authoritative.
        config: Settings to use; defaults to the process-wide configuration.
        trace_sink: Where failure traces go; defaults to the error logger.
        function_name: Name of the invoked method, used in diagnostics.
    """

    def __init__(
        self,
        signal: CompletionSignal,
        output_bindings: Iterable[str] = (),
        *,
        config: Optional[FuncBridgeConfig] = None,
        trace_sink: Optional[TraceSink] = None,
        function_name: Optional[str] = None,
    ):
        self.config = config or get_config()
        super().__init__(name="funcbridge.FunctionCallback", level=self.config.log_level)
        self.signal = signal
        self.function_name = function_name
        self.resolver = BindingResolver(output_bindings)
        self.trace_sink: TraceSink = trace_sink or LoggingTraceSink(
            level=self.config.log_level
        )
        self.classifier = ErrorClassifier(
            domain=self.config.domain, trace_sink=self.trace_sink
        )
        self.projector = ResponseProjector(
            domain=self.config.domain,
            default_content_type=self.config.default_content_type,
        )

    def notify_success(self, result: Any) -> None:
        """
        Complete the invocation with a shaped envelope.

        An exception instance returned as a result completes the signal as-is;
        only foreign errors on this path are traced.
        """
        if isinstance(result, BaseException):
            if not self.classifier.is_domain_error(result):
                emit_trace(self.trace_sink, result)
            self._complete(result)
            return

        if self.resolver.is_empty():
            error = BindingResolutionError(
                "no output binding declared for service method '{0}'".format(
                    self.function_name or "<unknown>"
                ),
                domain=self.config.domain,
                function_name=self.function_name,
            )
            emit_trace(self.trace_sink, error)
            self._complete(error)
            return

        try:
            envelope = self.projector.project(self.resolver.kind, result)
        except Exception as exc:
            self.notify_failure(exc)
            return
        self._complete(envelope)

    def notify_failure(self, error: BaseException) -> None:
        """
        Complete the invocation with the classified error.

        If classification itself fails, the signal still completes with a
        ``ServiceExecutionError`` caused by ``error``.
        """
        try:
            outcome = self.classifier.classify(error, function_name=self.function_name)
        except Exception as classify_exc:
            self.error(
                "Classifying failure of '%s' raised %s",
                self.function_name or "<unknown>",
                type(classify_exc).__name__,
                exc_info=(type(classify_exc), classify_exc, classify_exc.__traceback__),
            )
            outcome = ServiceExecutionError(
                SERVICE_EXECUTION_FAILED_PREFIX + type(error).__name__,
                cause=error,
                domain=self.config.domain,
                original_type=type(error).__name__,
            )
        self._complete(outcome)

    def _complete(self, outcome: Any) -> None:
        if not self.signal.complete(outcome):
            self.warning(
                "Invocation of '%s' already completed; dropping %s",
                self.function_name or "<unknown>",
                "envelope" if isinstance(outcome, ResponseEnvelope) else type(outcome).__name__,
            )
