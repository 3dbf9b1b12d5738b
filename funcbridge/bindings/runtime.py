#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Function runtime contract and invocation dispatch for funcbridge.

The runtime executes service methods; the dispatcher reacts to the outcome
exactly once through a ``FunctionCallback`` and exposes the fulfilled
``CompletionSignal`` to the host layer.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..config import FuncBridgeConfig, get_config
from ..core.data.codec import EnvelopeSerializer
from ..core.utils.concurrency import CompletionSignal
from ..core.utils.exceptions import CompletionTimeoutError, ExceptionFormatter
from ..core.utils.logger import ModernLogger
from .callback import FunctionCallback
from .classifier import TraceSink
from .models import FunctionInvocation, ResponseEnvelope


class FunctionRuntime(ABC):
    """
    Runtime contract for executing service methods.

    Dispatch stays protocol-focused while execution concerns are delegated to
    a runtime implementation.
    """

    @abstractmethod
    async def invoke(self, invocation: FunctionInvocation) -> Any:
        """
        Execute one service method and return its raw result.
        """


class InvocationDispatcher(ModernLogger):
    """
    Runs invocations against a runtime and completes them through callbacks.
    """

    def __init__(
        self,
        runtime: FunctionRuntime,
        config: Optional[FuncBridgeConfig] = None,
        trace_sink: Optional[TraceSink] = None,
        serializer: Optional[EnvelopeSerializer] = None,
    ):
        self.config = config or get_config()
        super().__init__(name="funcbridge.InvocationDispatcher", level=self.config.log_level)
        self._runtime = runtime
        self._trace_sink = trace_sink
        self._serializer = serializer or EnvelopeSerializer()

    def create_callback(
        self, invocation: FunctionInvocation, signal: CompletionSignal
    ) -> FunctionCallback:
        return FunctionCallback(
            signal,
            invocation.output_bindings,
            config=self.config,
            trace_sink=self._trace_sink,
            function_name=invocation.function_name,
        )

    async def dispatch(self, invocation: FunctionInvocation) -> CompletionSignal:
        """
        Invoke the runtime and return the signal fulfilled with its outcome.
        """
        signal = CompletionSignal(
            name=invocation.function_name,
            timeout=self.config.completion_timeout,
            level=self.config.log_level,
        )
        callback = self.create_callback(invocation, signal)
        self.debug("Dispatching invocation of '%s'", invocation.function_name)

        try:
            result = await self._runtime.invoke(invocation)
        except Exception as exc:
            callback.notify_failure(exc)
        else:
            callback.notify_success(result)
        return signal

    async def run(self, invocation: FunctionInvocation) -> Any:
        """
        Return the outcome value: a ``ResponseEnvelope`` or an exception.

        Raises:
            CompletionTimeoutError: ``config.completion_timeout`` elapsed
                before the invocation completed.
        """
        timeout = self.config.completion_timeout
        if timeout is None:
            return await self._dispatch_and_wait(invocation)
        try:
            return await asyncio.wait_for(self._dispatch_and_wait(invocation), timeout)
        except asyncio.TimeoutError as exc:
            self.warning(
                "Invocation of '%s' did not complete within %ss",
                invocation.function_name,
                timeout,
            )
            raise CompletionTimeoutError(
                "Invocation of '{0}' was not completed within {1}s".format(
                    invocation.function_name, timeout
                ),
                cause=exc,
                domain=self.config.domain,
                signal=invocation.function_name,
                timeout=timeout,
            ) from exc

    async def _dispatch_and_wait(self, invocation: FunctionInvocation) -> Any:
        signal = await self.dispatch(invocation)
        return await signal.wait()

    async def run_for_wire(self, invocation: FunctionInvocation) -> Dict[str, Any]:
        """
        Return the outcome as a host wire dict.

        Envelopes become ``{"outMsg": ...}`` / ``{"resp": {...}}``; errors
        become ``{"error": {"type", "message", "cause"?}}``.
        """
        outcome = await self.run(invocation)
        return outcome_to_wire(outcome)

    async def run_for_bytes(self, invocation: FunctionInvocation) -> bytes:
        return self._serializer.serialize(await self.run_for_wire(invocation))


def outcome_to_wire(outcome: Any) -> Dict[str, Any]:
    if isinstance(outcome, ResponseEnvelope):
        return outcome.to_wire()
    if isinstance(outcome, BaseException):
        return {"error": ExceptionFormatter.to_wire(outcome)}
    raise TypeError(
        "invocation outcome must be an envelope or an exception, got {0}".format(
            type(outcome).__name__
        )
    )
