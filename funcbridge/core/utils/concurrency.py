#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Concurrency primitives for funcbridge.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
import threading
from typing import Any, List, Optional, Union

from .exceptions import CompletionTimeoutError
from .logger import ModernLogger

_PENDING = object()


def create_loop_future() -> "asyncio.Future[Any]":
    """
    Create a future bound to the currently running event loop.
    """
    return asyncio.get_running_loop().create_future()


def _set_waiter_result(waiter: "asyncio.Future[Any]", value: Any) -> None:
    if not waiter.done():
        waiter.set_result(value)


class CompletionSignal(ModernLogger):
    """
    One-shot completion handoff between an invocation and its caller.

    The first call to ``complete`` wins; later calls leave the stored value
    untouched and return ``False``. ``complete`` may be called from any thread
    and wakes both blocking readers (``result``) and asyncio waiters
    (``wait``) on whatever loop they are running.
    """

    def __init__(
        self,
        name: str = "completion-signal",
        *,
        timeout: Optional[float] = None,
        level: Optional[Union[int, str]] = None,
    ) -> None:
        super().__init__(name="funcbridge.CompletionSignal", level=level)
        self._name = name
        self._timeout = timeout
        self._guard = threading.Lock()
        self._event = threading.Event()
        self._value: Any = _PENDING
        self._waiters: List["asyncio.Future[Any]"] = []

    @property
    def name(self) -> str:
        return self._name

    def done(self) -> bool:
        return self._event.is_set()

    def complete(self, value: Any) -> bool:
        """
        Fulfil the signal with ``value``. Returns ``True`` for the first writer.
        """
        with self._guard:
            if self._event.is_set():
                late = True
            else:
                late = False
                self._value = value
                self._event.set()
                waiters, self._waiters = self._waiters, []

        if late:
            self.debug(
                "Ignoring repeated completion of '%s' with %s",
                self._name,
                type(value).__name__,
            )
            return False

        for waiter in waiters:
            loop = waiter.get_loop()
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(_set_waiter_result, waiter, value)
        return True

    def result(self, timeout: Optional[float] = None) -> Any:
        """
        Block until the signal is fulfilled and return the stored value.

        Without an explicit ``timeout`` the signal's own default applies;
        ``None`` for both waits indefinitely.
        """
        if timeout is None:
            timeout = self._timeout
        if not self._event.wait(timeout):
            raise CompletionTimeoutError(
                "Completion signal '{0}' was not fulfilled within {1}s".format(
                    self._name, timeout
                ),
                signal=self._name,
                timeout=timeout,
            )
        return self._value

    async def wait(self) -> Any:
        """
        Await the stored value from any running event loop.
        """
        with self._guard:
            if self._event.is_set():
                return self._value
            waiter = create_loop_future()
            self._waiters.append(waiter)
        return await waiter

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return "CompletionSignal(name={0!r}, state={1})".format(self._name, state)
