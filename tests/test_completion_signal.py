#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the one-shot completion signal.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
import logging
import threading

import pytest

from funcbridge.core.utils.concurrency import CompletionSignal, create_loop_future
from funcbridge.core.utils.exceptions import CompletionTimeoutError


def test_first_completion_wins():
    signal = CompletionSignal(name="first-wins")

    assert signal.done() is False
    assert signal.complete("first") is True
    assert signal.complete("second") is False
    assert signal.done() is True
    assert signal.result() == "first"


def test_completion_can_carry_an_exception_value():
    signal = CompletionSignal()
    error = RuntimeError("failed")

    signal.complete(error)

    assert signal.result() is error


def test_result_times_out_when_never_completed():
    signal = CompletionSignal(name="never")

    with pytest.raises(CompletionTimeoutError):
        signal.result(timeout=0.01)


def test_concurrent_completion_attempts_fulfil_exactly_once():
    signal = CompletionSignal(name="race")
    barrier = threading.Barrier(16)
    winners = []
    lock = threading.Lock()

    def attempt(index):
        barrier.wait()
        if signal.complete(index):
            with lock:
                winners.append(index)

    threads = [threading.Thread(target=attempt, args=(i,)) for i in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(winners) == 1
    assert signal.result() == winners[0]


def test_wait_returns_value_completed_from_another_thread():
    signal = CompletionSignal(name="threaded")

    async def run_case():
        waiter = asyncio.ensure_future(signal.wait())
        await asyncio.sleep(0)
        threading.Thread(target=signal.complete, args=("done",)).start()
        return await asyncio.wait_for(waiter, timeout=2.0)

    assert asyncio.run(run_case()) == "done"


def test_wait_after_completion_returns_immediately():
    signal = CompletionSignal()
    signal.complete({"outMsg": 1})

    assert asyncio.run(signal.wait()) == {"outMsg": 1}


def test_create_loop_future_binds_to_current_loop():
    async def run_case():
        future = create_loop_future()
        assert future.get_loop() is asyncio.get_running_loop()

    asyncio.run(run_case())


def test_result_uses_default_timeout_when_none_given():
    signal = CompletionSignal(name="bounded", timeout=0.01)

    with pytest.raises(CompletionTimeoutError) as excinfo:
        signal.result()

    assert excinfo.value.context["timeout"] == 0.01


def test_explicit_level_is_applied_to_signal_logger(monkeypatch):
    monkeypatch.setenv("FUNCBRIDGE_LOG_LEVEL", "ERROR")

    signal = CompletionSignal(name="levelled", level="DEBUG")

    assert signal.logger.level == logging.DEBUG
