#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for invocation completion through FunctionCallback.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import pytest

from funcbridge.bindings import FunctionCallback, HttpResult, ResponseEnvelope
from funcbridge.config import FuncBridgeConfig
from funcbridge.core.identity import DomainIdentity
from funcbridge.core.utils.concurrency import CompletionSignal
from funcbridge.core.utils.exceptions import (
    BindingResolutionError,
    FuncBridgeError,
    ServiceExecutionError,
)


def _callback(bindings, trace_sink, config=None):
    signal = CompletionSignal()
    callback = FunctionCallback(
        signal,
        bindings,
        config=config or FuncBridgeConfig(),
        trace_sink=trace_sink,
        function_name="handler",
    )
    return signal, callback


def test_success_with_queue_binding_completes_with_out_msg(trace_sink):
    signal, callback = _callback(["Queue"], trace_sink)

    callback.notify_success({"order": 1})

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ResponseEnvelope)
    assert outcome.to_wire() == {"outMsg": {"order": 1}}
    assert trace_sink.errors == []


def test_success_with_qualified_http_binding_projects_structured_response(trace_sink):
    signal, callback = _callback(["af:Http", "Queue"], trace_sink)

    callback.notify_success(HttpResult.not_found("nf"))

    assert signal.result(timeout=1).to_wire() == {
        "resp": {
            "statusCode": "404",
            "body": "nf",
            "headers": {"Content-Type": "text/plain"},
        }
    }


def test_success_with_unknown_binding_uses_generic_shape(trace_sink):
    signal, callback = _callback(["Table"], trace_sink)

    callback.notify_success("hello")

    assert signal.result(timeout=1).to_wire() == {"resp": {"body": "hello"}}


def test_disguised_foreign_error_is_traced_and_completed_as_is(trace_sink):
    signal, callback = _callback(["Http"], trace_sink)
    error = RuntimeError("returned, not raised")

    callback.notify_success(error)

    assert signal.result(timeout=1) is error
    assert trace_sink.errors == [error]


def test_disguised_domain_error_is_completed_without_trace(trace_sink):
    signal, callback = _callback(["Http"], trace_sink)
    error = FuncBridgeError("owned")

    callback.notify_success(error)

    assert signal.result(timeout=1) is error
    assert trace_sink.errors == []


def test_failure_with_foreign_error_completes_with_wrapper(trace_sink):
    signal, callback = _callback(["Http"], trace_sink)
    error = ValueError("boom")

    callback.notify_failure(error)

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ServiceExecutionError)
    assert outcome.message == "service method invocation failed: boom"
    assert outcome.__cause__ is error
    assert trace_sink.errors == [error]


def test_failure_with_domain_error_is_traced_and_passed_through(trace_sink):
    signal, callback = _callback(["Http"], trace_sink)
    error = FuncBridgeError("owned")

    callback.notify_failure(error)

    assert signal.result(timeout=1) is error
    assert trace_sink.errors == [error]


def test_failure_does_not_need_output_bindings(trace_sink):
    signal, callback = _callback([], trace_sink)

    callback.notify_failure(RuntimeError("x"))

    assert isinstance(signal.result(timeout=1), ServiceExecutionError)


def test_success_without_output_bindings_completes_with_resolution_error(trace_sink):
    signal, callback = _callback([], trace_sink)

    callback.notify_success("value")

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, BindingResolutionError)
    assert "handler" in outcome.message
    assert trace_sink.errors == [outcome]


def test_second_notification_does_not_change_outcome(trace_sink):
    signal, callback = _callback(["Queue"], trace_sink)

    callback.notify_success("first")
    callback.notify_failure(RuntimeError("late"))

    assert signal.result(timeout=1).to_wire() == {"outMsg": "first"}


def test_broken_trace_sink_still_completes_signal():
    def broken_sink(error):
        raise RuntimeError("log sink down")

    signal, callback = _callback(["Http"], broken_sink)

    callback.notify_failure(ValueError("boom"))

    assert isinstance(signal.result(timeout=1), ServiceExecutionError)


def test_projection_failure_is_routed_through_failure_path(trace_sink):
    class ExplodingCodec:
        def encode(self, data):
            raise OSError("codec unavailable")

        def decode(self, text):
            raise OSError("codec unavailable")

    signal, callback = _callback(["Blob"], trace_sink)
    callback.projector.binary_codec = ExplodingCodec()

    callback.notify_success(b"bytes")

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ServiceExecutionError)
    assert outcome.message == "service method invocation failed: codec unavailable"


@pytest.mark.parametrize("owned", [True, False])
def test_callback_uses_configured_domain(trace_sink, owned):
    acme = DomainIdentity(org="acme", name="fn")
    config = FuncBridgeConfig(domain=acme)
    signal, callback = _callback(["Http"], trace_sink, config=config)
    error = FuncBridgeError("x", domain=acme if owned else None)

    callback.notify_failure(error)

    outcome = signal.result(timeout=1)
    if owned:
        assert outcome is error
    else:
        assert isinstance(outcome, ServiceExecutionError)
        assert outcome.domain == acme


class UnprintableError(RuntimeError):
    def __str__(self):
        raise RuntimeError("no str")


def test_unprintable_failure_still_completes_signal(trace_sink):
    signal, callback = _callback(["Http"], trace_sink)
    error = UnprintableError()

    callback.notify_failure(error)

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ServiceExecutionError)
    assert outcome.message == "service method invocation failed: UnprintableError"
    assert outcome.__cause__ is error


def test_unprintable_failure_with_broken_sink_still_completes_signal():
    def broken_sink(error):
        raise UnprintableError()

    signal, callback = _callback(["Http"], broken_sink)

    callback.notify_failure(UnprintableError())

    assert signal.done() is True
    assert isinstance(signal.result(timeout=1), ServiceExecutionError)


def test_failing_classification_completes_with_plain_wrapper(trace_sink):
    class ExplodingClassifier:
        def classify(self, error, function_name=None):
            raise LookupError("classifier broke")

    signal, callback = _callback(["Http"], trace_sink)
    callback.classifier = ExplodingClassifier()
    error = ValueError("boom")

    callback.notify_failure(error)

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ServiceExecutionError)
    assert outcome.message == "service method invocation failed: ValueError"
    assert outcome.__cause__ is error
    assert outcome.domain == callback.config.domain


def test_domain_given_as_string_is_used_for_classification(trace_sink):
    config = FuncBridgeConfig(domain="acme/fn")
    signal, callback = _callback(["Http"], trace_sink, config=config)

    callback.notify_failure(ValueError("boom"))

    outcome = signal.result(timeout=1)
    assert isinstance(outcome, ServiceExecutionError)
    assert outcome.domain == DomainIdentity(org="acme", name="fn")
