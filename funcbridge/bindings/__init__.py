#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Output binding resolution, response projection and invocation completion.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .models import (
    NO_BODY,
    BindingKind,
    FunctionInvocation,
    HttpResponse,
    HttpResult,
    HttpStatus,
    OpaqueValue,
    ResponseEnvelope,
    ResultValue,
    StructuredHttpResponse,
    to_result_value,
)
from .resolver import BindingResolver, normalize_binding_identifiers, resolve_binding_kind
from .projector import ResponseProjector, project_response
from .classifier import ErrorClassifier, LoggingTraceSink, TraceSink, emit_trace
from .callback import FunctionCallback
from .runtime import FunctionRuntime, InvocationDispatcher, outcome_to_wire

__all__ = [
    "NO_BODY",
    "BindingKind",
    "FunctionInvocation",
    "HttpResponse",
    "HttpResult",
    "HttpStatus",
    "OpaqueValue",
    "ResponseEnvelope",
    "ResultValue",
    "StructuredHttpResponse",
    "to_result_value",
    "BindingResolver",
    "normalize_binding_identifiers",
    "resolve_binding_kind",
    "ResponseProjector",
    "project_response",
    "ErrorClassifier",
    "LoggingTraceSink",
    "TraceSink",
    "emit_trace",
    "FunctionCallback",
    "FunctionRuntime",
    "InvocationDispatcher",
    "outcome_to_wire",
]
