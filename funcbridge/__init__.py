#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
funcbridge public API with lazy imports.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

from ._version import __version__

__author__ = "Silan Hu"
__email__ = "silan.hu@u.nus.edu"

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "BindingKind": ("funcbridge.bindings", "BindingKind"),
    "BindingResolver": ("funcbridge.bindings", "BindingResolver"),
    "ResponseProjector": ("funcbridge.bindings", "ResponseProjector"),
    "ErrorClassifier": ("funcbridge.bindings", "ErrorClassifier"),
    "FunctionCallback": ("funcbridge.bindings", "FunctionCallback"),
    "FunctionInvocation": ("funcbridge.bindings", "FunctionInvocation"),
    "FunctionRuntime": ("funcbridge.bindings", "FunctionRuntime"),
    "InvocationDispatcher": ("funcbridge.bindings", "InvocationDispatcher"),
    "HttpResult": ("funcbridge.bindings", "HttpResult"),
    "HttpStatus": ("funcbridge.bindings", "HttpStatus"),
    "ResponseEnvelope": ("funcbridge.bindings", "ResponseEnvelope"),
    "CompletionSignal": ("funcbridge.core", "CompletionSignal"),
    "DomainIdentity": ("funcbridge.core", "DomainIdentity"),
    "FuncBridgeConfig": ("funcbridge.config", "FuncBridgeConfig"),
    "get_config": ("funcbridge.config", "get_config"),
    "create_config": ("funcbridge.config", "create_config"),
}

__all__ = ["__version__", *sorted(_EXPORT_MAP.keys())]


def __getattr__(name: str) -> Any:
    """
    Resolve public API symbols lazily.
    """
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'funcbridge' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
