#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
funcbridge core module exports (lazy-loaded).

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "CompletionSignal": ("funcbridge.core.utils.concurrency", "CompletionSignal"),
    "ModernLogger": ("funcbridge.core.utils.logger", "ModernLogger"),
    "DomainIdentity": ("funcbridge.core.identity", "DomainIdentity"),
    "DEFAULT_DOMAIN": ("funcbridge.core.identity", "DEFAULT_DOMAIN"),
    "EnvelopeSerializer": ("funcbridge.core.data.codec", "EnvelopeSerializer"),
    "Base64Codec": ("funcbridge.core.data.codec", "Base64Codec"),
}

__all__ = sorted(_EXPORT_MAP.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'funcbridge.core' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
