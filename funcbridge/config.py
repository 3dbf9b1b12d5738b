#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Runtime configuration for funcbridge.

Values come from keyword overrides or ``FUNCBRIDGE_*`` environment variables.
``get_config`` caches one process-wide instance; tests replace it through
``set_config``.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .core.identity import DEFAULT_DOMAIN, DomainIdentity

DEFAULT_CONTENT_TYPE = "text/plain"

ENV_DOMAIN_ORG = "FUNCBRIDGE_DOMAIN_ORG"
ENV_DOMAIN_NAME = "FUNCBRIDGE_DOMAIN_NAME"
ENV_DEFAULT_CONTENT_TYPE = "FUNCBRIDGE_DEFAULT_CONTENT_TYPE"
ENV_LOG_LEVEL = "FUNCBRIDGE_LOG_LEVEL"
ENV_COMPLETION_TIMEOUT = "FUNCBRIDGE_COMPLETION_TIMEOUT"

_CONFIG_LOCK = threading.Lock()
_active_config: Optional["FuncBridgeConfig"] = None


@dataclass(frozen=True)
class FuncBridgeConfig:
    """
    Settings shared by the resolver, projector, classifier and callbacks.

    Args:
        domain: Identity whose errors and HTTP results are protocol-owned;
            an ``"org/name"`` string or mapping is parsed, ``None`` means default.
        default_content_type: ``Content-Type`` inserted when an HTTP result
            carries none.
        log_level: Level applied to funcbridge loggers.
        completion_timeout: Optional bound, in seconds, on
            ``InvocationDispatcher.run`` and on blocking signal reads.
    """

    domain: DomainIdentity = field(default=DEFAULT_DOMAIN)
    default_content_type: str = DEFAULT_CONTENT_TYPE
    log_level: str = "INFO"
    completion_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.domain is None:
            object.__setattr__(self, "domain", DEFAULT_DOMAIN)
        else:
            object.__setattr__(self, "domain", DomainIdentity.from_value(self.domain))
        if not self.default_content_type or not self.default_content_type.strip():
            raise ValueError("default_content_type cannot be empty")
        if self.completion_timeout is not None and self.completion_timeout <= 0:
            raise ValueError("completion_timeout must be positive")

    def with_overrides(self, **overrides: Any) -> "FuncBridgeConfig":
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FuncBridgeConfig":
        """
        Build configuration from ``FUNCBRIDGE_*`` environment variables.
        """
        env = os.environ if environ is None else environ

        domain = DEFAULT_DOMAIN
        org = env.get(ENV_DOMAIN_ORG, "").strip()
        name = env.get(ENV_DOMAIN_NAME, "").strip()
        if org or name:
            domain = DomainIdentity(org=org or DEFAULT_DOMAIN.org, name=name or DEFAULT_DOMAIN.name)

        timeout_raw = env.get(ENV_COMPLETION_TIMEOUT, "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else None
        except ValueError as exc:
            raise ValueError(
                "{0} must be a number, got: {1}".format(ENV_COMPLETION_TIMEOUT, timeout_raw)
            ) from exc

        return cls(
            domain=domain,
            default_content_type=env.get(ENV_DEFAULT_CONTENT_TYPE, "").strip()
            or DEFAULT_CONTENT_TYPE,
            log_level=env.get(ENV_LOG_LEVEL, "").strip().upper() or "INFO",
            completion_timeout=timeout,
        )


def create_config(**overrides: Any) -> FuncBridgeConfig:
    """
    Build a configuration from the environment with keyword overrides applied.
    """
    return FuncBridgeConfig.from_env().with_overrides(**overrides)


def get_config() -> FuncBridgeConfig:
    global _active_config

    if _active_config is None:
        with _CONFIG_LOCK:
            if _active_config is None:
                _active_config = FuncBridgeConfig.from_env()
    return _active_config


def set_config(config: Optional[FuncBridgeConfig]) -> None:
    """
    Replace the cached configuration. ``None`` reloads from the environment.
    """
    global _active_config

    with _CONFIG_LOCK:
        _active_config = config
