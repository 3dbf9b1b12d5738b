#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception hierarchy for funcbridge.

Every error raised by the package derives from ``FuncBridgeError`` and carries
a ``domain`` tag. Errors tagged with the active ``DomainIdentity`` are treated
as protocol-owned and travel back to the host untouched; everything else is
wrapped in ``ServiceExecutionError`` before it reaches the host.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import traceback
from typing import Any, Dict, List, Optional

from ..identity import DEFAULT_DOMAIN, DomainIdentity

SERVICE_EXECUTION_FAILED_PREFIX = "service method invocation failed: "

__all__ = [
    "SERVICE_EXECUTION_FAILED_PREFIX",
    "FuncBridgeError",
    "ServiceExecutionError",
    "BindingResolutionError",
    "CompletionTimeoutError",
    "SerializationError",
    "ExceptionFormatter",
    "ExceptionTranslator",
]


class FuncBridgeError(Exception):
    """
    Base error for the function handler bridge.

    Args:
        message: Human-readable error summary.
        cause: Optional underlying exception, also exposed as ``__cause__``.
        domain: Identity that owns this error. Defaults to the package domain.
        **context: Extra diagnostic fields kept on ``context``.
    """

    error_type = "FuncBridgeError"

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        domain: Optional[DomainIdentity] = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.domain = domain or DEFAULT_DOMAIN
        self.context: Dict[str, Any] = dict(context)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return "{0}(message={1!r}, domain={2!r})".format(
            self.__class__.__name__, self.message, self.domain.qualified_name
        )


class ServiceExecutionError(FuncBridgeError):
    """
    A service method failed with an error that is not protocol-owned.
    """

    error_type = "ServiceExecutionError"


class BindingResolutionError(FuncBridgeError):
    """
    Output bindings for an invocation could not be resolved.
    """

    error_type = "BindingResolutionError"


class CompletionTimeoutError(FuncBridgeError):
    """
    Waiting on a completion signal exceeded the requested timeout.
    """

    error_type = "CompletionTimeoutError"


class SerializationError(FuncBridgeError):
    """
    An envelope or payload could not be encoded for the host.
    """

    error_type = "SerializationError"

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        data_type: Optional[str] = None,
        serialization_format: Optional[str] = None,
        cause: Optional[BaseException] = None,
        domain: Optional[DomainIdentity] = None,
    ) -> None:
        super().__init__(
            message,
            cause=cause,
            domain=domain,
            operation=operation,
            data_type=data_type,
            serialization_format=serialization_format,
        )
        self.operation = operation
        self.data_type = data_type
        self.serialization_format = serialization_format


def error_message(exc: BaseException) -> str:
    """
    Return the message of ``exc`` the way it is shown to the host.
    """
    if isinstance(exc, FuncBridgeError):
        return exc.message
    try:
        text = str(exc)
    except Exception:
        # __str__ itself may raise
        return exc.__class__.__name__
    if text:
        return text
    return exc.__class__.__name__


class ExceptionFormatter:
    """
    Rendering helpers for exceptions and their cause chains.
    """

    @staticmethod
    def format_exception(exc: BaseException) -> str:
        """
        Full traceback text for ``exc`` including chained causes.
        """
        return "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    @staticmethod
    def iter_chain(exc: BaseException) -> List[BaseException]:
        chain: List[BaseException] = []
        seen = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            chain.append(current)
            seen.add(id(current))
            current = current.__cause__
        return chain

    @classmethod
    def format_exception_chain(cls, exc: BaseException) -> str:
        """
        One line per exception in the ``__cause__`` chain, outermost first.
        """
        return "\n".join(
            "{0}{1}: {2}".format(
                "caused by " if index else "",
                item.__class__.__name__,
                error_message(item),
            )
            for index, item in enumerate(cls.iter_chain(exc))
        )

    @staticmethod
    def format_exception_summary(exc: BaseException) -> str:
        return "{0}: {1}".format(exc.__class__.__name__, error_message(exc))

    @classmethod
    def to_wire(cls, exc: BaseException) -> Dict[str, Any]:
        """
        Build the host-facing error object with a nested ``cause`` chain.
        """
        wire: Optional[Dict[str, Any]] = None
        for item in reversed(cls.iter_chain(exc)):
            node: Dict[str, Any] = {
                "type": getattr(item, "error_type", item.__class__.__name__),
                "message": error_message(item),
            }
            if wire is not None:
                node["cause"] = wire
            wire = node
        return wire or {}


class ExceptionTranslator:
    """
    Central place that turns foreign exceptions into funcbridge errors.
    """

    @staticmethod
    def as_service_execution_error(
        exc: BaseException,
        *,
        domain: Optional[DomainIdentity] = None,
        function_name: Optional[str] = None,
    ) -> ServiceExecutionError:
        context: Dict[str, Any] = {"original_type": exc.__class__.__name__}
        if function_name:
            context["function_name"] = function_name
        return ServiceExecutionError(
            SERVICE_EXECUTION_FAILED_PREFIX + error_message(exc),
            cause=exc,
            domain=domain,
            **context,
        )

    @staticmethod
    def as_serialization_error(
        exc: BaseException,
        *,
        operation: str,
        data_type: Optional[str] = None,
        serialization_format: str = "json",
        domain: Optional[DomainIdentity] = None,
    ) -> SerializationError:
        return SerializationError(
            operation=operation,
            message="Envelope {0} failed: {1}".format(operation, error_message(exc)),
            data_type=data_type,
            serialization_format=serialization_format,
            cause=exc,
            domain=domain,
        )
