#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Binding domain models for funcbridge.

This module defines the binding kinds, the structured HTTP result type user
code returns, the tagged result union and the wire envelopes handed back to
the function host.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..core.identity import DEFAULT_DOMAIN, DomainIdentity

OUT_MSG = "outMsg"
RESP = "resp"
STATUS_CODE = "statusCode"
BODY = "body"
HEADERS = "headers"
CONTENT_TYPE = "Content-Type"

STATUS_REASONS: Dict[int, str] = {
    200: "OK",
    201: "Created",
    202: "Accepted",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    304: "Not Modified",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    415: "Unsupported Media Type",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


class _Missing:
    """
    Marker for an absent body, distinct from an explicit ``None`` body.
    """

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY: Any = _Missing()


class BindingKind(str, Enum):
    """
    Output binding categories that decide how a result is shaped.
    """

    QUEUE = "Queue"
    COSMOS_DOCUMENT = "CosmosDocument"
    BLOB = "Blob"
    HTTP = "Http"
    GENERIC = "Generic"

    @classmethod
    def from_identifier(cls, identifier: Optional[str]) -> "BindingKind":
        """
        Exact-match an unqualified binding identifier; unknown names are generic.
        """
        if identifier is None:
            return cls.GENERIC
        for kind in (cls.QUEUE, cls.COSMOS_DOCUMENT, cls.BLOB, cls.HTTP):
            if identifier == kind.value:
                return kind
        return cls.GENERIC


@dataclass(frozen=True)
class HttpStatus:
    """
    Status sub-object of a structured HTTP result.
    """

    code: int
    reason: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise TypeError("status code must be an int")
        if not 100 <= self.code <= 599:
            raise ValueError("status code out of range: {0}".format(self.code))
        if not self.reason:
            object.__setattr__(self, "reason", STATUS_REASONS.get(self.code, ""))

    @classmethod
    def from_value(cls, value: Union["HttpStatus", int, Mapping[str, Any]]) -> "HttpStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            if "code" not in value:
                raise ValueError("status mapping must contain 'code'")
            return cls(code=int(value["code"]), reason=str(value.get("reason", "")))
        return cls(code=value)

    def __str__(self) -> str:
        return str(self.code)


@dataclass
class HttpResult:
    """
    Structured HTTP response returned by a service method.

    Only results tagged with the active domain identity are treated as
    structured; anything else is passed through as an opaque body.
    """

    status: HttpStatus
    body: Any = NO_BODY
    headers: Optional[Dict[str, Any]] = None
    media_type: Optional[str] = None
    domain: DomainIdentity = field(default=DEFAULT_DOMAIN)

    def __post_init__(self) -> None:
        self.status = HttpStatus.from_value(self.status)
        if self.headers is not None and not isinstance(self.headers, Mapping):
            raise TypeError("headers must be a mapping")

    @property
    def has_body(self) -> bool:
        return self.body is not NO_BODY

    @classmethod
    def with_status(
        cls,
        code: int,
        body: Any = NO_BODY,
        *,
        headers: Optional[Mapping[str, Any]] = None,
        media_type: Optional[str] = None,
        domain: DomainIdentity = DEFAULT_DOMAIN,
    ) -> "HttpResult":
        return cls(
            status=HttpStatus(code),
            body=body,
            headers=dict(headers) if headers is not None else None,
            media_type=media_type,
            domain=domain,
        )

    @classmethod
    def from_mapping(
        cls, payload: Mapping[str, Any], domain: DomainIdentity = DEFAULT_DOMAIN
    ) -> "HttpResult":
        """
        Build from ``{"status": ..., "body": ..., "headers": ..., "mediaType": ...}``.
        """
        if "status" not in payload:
            raise ValueError("HTTP result mapping must contain 'status'")
        headers = payload.get("headers")
        return cls(
            status=HttpStatus.from_value(payload["status"]),
            body=payload["body"] if "body" in payload else NO_BODY,
            headers=dict(headers) if headers is not None else None,
            media_type=payload.get("mediaType", payload.get("media_type")),
            domain=domain,
        )

    @classmethod
    def ok(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(200, body, **kwargs)

    @classmethod
    def created(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(201, body, **kwargs)

    @classmethod
    def accepted(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(202, body, **kwargs)

    @classmethod
    def no_content(cls, **kwargs: Any) -> "HttpResult":
        return cls.with_status(204, **kwargs)

    @classmethod
    def bad_request(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(400, body, **kwargs)

    @classmethod
    def unauthorized(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(401, body, **kwargs)

    @classmethod
    def forbidden(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(403, body, **kwargs)

    @classmethod
    def not_found(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(404, body, **kwargs)

    @classmethod
    def conflict(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(409, body, **kwargs)

    @classmethod
    def internal_server_error(cls, body: Any = NO_BODY, **kwargs: Any) -> "HttpResult":
        return cls.with_status(500, body, **kwargs)


@dataclass(frozen=True)
class StructuredHttpResponse:
    """
    Result recognised as a protocol-owned HTTP response.
    """

    response: HttpResult


@dataclass(frozen=True)
class OpaqueValue:
    """
    Any other result, shaped without inspection.
    """

    value: Any


ResultValue = Union[StructuredHttpResponse, OpaqueValue]


def to_result_value(value: Any, domain: DomainIdentity = DEFAULT_DOMAIN) -> ResultValue:
    """
    Resolve a raw invocation result into the tagged result union.
    """
    if isinstance(value, HttpResult) and domain.owns(value) and value.status is not None:
        return StructuredHttpResponse(response=value)
    return OpaqueValue(value=value)


@dataclass
class HttpResponse:
    """
    ``resp`` container of a response envelope.
    """

    body: Any = NO_BODY
    status_code: Optional[str] = None
    headers: Optional[Dict[str, Any]] = None

    @property
    def has_body(self) -> bool:
        return self.body is not NO_BODY

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {}
        if self.status_code is not None:
            wire[STATUS_CODE] = self.status_code
        if self.has_body:
            wire[BODY] = self.body
        if self.headers is not None:
            wire[HEADERS] = dict(self.headers)
        return wire


@dataclass
class ResponseEnvelope:
    """
    Top-level success container returned to the host.

    Exactly one of ``out_msg`` (queue, document and blob bindings) or
    ``resp`` (HTTP and generic bindings) is set.
    """

    out_msg: Any = NO_BODY
    resp: Optional[HttpResponse] = None

    def __post_init__(self) -> None:
        has_out_msg = self.out_msg is not NO_BODY
        if has_out_msg == (self.resp is not None):
            raise ValueError("envelope must carry exactly one of outMsg or resp")

    @property
    def has_out_msg(self) -> bool:
        return self.out_msg is not NO_BODY

    @classmethod
    def for_output_message(cls, value: Any) -> "ResponseEnvelope":
        return cls(out_msg=value)

    @classmethod
    def for_response(cls, resp: HttpResponse) -> "ResponseEnvelope":
        return cls(resp=resp)

    def to_wire(self) -> Dict[str, Any]:
        if self.has_out_msg:
            return {OUT_MSG: self.out_msg}
        return {RESP: self.resp.to_wire()}


@dataclass
class FunctionInvocation:
    """
    Normalized service method invocation handed to a function runtime.
    """

    function_name: str
    args: Tuple[Any, ...] = field(default_factory=tuple)
    kwargs: Dict[str, Any] = field(default_factory=dict)
    output_bindings: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.function_name or not str(self.function_name).strip():
            raise ValueError("function_name cannot be empty")
        self.output_bindings = tuple(self.output_bindings)
