#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Response projection for funcbridge.

Shapes a raw service result into the envelope the function host expects for
the invocation's primary output binding.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Dict, Mapping, Optional

from ..config import DEFAULT_CONTENT_TYPE
from ..core.data.codec import Base64Codec, BinaryCodec, is_binary
from ..core.identity import DEFAULT_DOMAIN, DomainIdentity
from .models import (
    CONTENT_TYPE,
    BindingKind,
    HttpResponse,
    HttpResult,
    ResponseEnvelope,
    StructuredHttpResponse,
    to_result_value,
)


def find_header_key(headers: Mapping[str, Any], name: str) -> Optional[str]:
    """
    Return the existing key matching ``name`` case-insensitively, if any.
    """
    wanted = name.lower()
    for key in headers:
        if str(key).lower() == wanted:
            return key
    return None


class ResponseProjector:
    """
    Pure projection of ``(binding kind, result)`` into a response envelope.
    """

    def __init__(
        self,
        domain: DomainIdentity = DEFAULT_DOMAIN,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        binary_codec: Optional[BinaryCodec] = None,
    ):
        self.domain = domain
        self.default_content_type = default_content_type
        self.binary_codec = binary_codec or Base64Codec()

    def project(self, kind: BindingKind, result: Any) -> ResponseEnvelope:
        if kind in (BindingKind.QUEUE, BindingKind.COSMOS_DOCUMENT):
            return ResponseEnvelope.for_output_message(result)

        if kind is BindingKind.BLOB:
            if is_binary(result):
                return ResponseEnvelope.for_output_message(
                    self.binary_codec.encode(bytes(result))
                )
            # non-binary blob output is shaped like any other binding
            return self._generic(result)

        if kind is BindingKind.HTTP:
            resolved = to_result_value(result, self.domain)
            if isinstance(resolved, StructuredHttpResponse):
                return ResponseEnvelope.for_response(
                    self._http_response(resolved.response)
                )
            return self._generic(resolved.value)

        return self._generic(result)

    def _generic(self, result: Any) -> ResponseEnvelope:
        return ResponseEnvelope.for_response(HttpResponse(body=result))

    def _http_response(self, result: HttpResult) -> HttpResponse:
        headers: Dict[str, Any] = dict(result.headers) if result.headers is not None else {}

        content_type_key = find_header_key(headers, CONTENT_TYPE)
        if content_type_key is None:
            headers[CONTENT_TYPE] = self.default_content_type
            content_type_key = CONTENT_TYPE

        if result.media_type is not None:
            headers[content_type_key] = result.media_type

        return HttpResponse(
            status_code=str(result.status.code),
            body=result.body,
            headers=headers,
        )


def project_response(
    kind: BindingKind,
    result: Any,
    domain: DomainIdentity = DEFAULT_DOMAIN,
    default_content_type: str = DEFAULT_CONTENT_TYPE,
) -> ResponseEnvelope:
    """
    Shortcut for a one-off projection with default codec settings.
    """
    return ResponseProjector(
        domain=domain, default_content_type=default_content_type
    ).project(kind, result)
