#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Payload codecs used when handing envelopes back to the function host.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import base64
import json
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ..utils.exceptions import ExceptionTranslator, SerializationError

BINARY_TYPES = (bytes, bytearray, memoryview)


def is_binary(value: Any) -> bool:
    return isinstance(value, BINARY_TYPES)


@runtime_checkable
class BinaryCodec(Protocol):
    """Protocol for turning binary payloads into host-safe text"""

    def encode(self, data: bytes) -> str:
        ...

    def decode(self, text: str) -> bytes:
        ...


class Base64Codec:
    """Standard base64 text encoding for blob outputs."""

    def encode(self, data: Any) -> str:
        if not is_binary(data):
            raise SerializationError(
                operation="encode",
                message="Base64 encoding requires a bytes-like value",
                data_type=type(data).__name__,
                serialization_format="base64",
            )
        return base64.b64encode(bytes(data)).decode("ascii")

    def decode(self, text: str) -> bytes:
        try:
            return base64.b64decode(text, validate=True)
        except (ValueError, TypeError) as e:
            raise ExceptionTranslator.as_serialization_error(
                e,
                operation="decode",
                data_type=type(text).__name__,
                serialization_format="base64",
            ) from e


class EnvelopeSerializer:
    """JSON encoder for wire envelopes and error objects"""

    def __init__(self, binary_codec: Optional[BinaryCodec] = None, ensure_ascii: bool = False):
        self.binary_codec = binary_codec or Base64Codec()
        self.ensure_ascii = ensure_ascii

    def _encode_recursive(self, obj: Any) -> Any:
        """
        Bring nested values into JSON-native form.

        Tuples and sets become arrays and binary values become base64 text,
        so bodies that slipped past projection still reach the host intact.
        """
        if isinstance(obj, Mapping):
            return {str(k): self._encode_recursive(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [self._encode_recursive(item) for item in obj]
        if isinstance(obj, (set, frozenset)):
            return [self._encode_recursive(item) for item in sorted(obj, key=repr)]
        if is_binary(obj):
            return self.binary_codec.encode(bytes(obj))
        return obj

    def serialize(self, wire: Mapping[str, Any]) -> bytes:
        """Serialize a wire dict to UTF-8 JSON bytes"""
        try:
            encoded = self._encode_recursive(wire)
            return json.dumps(encoded, ensure_ascii=self.ensure_ascii).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise ExceptionTranslator.as_serialization_error(
                e,
                operation="serialize",
                data_type=type(wire).__name__,
            ) from e

    def deserialize(self, data: bytes) -> Any:
        if not data:
            return None
        try:
            return json.loads(data.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ExceptionTranslator.as_serialization_error(
                e,
                operation="deserialize",
            ) from e
