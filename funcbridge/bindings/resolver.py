#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Output binding resolution for funcbridge.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Iterable, List, Sequence, Tuple

from .models import BindingKind


def normalize_binding_identifiers(identifiers: Iterable[str]) -> List[str]:
    """
    Strip module qualifiers, keeping the segment after the last ``:``.

    ``["azure:Http", "Queue"]`` becomes ``["Http", "Queue"]``; order is kept.
    """
    normalized: List[str] = []
    for identifier in identifiers:
        normalized.append(str(identifier).split(":")[-1])
    return normalized


def resolve_binding_kind(identifiers: Sequence[str]) -> BindingKind:
    """
    Select the primary binding kind from the first identifier.

    Empty input resolves to ``BindingKind.GENERIC``; callers that treat an
    empty list as an error must check before resolving.
    """
    if not identifiers:
        return BindingKind.GENERIC
    return BindingKind.from_identifier(identifiers[0])


class BindingResolver:
    """
    Resolves and caches the primary binding kind for one annotated method.
    """

    def __init__(self, identifiers: Iterable[str] = ()):
        self._identifiers: Tuple[str, ...] = tuple(
            normalize_binding_identifiers(identifiers)
        )
        self._kind = resolve_binding_kind(self._identifiers)

    @property
    def identifiers(self) -> Tuple[str, ...]:
        return self._identifiers

    @property
    def kind(self) -> BindingKind:
        return self._kind

    def is_empty(self) -> bool:
        return not self._identifiers

    def __repr__(self) -> str:
        return "BindingResolver(identifiers={0!r}, kind={1})".format(
            list(self._identifiers), self._kind.value
        )
