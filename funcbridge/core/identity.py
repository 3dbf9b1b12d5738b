#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Domain identity used to decide which values belong to the handler protocol.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class DomainIdentity:
    """
    Organization/module pair that tags protocol-owned errors and responses.

    Ownership is decided by comparing the ``domain`` attribute carried by a
    value against this identity, so tests can swap in arbitrary identities
    without touching module-level constants.
    """

    org: str
    name: str

    def __post_init__(self) -> None:
        if not self.org or not self.org.strip():
            raise ValueError("domain org cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("domain name cannot be empty")

    @property
    def qualified_name(self) -> str:
        return "{0}/{1}".format(self.org, self.name)

    def owns(self, value: Any) -> bool:
        """
        Return whether ``value`` is tagged with this identity.
        """
        return getattr(value, "domain", None) == self

    @classmethod
    def from_value(
        cls, value: Union["DomainIdentity", str, Mapping[str, str]]
    ) -> "DomainIdentity":
        """
        Parse identity from an instance, ``"org/name"`` string or mapping.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(org=str(value["org"]), name=str(value["name"]))
        org, separator, name = str(value).strip().partition("/")
        if not separator:
            raise ValueError(
                "domain identity must look like 'org/name', got: {0}".format(value)
            )
        return cls(org=org.strip(), name=name.strip())

    def __str__(self) -> str:
        return self.qualified_name


DEFAULT_DOMAIN = DomainIdentity(org="funcbridge", name="functions")
