"""Grantee and grantor descriptions for privilege-transfer operations."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import field_serializer

from ..spi import Privilege, TrinoPrincipal
from .resources import OpaModel


class TrinoGrantPrincipal(OpaModel):
    name: str
    type: str

    @classmethod
    def from_principal(
        cls, principal: Optional[TrinoPrincipal]
    ) -> Optional["TrinoGrantPrincipal"]:
        if principal is None:
            return None
        return cls(name=principal.name, type=principal.type.value)


class OpaQueryInputGrant(OpaModel):
    principals: FrozenSet[TrinoGrantPrincipal]
    grant_option: Optional[bool] = None
    privilege: Optional[str] = None

    @classmethod
    def for_principals(
        cls,
        principals: Iterable[TrinoPrincipal],
        grant_option: Optional[bool] = None,
        privilege: Optional[Privilege] = None,
    ) -> "OpaQueryInputGrant":
        return cls(
            principals=frozenset(
                TrinoGrantPrincipal.from_principal(p) for p in principals
            ),
            grant_option=grant_option,
            privilege=privilege.value if privilege is not None else None,
        )

    @field_serializer("principals")
    def serialize_principals(
        self, principals: FrozenSet[TrinoGrantPrincipal]
    ) -> List[Dict[str, Any]]:
        ordered = sorted(principals, key=lambda p: (p.type, p.name))
        return [principal.to_wire() for principal in ordered]
