"""Decision request and response documents."""

from __future__ import annotations

import json
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, field_serializer

from ..spi import SystemSecurityContext
from .grants import OpaQueryInputGrant, TrinoGrantPrincipal
from .resources import OpaModel, OpaQueryInputResource


class OpaIdentity(OpaModel):
    user: str
    groups: FrozenSet[str] = frozenset()

    @field_serializer("groups")
    def serialize_groups(self, groups: FrozenSet[str]) -> List[str]:
        return sorted(groups)


class OpaSoftwareStack(OpaModel):
    trino_version: str


class OpaQueryContext(OpaModel):
    identity: OpaIdentity
    software_stack: OpaSoftwareStack
    query_id: Optional[str] = None

    @classmethod
    def from_system_security_context(
        cls, context: SystemSecurityContext, engine_version: str
    ) -> "OpaQueryContext":
        return cls(
            identity=OpaIdentity(
                user=context.identity.user, groups=context.identity.groups
            ),
            software_stack=OpaSoftwareStack(trino_version=engine_version),
            query_id=context.query_id,
        )


class OpaQueryInputAction(OpaModel):
    operation: str
    resource: Optional[OpaQueryInputResource] = None
    target_resource: Optional[OpaQueryInputResource] = None
    filter_resources: Optional[Tuple[OpaQueryInputResource, ...]] = None
    grantee: Optional[OpaQueryInputGrant] = None
    grantor: Optional[TrinoGrantPrincipal] = None


class OpaQueryInput(OpaModel):
    """One unit of decision: who is asking, and for what."""

    context: OpaQueryContext
    action: OpaQueryInputAction

    def to_document(self) -> Dict[str, Any]:
        """Return the OPA request document wrapping this input."""
        return {"input": self.to_wire()}

    def to_request_body(self) -> bytes:
        return json.dumps(self.to_document()).encode("utf-8")


class OpaQueryResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    decision_id: Optional[str] = None
    result: StrictBool


class OpaBatchQueryResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    decision_id: Optional[str] = None
    result: List[StrictInt]
