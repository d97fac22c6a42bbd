"""Pydantic models and enums for VDSL line polling."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NOT_FOUND = "(not found)"


class ValueKind(str, Enum):
    """Tag of a raw SNMP value."""

    INTEGER = "integer"
    BYTES = "bytes"
    ABSENT = "absent"


class RawValue(BaseModel):
    """Value returned by the agent for one OID.

    Signed and unsigned SNMP integer types both land in ``INTEGER``; the
    original SNMP type name is kept in ``type_name`` for error messages.
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    value: int | bytes | None = None
    type_name: str = ""

    @classmethod
    def integer(cls, value: int, type_name: str = "Integer32") -> RawValue:
        return cls(kind=ValueKind.INTEGER, value=int(value), type_name=type_name)

    @classmethod
    def octets(cls, value: bytes, type_name: str = "OctetString") -> RawValue:
        return cls(kind=ValueKind.BYTES, value=bytes(value), type_name=type_name)

    @classmethod
    def absent(cls, type_name: str = "absent") -> RawValue:
        return cls(kind=ValueKind.ABSENT, value=None, type_name=type_name)

    @property
    def display_type(self) -> str:
        return self.type_name or self.kind.value


class LineIdentity(BaseModel):
    """Identifiers of the DSL line, re-resolved on every poll."""

    model_config = ConfigDict(frozen=True)

    if_index: str
    downstream_unit_id: str
    upstream_unit_id: str
    ppp_address: str = NOT_FOUND


class MetricRow(BaseModel):
    """One ``<dt>/<dd>`` pair on the status page."""

    label: str
    value: str


class ServiceConfig(BaseModel):
    """Runtime configuration assembled from the command line."""

    http_port: int = Field(default=8080, gt=0, le=65535)
    http_host: str = "0.0.0.0"
    snmp_host: str = "127.0.0.1"
    snmp_port: int = Field(default=161, gt=0, le=65535)
    community: str = "public"
    timeout: float = Field(default=5.0, gt=0)
    retries: int = Field(default=0, ge=0)
    cache_window: float = Field(default=0.5, ge=0)


@dataclass(frozen=True)
class CachedPage:
    """Rendered response plus the monotonic time it was produced."""

    content: str
    content_type: str
    timestamp: float
