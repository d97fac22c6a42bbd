"""Discovery of the VDSL interface index, xTU unit ids and PPP address."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from vdslmon.exceptions import IfIndexNotFoundError, SnmpError, TerminationUnitError
from vdslmon.models import NOT_FOUND, LineIdentity, RawValue, ValueKind
from vdslmon.snmp import (
    IF_TYPE_VDSL2,
    OID_IF_TYPE,
    OID_IP_AD_ENT_IF_INDEX,
    OID_XDSL2_CH_STATUS_UNIT,
    UNIT_XTUC,
    UNIT_XTUR,
)


class SnmpClient(Protocol):
    """The subset of SnmpSession the pipeline uses."""

    def get(self, oids: list[str]) -> dict[str, RawValue]: ...

    def walk(self, oid: str) -> list[tuple[str, RawValue]]: ...

    def bulk_walk(self, oid: str) -> list[tuple[str, RawValue]]: ...


class IndexResolver:
    """Resolve the identifiers every metric OID is built from."""

    def __init__(self, client: SnmpClient) -> None:
        self.client = client

    def resolve_if_index(self) -> str:
        """Return the ifIndex of the first interface with ifType vdsl2 (251).

        Raises:
            IfIndexNotFoundError: If the walk fails or no such interface exists.
        """
        try:
            rows = self.client.bulk_walk(OID_IF_TYPE)
        except SnmpError as e:
            raise IfIndexNotFoundError(f"Failed to bulk walk ifType: {e}") from e

        for oid, raw in rows:
            if raw.kind is ValueKind.INTEGER and raw.value == IF_TYPE_VDSL2:
                if_index = oid.rsplit(".", 1)[-1]
                logger.debug(f"VDSL2 channel interface at ifIndex {if_index}")
                return if_index

        raise IfIndexNotFoundError(f"No interface with ifType {IF_TYPE_VDSL2} in {len(rows)} ifType entries")

    def resolve_termination_units(self, if_index: str) -> dict[str, str]:
        """GET the xTU-C (upstream) and xTU-R (downstream) unit ids.

        Returns:
            {"upstream": "<int>", "downstream": "<int>"}

        Raises:
            TerminationUnitError: On GET failure or a non-integer value.
        """
        oids = {
            "upstream": f"{OID_XDSL2_CH_STATUS_UNIT}.{if_index}.{UNIT_XTUC}",
            "downstream": f"{OID_XDSL2_CH_STATUS_UNIT}.{if_index}.{UNIT_XTUR}",
        }
        try:
            values = self.client.get(list(oids.values()))
        except SnmpError as e:
            raise TerminationUnitError(f"Failed to get downstream/upstream unit ids: {e}") from e

        units: dict[str, str] = {}
        for role, oid in oids.items():
            raw = values.get(oid, RawValue.absent())
            if raw.kind is not ValueKind.INTEGER:
                raise TerminationUnitError(
                    f"Failed to get {role} unit id from {oid}: unexpected type {raw.display_type}"
                )
            units[role] = str(raw.value)
        return units

    def resolve_ppp_address(self, if_index: str) -> str:
        """Return the IPv4 address bound to ``if_index``.

        Degrades to ``(not found)`` / ``(error: ...)`` instead of raising.
        """
        try:
            rows = self.client.walk(OID_IP_AD_ENT_IF_INDEX)
        except SnmpError as e:
            logger.warning(f"PPP address lookup failed: {e}")
            return f"(error: {e})"

        table_prefix = f"{OID_IP_AD_ENT_IF_INDEX}."
        for oid, raw in rows:
            if raw.kind is not ValueKind.INTEGER:
                continue
            if str(raw.value) == if_index:
                return oid.removeprefix(table_prefix)
        return NOT_FOUND

    def resolve(self) -> LineIdentity:
        """Run all three discovery steps and return a fresh LineIdentity."""
        if_index = self.resolve_if_index()
        units = self.resolve_termination_units(if_index)
        ppp_address = self.resolve_ppp_address(if_index)
        return LineIdentity(
            if_index=if_index,
            downstream_unit_id=units["downstream"],
            upstream_unit_id=units["upstream"],
            ppp_address=ppp_address,
        )
