"""OID constants and a blocking SNMPv2c session over pysnmp's asyncio API."""

from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Any, Self

from loguru import logger
from pyasn1.type import univ

from vdslmon.exceptions import SnmpError
from vdslmon.models import RawValue

# Optional pysnmp import
try:
    from pysnmp.hlapi.asyncio import (
        CommunityData,
        ContextData,
        ObjectIdentity,
        ObjectType,
        SnmpEngine,
        UdpTransportTarget,
        bulk_walk_cmd,
        get_cmd,
        walk_cmd,
    )

    HAS_PYSNMP = True
except ImportError:
    HAS_PYSNMP = False

# ── OID constants ──────────────────────────────────────────────────────
OID_IF_TYPE = ".1.3.6.1.2.1.2.2.1.3"  # IF-MIB::ifType
OID_IP_AD_ENT_IF_INDEX = ".1.3.6.1.2.1.4.20.1.2"  # IP-MIB::ipAdEntIfIndex
OID_XDSL2_CH_STATUS_UNIT = ".1.3.6.1.2.1.10.251.1.2.2.1.1"  # VDSL2-LINE-MIB::xdsl2ChStatusUnit

IF_TYPE_VDSL2 = 251
UNIT_XTUC = 1  # upstream termination unit
UNIT_XTUR = 2  # downstream termination unit


def normalize_oid(oid: str) -> str:
    """Return ``oid`` in dotted form with a single leading dot."""
    return "." + oid.strip().lstrip(".")


def _oid_text(name: Any) -> str:
    if HAS_PYSNMP and isinstance(name, ObjectIdentity):
        name = name.get_oid()
    return normalize_oid(str(name))


def to_raw_value(val: Any) -> RawValue:
    """Map a pysnmp/pyasn1 value onto the closed RawValue variant.

    Integer32 as well as Gauge32/Unsigned32/Counter32/Counter64/TimeTicks
    become INTEGER. OctetString and IpAddress become BYTES. Everything else
    (NoSuchObject, NoSuchInstance, EndOfMibView, OIDs, Null) is ABSENT.
    """
    type_name = type(val).__name__
    if isinstance(val, bool):
        return RawValue.absent(type_name)
    if isinstance(val, int):
        return RawValue.integer(val, type_name)
    if isinstance(val, (bytes, bytearray)):
        return RawValue.octets(bytes(val), type_name)
    # pyasn1 Null (and the rfc1905 exception markers) subclass OctetString
    if isinstance(val, univ.Null):
        return RawValue.absent(type_name)
    if isinstance(val, univ.Integer) and val.isValue:
        return RawValue.integer(int(val), type_name)
    if isinstance(val, univ.OctetString) and val.isValue:
        return RawValue.octets(val.asOctets(), type_name)
    return RawValue.absent(type_name)


class SnmpSession:
    """Single SNMPv2c handle to the modem.

    Wraps pysnmp's asyncio commands in blocking calls driven by a private
    event loop. Not thread-safe; callers serialise access.
    """

    def __init__(
        self,
        host: str,
        community: str = "public",
        port: int = 161,
        timeout: float = 5.0,
        retries: int = 0,
    ) -> None:
        self.host = host
        self.community = community
        self.port = port
        self.timeout = timeout
        self.retries = retries
        self._loop: asyncio.AbstractEventLoop | None = None
        self._engine: Any = None
        self._auth: Any = None
        self._target: Any = None

    # ── lifecycle ──────────────────────────────────────────────────────

    def connect(self) -> None:
        """Create the SNMP engine and UDP target. Raises SnmpError on failure."""
        if not HAS_PYSNMP:
            raise SnmpError("pysnmp is required (pip install pysnmp)")
        if self._loop is not None:
            return
        logger.info(f"Connecting to {self.host}:{self.port} (community: {self.community}) ...")
        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(self._connect())
        except Exception as e:
            self.close()
            raise SnmpError(f"Failed to connect via SNMP to {self.host}:{self.port}: {e}") from e

    async def _connect(self) -> None:
        self._engine = SnmpEngine()
        self._auth = CommunityData(self.community, mpModel=1)
        self._target = await UdpTransportTarget.create(
            (self.host, self.port),
            timeout=self.timeout,
            retries=self.retries,
        )

    def close(self) -> None:
        """Release the engine dispatcher and the event loop."""
        if self._engine is not None:
            self._engine.close_dispatcher()
            self._engine = None
        if self._loop is not None:
            self._loop.close()
            self._loop = None
        self._target = None

    def is_connected(self) -> bool:
        return self._loop is not None and self._target is not None

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.close()

    def _run(self, coro: Any) -> Any:
        if self._loop is None:
            coro.close()
            raise SnmpError(f"SNMP session to {self.host} is not connected")
        return self._loop.run_until_complete(coro)

    # ── operations ─────────────────────────────────────────────────────

    def get(self, oids: list[str]) -> dict[str, RawValue]:
        """GET all ``oids`` in one PDU, return {oid: RawValue}."""
        return self._run(self._get(oids))

    def walk(self, oid: str) -> list[tuple[str, RawValue]]:
        """GETNEXT-walk the subtree below ``oid``."""
        return self._run(self._walk(oid, bulk=False))

    def bulk_walk(self, oid: str) -> list[tuple[str, RawValue]]:
        """GETBULK-walk the subtree below ``oid``."""
        return self._run(self._walk(oid, bulk=True))

    async def _get(self, oids: list[str]) -> dict[str, RawValue]:
        tag = f" [{self.host}]"
        error_indication, error_status, error_index, var_binds = await get_cmd(
            self._engine,
            self._auth,
            self._target,
            ContextData(),
            *[ObjectType(ObjectIdentity(normalize_oid(oid).lstrip("."))) for oid in oids],
        )
        if error_indication:
            raise SnmpError(f"SNMP error{tag}: {error_indication}", oids)
        if error_status:
            raise SnmpError(f"SNMP error{tag}: {error_status.prettyPrint()} at index {error_index}", oids)
        return {_oid_text(name): to_raw_value(val) for name, val in var_binds}

    async def _walk(self, oid: str, bulk: bool) -> list[tuple[str, RawValue]]:
        tag = f" [{self.host}]"
        root = ObjectType(ObjectIdentity(normalize_oid(oid).lstrip(".")))
        if bulk:
            iterator = bulk_walk_cmd(
                self._engine,
                self._auth,
                self._target,
                ContextData(),
                0,
                25,  # nonRepeaters, maxRepetitions
                root,
                lexicographicMode=False,
            )
        else:
            iterator = walk_cmd(
                self._engine,
                self._auth,
                self._target,
                ContextData(),
                root,
                lexicographicMode=False,
            )

        results: list[tuple[str, RawValue]] = []
        async for error_indication, error_status, _, var_binds in iterator:
            if error_indication:
                raise SnmpError(f"SNMP walk error{tag} on {oid}: {error_indication}", [oid])
            if error_status:
                raise SnmpError(f"SNMP walk error{tag} on {oid}: {error_status.prettyPrint()}", [oid])
            for name, val in var_binds:
                results.append((_oid_text(name), to_raw_value(val)))
        logger.debug(f"Walked {oid}{tag}: {len(results)} entries")
        return results
