"""Shared fixtures for the vdslmon test suite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from vdslmon.exceptions import SnmpError
from vdslmon.models import LineIdentity, RawValue

IF_INDEX = "4"

# ── agent content ─────────────────────────────────────────────────────

IF_TYPE_ROWS = [
    (".1.3.6.1.2.1.2.2.1.3.1", RawValue.integer(24)),  # softwareLoopback
    (".1.3.6.1.2.1.2.2.1.3.2", RawValue.integer(6)),  # ethernetCsmacd
    (f".1.3.6.1.2.1.2.2.1.3.{IF_INDEX}", RawValue.integer(251)),  # vdsl2
    (".1.3.6.1.2.1.2.2.1.3.9", RawValue.integer(23)),  # ppp
]

IP_ROWS = [
    (".1.3.6.1.2.1.4.20.1.2.127.0.0.1", RawValue.integer(1)),
    (".1.3.6.1.2.1.4.20.1.2.192.168.1.1", RawValue.integer(2)),
    (".1.3.6.1.2.1.4.20.1.2.203.0.113.7", RawValue.integer(int(IF_INDEX))),
]

AGENT_VALUES = {
    # xdsl2ChStatusUnit: .1 -> xtuc, .2 -> xtur
    f".1.3.6.1.2.1.10.251.1.2.2.1.1.{IF_INDEX}.1": RawValue.integer(1),
    f".1.3.6.1.2.1.10.251.1.2.2.1.1.{IF_INDEX}.2": RawValue.integer(2),
    f".1.3.6.1.2.1.10.94.1.1.2.1.6.{IF_INDEX}": RawValue.octets(b"Showtime"),
    f".1.3.6.1.2.1.10.94.1.1.2.1.5.{IF_INDEX}": RawValue.integer(12),
    f".1.3.6.1.2.1.10.94.1.1.3.1.5.{IF_INDEX}": RawValue.integer(9),
    f".1.3.6.1.2.1.10.94.1.1.2.1.7.{IF_INDEX}": RawValue.integer(14),
    f".1.3.6.1.2.1.10.94.1.1.3.1.7.{IF_INDEX}": RawValue.integer(5),
    f".1.3.6.1.2.1.10.251.1.2.2.1.2.{IF_INDEX}.2": RawValue.integer(12340000, "Gauge32"),
    f".1.3.6.1.2.1.10.251.1.2.2.1.2.{IF_INDEX}.1": RawValue.integer(1234567, "Gauge32"),
    f".1.3.6.1.2.1.10.94.1.1.2.1.8.{IF_INDEX}": RawValue.integer(60000000, "Gauge32"),
    f".1.3.6.1.2.1.10.94.1.1.3.1.8.{IF_INDEX}": RawValue.integer(20000000, "Gauge32"),
    f".1.3.6.1.2.1.10.94.1.1.2.1.4.{IF_INDEX}": RawValue.integer(8),
    f".1.3.6.1.2.1.10.94.1.1.3.1.4.{IF_INDEX}": RawValue.integer(7),
    f".1.3.6.1.2.1.10.251.1.2.2.1.10.{IF_INDEX}.2": RawValue.integer(1),
    f".1.3.6.1.2.1.10.251.1.2.2.1.10.{IF_INDEX}.1": RawValue.integer(16),
    f".1.3.6.1.2.1.10.251.1.2.2.1.4.{IF_INDEX}.2": RawValue.integer(0),
    f".1.3.6.1.2.1.10.251.1.2.2.1.4.{IF_INDEX}.1": RawValue.integer(8),
    f".1.3.6.1.2.1.10.251.1.2.2.1.5.{IF_INDEX}.2": RawValue.integer(20),
    f".1.3.6.1.2.1.10.251.1.2.2.1.5.{IF_INDEX}.1": RawValue.integer(10),
    f".1.3.6.1.2.1.10.251.1.2.2.1.7.{IF_INDEX}.2": RawValue.integer(3),
    f".1.3.6.1.2.1.10.251.1.2.2.1.7.{IF_INDEX}.1": RawValue.integer(0),
}


@pytest.fixture()
def line_identity():
    """Factory fixture returning a LineIdentity with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "if_index": IF_INDEX,
            "downstream_unit_id": "2",
            "upstream_unit_id": "1",
            "ppp_address": "203.0.113.7",
        }
        defaults.update(kwargs)
        return LineIdentity(**defaults)

    return _make


@pytest.fixture()
def mock_snmp_client():
    """Factory fixture: MagicMock of SnmpSession answering from in-memory tables.

    ``get`` returns only OIDs present in ``values``; ``fail_get_when`` is a
    predicate on the requested OID list that makes ``get`` raise SnmpError.
    """

    def _make(
        if_types=None,
        ip_rows=None,
        values=None,
        fail_get_when=None,
    ):
        table = dict(AGENT_VALUES if values is None else values)
        client = MagicMock()
        client.bulk_walk.return_value = list(IF_TYPE_ROWS if if_types is None else if_types)
        client.walk.return_value = list(IP_ROWS if ip_rows is None else ip_rows)

        def _get(oids):
            if fail_get_when is not None and fail_get_when(oids):
                raise SnmpError("No SNMP response received before timeout", oids)
            return {oid: table[oid] for oid in oids if oid in table}

        client.get.side_effect = _get
        return client

    return _make
