"""Tests for vdslmon.resolver.IndexResolver."""

from __future__ import annotations

import pytest

from vdslmon.exceptions import DiscoveryError, IfIndexNotFoundError, SnmpError, TerminationUnitError
from vdslmon.models import RawValue
from vdslmon.resolver import IndexResolver


class TestResolveIfIndex:
    """Test ifType table discovery."""

    def test_finds_vdsl2_interface(self, mock_snmp_client):
        client = mock_snmp_client()
        assert IndexResolver(client).resolve_if_index() == "4"
        client.bulk_walk.assert_called_once_with(".1.3.6.1.2.1.2.2.1.3")

    def test_first_match_wins(self, mock_snmp_client):
        client = mock_snmp_client(
            if_types=[
                (".1.3.6.1.2.1.2.2.1.3.7", RawValue.integer(251)),
                (".1.3.6.1.2.1.2.2.1.3.8", RawValue.integer(251)),
            ]
        )
        assert IndexResolver(client).resolve_if_index() == "7"

    def test_no_vdsl2_interface(self, mock_snmp_client):
        """A table without type 251 is fatal."""
        client = mock_snmp_client(if_types=[(".1.3.6.1.2.1.2.2.1.3.1", RawValue.integer(6))])
        with pytest.raises(IfIndexNotFoundError):
            IndexResolver(client).resolve_if_index()

    def test_ignores_non_integer_values(self, mock_snmp_client):
        client = mock_snmp_client(if_types=[(".1.3.6.1.2.1.2.2.1.3.1", RawValue.octets(b"251"))])
        with pytest.raises(IfIndexNotFoundError):
            IndexResolver(client).resolve_if_index()

    def test_walk_error(self, mock_snmp_client):
        client = mock_snmp_client()
        client.bulk_walk.side_effect = SnmpError("timeout")
        with pytest.raises(IfIndexNotFoundError, match="timeout"):
            IndexResolver(client).resolve_if_index()


class TestResolveTerminationUnits:
    """Test xTU unit id lookup."""

    def test_returns_units_by_role(self, mock_snmp_client):
        client = mock_snmp_client()
        units = IndexResolver(client).resolve_termination_units("4")
        assert units == {"upstream": "1", "downstream": "2"}

    def test_single_batched_get(self, mock_snmp_client):
        client = mock_snmp_client()
        IndexResolver(client).resolve_termination_units("4")
        client.get.assert_called_once_with(
            [
                ".1.3.6.1.2.1.10.251.1.2.2.1.1.4.1",
                ".1.3.6.1.2.1.10.251.1.2.2.1.1.4.2",
            ]
        )

    def test_get_error(self, mock_snmp_client):
        client = mock_snmp_client(fail_get_when=lambda oids: True)
        with pytest.raises(TerminationUnitError):
            IndexResolver(client).resolve_termination_units("4")

    def test_wrong_type(self, mock_snmp_client):
        client = mock_snmp_client(
            values={
                ".1.3.6.1.2.1.10.251.1.2.2.1.1.4.1": RawValue.integer(1),
                ".1.3.6.1.2.1.10.251.1.2.2.1.1.4.2": RawValue.absent("NoSuchInstance"),
            }
        )
        with pytest.raises(TerminationUnitError, match="NoSuchInstance"):
            IndexResolver(client).resolve_termination_units("4")

    def test_is_a_discovery_error(self):
        assert issubclass(TerminationUnitError, DiscoveryError)
        assert issubclass(IfIndexNotFoundError, DiscoveryError)


class TestResolvePppAddress:
    """Test ipAdEntIfIndex lookup."""

    def test_finds_address(self, mock_snmp_client):
        client = mock_snmp_client()
        assert IndexResolver(client).resolve_ppp_address("4") == "203.0.113.7"
        client.walk.assert_called_once_with(".1.3.6.1.2.1.4.20.1.2")

    def test_not_found(self, mock_snmp_client):
        client = mock_snmp_client()
        assert IndexResolver(client).resolve_ppp_address("99") == "(not found)"

    def test_walk_error_degrades(self, mock_snmp_client):
        """A failed walk is reported inline, not raised."""
        client = mock_snmp_client()
        client.walk.side_effect = SnmpError("request timed out")
        assert IndexResolver(client).resolve_ppp_address("4") == "(error: request timed out)"

    def test_skips_non_integer_entries(self, mock_snmp_client):
        client = mock_snmp_client(
            ip_rows=[
                (".1.3.6.1.2.1.4.20.1.2.10.0.0.1", RawValue.octets(b"4")),
                (".1.3.6.1.2.1.4.20.1.2.10.0.0.2", RawValue.integer(4)),
            ]
        )
        assert IndexResolver(client).resolve_ppp_address("4") == "10.0.0.2"


class TestResolve:
    """Test the combined resolve() step."""

    def test_builds_line_identity(self, mock_snmp_client, line_identity):
        client = mock_snmp_client()
        assert IndexResolver(client).resolve() == line_identity()

    def test_propagates_fatal_errors(self, mock_snmp_client):
        client = mock_snmp_client(if_types=[])
        with pytest.raises(IfIndexNotFoundError):
            IndexResolver(client).resolve()
        client.get.assert_not_called()
