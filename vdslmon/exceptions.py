"""Exception hierarchy for VDSL line polling."""


class VdslMonError(Exception):
    """Base exception for all vdslmon errors."""


class SnmpError(VdslMonError):
    """SNMP request failed (timeout, transport or agent error status)."""

    def __init__(self, message: str, oids: list[str] | None = None):
        self.oids = oids or []
        super().__init__(message)


class DiscoveryError(VdslMonError):
    """Line identifiers could not be discovered; polling cannot continue."""


class IfIndexNotFoundError(DiscoveryError):
    """No VDSL2 channel interface in the ifType table."""


class TerminationUnitError(DiscoveryError):
    """xTU-C / xTU-R unit identifiers missing or not integers."""
