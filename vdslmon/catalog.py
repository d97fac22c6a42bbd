"""Metric descriptors for the VDSL status page.

Each descriptor carries one template (non-directional metric) or two
templates ordered downstream, upstream (directional metric). Templates are
expanded per poll with the placeholders below.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from vdslmon.models import RawValue, ValueKind

PREFIX = "{Prefix}"
IF_INDEX = "{IfIndex}"
DOWNSTREAM_UNIT_ID = "{DownstreamUnitId}"
UPSTREAM_UNIT_ID = "{UpstreamUnitId}"

DIRECTIONAL_TEMPLATES = (
    f"{PREFIX}.{IF_INDEX}.{DOWNSTREAM_UNIT_ID}",
    f"{PREFIX}.{IF_INDEX}.{UPSTREAM_UNIT_ID}",
)
SCALAR_TEMPLATES = (f"{PREFIX}.{IF_INDEX}",)

# ── OID prefixes ───────────────────────────────────────────────────────
# ADSL-LINE-MIB adslAturPhysTable (downstream); adslAtucPhysTable (.3.1) holds upstream
OID_SNR_MARGIN = ".1.3.6.1.2.1.10.94.1.1.2.1.4"
OID_ATTENUATION = ".1.3.6.1.2.1.10.94.1.1.2.1.5"
OID_LINE_STATUS = ".1.3.6.1.2.1.10.94.1.1.2.1.6"
OID_OUTPUT_POWER = ".1.3.6.1.2.1.10.94.1.1.2.1.7"
OID_MAX_RATE = ".1.3.6.1.2.1.10.94.1.1.2.1.8"
# VDSL2-LINE-MIB xdsl2ChannelStatusTable, indexed by ifIndex and unit
OID_CURRENT_RATE = ".1.3.6.1.2.1.10.251.1.2.2.1.2"
OID_INTERLEAVE_DELAY = ".1.3.6.1.2.1.10.251.1.2.2.1.4"
OID_IMPULSE_PROTECTION = ".1.3.6.1.2.1.10.251.1.2.2.1.5"
OID_FEC_SECONDS = ".1.3.6.1.2.1.10.251.1.2.2.1.7"
OID_INTERLEAVE_DEPTH = ".1.3.6.1.2.1.10.251.1.2.2.1.10"

Formatter = Callable[[RawValue], str]


def wrong_type(raw: RawValue) -> str:
    return f"(wrong type: {raw.display_type})"


@dataclass(frozen=True)
class MetricDescriptor:
    """Static description of one row on the status page."""

    oid_prefix: str
    description: str
    unit: str
    templates: tuple[str, ...]
    formatter: Formatter

    def __post_init__(self) -> None:
        if len(self.templates) not in (1, 2):
            raise ValueError(f"{self.description}: expected 1 or 2 OID templates, got {len(self.templates)}")

    @property
    def directional(self) -> bool:
        return len(self.templates) == 2

    def with_templates(self, *templates: str) -> MetricDescriptor:
        """Return a copy using explicit templates instead of the defaults."""
        return replace(self, templates=tuple(templates))


def _default_templates(directional: bool) -> tuple[str, ...]:
    return DIRECTIONAL_TEMPLATES if directional else SCALAR_TEMPLATES


def integer_transform(transform: Callable[[int], str]) -> Formatter:
    """Wrap an ``int -> str`` transform with the wrong-type fallback."""

    def _format(raw: RawValue) -> str:
        if raw.kind is ValueKind.INTEGER and isinstance(raw.value, int):
            return transform(raw.value)
        return wrong_type(raw)

    return _format


def format_text(raw: RawValue) -> str:
    """Render an OctetString verbatim."""
    if raw.kind is ValueKind.BYTES and isinstance(raw.value, bytes):
        return raw.value.decode("utf-8", errors="replace")
    return wrong_type(raw)


def kbps(value: int) -> str:
    """bit/s -> kbit/s, truncating toward zero."""
    kilo = abs(value) // 1000
    return str(-kilo if value < 0 else kilo)


def interleave_label(value: int) -> str:
    if value == 1:
        return "Fast (1)"
    return f"Interleaved ({value})"


def formatted_integer_metric(
    prefix: str,
    description: str,
    directional: bool,
    unit: str,
    transform: Callable[[int], str],
) -> MetricDescriptor:
    return MetricDescriptor(
        oid_prefix=prefix,
        description=description,
        unit=unit,
        templates=_default_templates(directional),
        formatter=integer_transform(transform),
    )


def integer_metric(prefix: str, description: str, directional: bool, unit: str) -> MetricDescriptor:
    return formatted_integer_metric(prefix, description, directional, unit, str)


def _split_phys(column: int) -> tuple[str, str]:
    """Templates for ADSL-LINE-MIB columns split into xTU-R / xTU-C tables."""
    return (
        f".1.3.6.1.2.1.10.94.1.1.2.1.{column}.{IF_INDEX}",
        f".1.3.6.1.2.1.10.94.1.1.3.1.{column}.{IF_INDEX}",
    )


METRIC_CATALOG: tuple[MetricDescriptor, ...] = (
    MetricDescriptor(
        oid_prefix=OID_LINE_STATUS,
        description="Sync status",
        unit="",
        templates=(f"{OID_LINE_STATUS}.{IF_INDEX}",),
        formatter=format_text,
    ),
    integer_metric(OID_ATTENUATION, "Attenuation (down/up)", True, "dB").with_templates(*_split_phys(5)),
    integer_metric(OID_OUTPUT_POWER, "Output power (down/up)", True, "dBm").with_templates(*_split_phys(7)),
    formatted_integer_metric(OID_CURRENT_RATE, "Current rate (down/up)", True, "Kbps", kbps),
    formatted_integer_metric(OID_MAX_RATE, "Max rate (down/up)", True, "Kbps", kbps).with_templates(*_split_phys(8)),
    integer_metric(OID_SNR_MARGIN, "SNR margin (down/up)", True, "dB").with_templates(*_split_phys(4)),
    formatted_integer_metric(OID_INTERLEAVE_DEPTH, "Interleave depth (down/up)", True, "", interleave_label),
    integer_metric(OID_INTERLEAVE_DELAY, "Interleave delay (down/up)", True, "ms"),
    integer_metric(OID_IMPULSE_PROTECTION, "Impulse Protection (down/up)", True, "units"),
    integer_metric(OID_FEC_SECONDS, "FECS (down/up)", True, ""),
)
