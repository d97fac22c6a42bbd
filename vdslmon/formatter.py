"""Turn fetched raw values into display rows."""

from __future__ import annotations

from vdslmon.catalog import MetricDescriptor
from vdslmon.fetcher import FetchResult
from vdslmon.models import MetricRow, RawValue

UNEXPECTED_OID_COUNT = "(error: unexpected oid count)"


def format_metric(descriptor: MetricDescriptor, oids: list[str], values: dict[str, RawValue]) -> str:
    """Format one descriptor as ``"a / b unit"`` or ``"a unit"``."""
    formatted = [descriptor.formatter(values.get(oid, RawValue.absent())) for oid in oids]
    if len(formatted) == 2:
        return f"{formatted[0]} / {formatted[1]} {descriptor.unit}"
    if len(formatted) == 1:
        return f"{formatted[0]} {descriptor.unit}"
    return UNEXPECTED_OID_COUNT


def format_rows(result: FetchResult) -> list[MetricRow]:
    return [
        MetricRow(label=descriptor.description, value=format_metric(descriptor, oids, result.values))
        for descriptor, oids in result.oids_by_metric
    ]
