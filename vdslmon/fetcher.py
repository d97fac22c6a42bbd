"""Template expansion and the single batched GET for all metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from loguru import logger

from vdslmon.catalog import DOWNSTREAM_UNIT_ID, IF_INDEX, METRIC_CATALOG, PREFIX, UPSTREAM_UNIT_ID, MetricDescriptor
from vdslmon.exceptions import SnmpError
from vdslmon.models import LineIdentity, RawValue
from vdslmon.resolver import SnmpClient


def expand(descriptor: MetricDescriptor, identity: LineIdentity) -> list[str]:
    """Instantiate the descriptor's templates into concrete OIDs, in order."""
    oids: list[str] = []
    for template in descriptor.templates:
        oid = template.replace(PREFIX, descriptor.oid_prefix, 1)
        oid = oid.replace(IF_INDEX, identity.if_index, 1)
        oid = oid.replace(DOWNSTREAM_UNIT_ID, identity.downstream_unit_id, 1)
        oid = oid.replace(UPSTREAM_UNIT_ID, identity.upstream_unit_id, 1)
        oids.append(oid)
    return oids


@dataclass
class FetchResult:
    """Outcome of one batched fetch.

    ``values`` holds every expanded OID; OIDs the agent did not return keep
    the ABSENT placeholder. ``error`` is set when the whole GET failed.
    """

    identity: LineIdentity
    oids_by_metric: list[tuple[MetricDescriptor, list[str]]] = field(default_factory=list)
    values: dict[str, RawValue] = field(default_factory=dict)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class MetricFetcher:
    """Fetch every catalog metric with one GET."""

    def __init__(self, client: SnmpClient, catalog: Sequence[MetricDescriptor] = METRIC_CATALOG) -> None:
        self.client = client
        self.catalog = catalog

    def fetch(self, identity: LineIdentity) -> FetchResult:
        result = FetchResult(identity=identity)
        query_oids: list[str] = []
        for descriptor in self.catalog:
            oids = expand(descriptor, identity)
            result.oids_by_metric.append((descriptor, oids))
            for oid in oids:
                result.values[oid] = RawValue.absent()
                query_oids.append(oid)

        try:
            response = self.client.get(query_oids)
        except SnmpError as e:
            logger.error(f"Error fetching all OIDs: {e}")
            result.error = str(e)
            return result

        for oid, raw in response.items():
            result.values[oid] = raw

        missing = [oid for oid in query_oids if oid not in response]
        if missing:
            logger.debug(f"Agent omitted {len(missing)} of {len(query_oids)} OIDs")
        return result
