"""HTML and terminal renderers plus the poll-and-render pipeline."""

from __future__ import annotations

import html

from tabulate import tabulate

from vdslmon.fetcher import MetricFetcher
from vdslmon.formatter import format_rows
from vdslmon.models import MetricRow
from vdslmon.resolver import IndexResolver, SnmpClient

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
REFRESH_SECONDS = 1

_HTML_HEAD = f"""<!DOCTYPE html><html><head>
  <meta http-equiv="refresh" content="{REFRESH_SECONDS}">
  <title>VDSL Statistics</title></head><body><dl>"""
_HTML_TAIL = "</dl></body></html>"


def render_html(rows: list[MetricRow]) -> str:
    """Render rows as a ``<dl>`` on a page that reloads itself every second."""
    parts = [_HTML_HEAD]
    for row in rows:
        parts.append(f"<dt>{html.escape(row.label)}</dt><dd>{html.escape(row.value)}</dd>")
    parts.append(_HTML_TAIL)
    return "".join(parts)


def render_terminal(rows: list[MetricRow]) -> str:
    return tabulate([[row.label, row.value] for row in rows], headers=["Metric", "Value"], tablefmt="simple")


class StatusPage:
    """Resolve the line, fetch all metrics and build the page rows."""

    def __init__(self, client: SnmpClient) -> None:
        self.resolver = IndexResolver(client)
        self.fetcher = MetricFetcher(client)

    def build_rows(self) -> list[MetricRow]:
        """Run one full poll.

        Raises:
            DiscoveryError: If the ifIndex or unit ids cannot be resolved.
        """
        identity = self.resolver.resolve()
        rows = [MetricRow(label="PPP IP Address", value=identity.ppp_address)]

        result = self.fetcher.fetch(identity)
        if result.failed:
            rows.append(MetricRow(label="Status", value="SNMP Error"))
        rows.extend(format_rows(result))
        return rows

    def render(self) -> tuple[str, str]:
        return render_html(self.build_rows()), HTML_CONTENT_TYPE
