"""CLI entry point for the VDSL status service, standalone-capable."""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from vdslmon.exceptions import DiscoveryError, SnmpError
from vdslmon.models import ServiceConfig
from vdslmon.resolver import IndexResolver
from vdslmon.snmp import HAS_PYSNMP, SnmpSession


def tcp_port(value: str) -> int:
    """argparse type: an integer in (0, 65535]."""
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from None
    if port <= 0 or port > 65535:
        raise argparse.ArgumentTypeError(f"port out of range (1-65535): {port}")
    return port


def positive_float(value: str) -> float:
    """argparse type: a float greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the VDSL status service."""
    parser = argparse.ArgumentParser(
        prog="vdslmon",
        description="Serve VDSL2 line statistics read from a modem via SNMPv2c.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "show"],
        default="serve",
        help="serve: run the HTTP status page; show: poll once and print a table (default: serve)",
    )
    parser.add_argument(
        "-p",
        "--http-port",
        type=tcp_port,
        default=8080,
        help="HTTP port (default: 8080)",
    )
    parser.add_argument(
        "--http-host",
        default="0.0.0.0",
        help="HTTP listen address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--ip",
        default="127.0.0.1",
        help="SNMP IP address of the modem (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=tcp_port,
        default=161,
        help="SNMP port (default: 161)",
    )
    parser.add_argument(
        "--community",
        default="public",
        help="SNMP community name (default: public)",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=5.0,
        help="SNMP request timeout in seconds (default: 5)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(args)


def build_config(parsed: argparse.Namespace) -> ServiceConfig:
    return ServiceConfig(
        http_port=parsed.http_port,
        http_host=parsed.http_host,
        snmp_host=parsed.ip,
        snmp_port=parsed.port,
        community=parsed.community,
        timeout=parsed.timeout,
    )


def _serve(config: ServiceConfig, session: SnmpSession) -> int:
    from vdslmon.cache import ResponseCache
    from vdslmon.page import StatusPage
    from vdslmon.server import create_server

    cache = ResponseCache(window=config.cache_window)
    server = create_server(config.http_host, config.http_port, cache, StatusPage(session))
    logger.info(f"Listening on port {config.http_port}. Press CTRL+C to exit...")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Stopped.")
    finally:
        server.server_close()
        cache.close(session.close)

    if server.fatal_error is not None:
        return 1
    return 0


def _show(session: SnmpSession) -> int:
    from vdslmon.page import StatusPage, render_terminal

    print(render_terminal(StatusPage(session).build_rows()))
    return 0


def main(args: list[str] | None = None) -> None:
    """Main entry point for the VDSL status CLI."""
    parsed = parse_args(args)

    if not parsed.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    if not HAS_PYSNMP:
        logger.error("pysnmp is required (pip install pysnmp)")
        sys.exit(1)

    config = build_config(parsed)
    session = SnmpSession(
        config.snmp_host,
        community=config.community,
        port=config.snmp_port,
        timeout=config.timeout,
        retries=config.retries,
    )

    try:
        session.connect()
    except SnmpError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        # Prerequisite check: refuse to serve if the line cannot be identified.
        identity = IndexResolver(session).resolve()
        logger.info(
            f"VDSL2 line at ifIndex {identity.if_index} "
            f"(xTU-R {identity.downstream_unit_id}, xTU-C {identity.upstream_unit_id}, PPP {identity.ppp_address})"
        )

        if parsed.command == "show":
            rc = _show(session)
        else:
            rc = _serve(config, session)
    except DiscoveryError as e:
        logger.error(f"Failed to discover VDSL line: {e}")
        rc = 1
    finally:
        session.close()

    sys.exit(rc)
