"""VDSL2 line statistics over SNMP.

Polls a modem's SNMP agent for line-quality counters and serves them as a
self-refreshing HTML status page.
"""

__version__ = "0.1.0"

import os
import sys

from loguru import logger as glogger

glogger.disable(__name__)


def configure_logging(level: str | None = None) -> None:
    """Configure a default ``loguru`` sink for the ``vdslmon`` package."""
    os.environ["LOGURU_LEVEL"] = level or os.getenv("LOGURU_LEVEL", "DEBUG")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt)
    glogger.enable(__name__)


from vdslmon.cache import ResponseCache  # noqa: E402
from vdslmon.catalog import METRIC_CATALOG, MetricDescriptor  # noqa: E402
from vdslmon.exceptions import (  # noqa: E402
    DiscoveryError,
    IfIndexNotFoundError,
    SnmpError,
    TerminationUnitError,
    VdslMonError,
)
from vdslmon.models import LineIdentity, RawValue, ServiceConfig  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "ResponseCache",
    "METRIC_CATALOG",
    "MetricDescriptor",
    "LineIdentity",
    "RawValue",
    "ServiceConfig",
    "VdslMonError",
    "SnmpError",
    "DiscoveryError",
    "IfIndexNotFoundError",
    "TerminationUnitError",
]
