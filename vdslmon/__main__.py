"""Entry point for ``python -m vdslmon``.

Examples:
  vdslmon serve -p 8080 --ip 192.168.1.1 --community public

  vdslmon show --ip 192.168.1.1
"""

from __future__ import annotations

import os
import sys
from importlib.metadata import PackageNotFoundError, version

from tabulate import tabulate

from vdslmon import __version__, configure_logging
from vdslmon import glogger


def _print_startup_banner() -> None:
    startup_rows = [
        ["version", __version__],
        ["python", sys.version.split()[0]],
    ]
    for dist in ("pysnmp", "pyasn1"):
        try:
            startup_rows.append([dist, version(dist)])
        except PackageNotFoundError:
            startup_rows.append([dist, "not installed"])
    startup_rows.append(["log level", os.getenv("LOGURU_LEVEL", "DEBUG")])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "vdslmon starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point: configure logging, then hand over to the CLI."""
    configure_logging()
    _print_startup_banner()

    from vdslmon.cli import main as cli_main

    cli_main(sys.argv[1:])


if __name__ == "__main__":
    main()
