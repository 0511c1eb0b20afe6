from __future__ import annotations

import logging
import sys


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Configure process-wide logging for CLI runs.

    - Default: INFO
    - --verbose: DEBUG (skipped lines, unreadable files, worker counts)
    - --quiet: WARNING

    Records go to stderr so JSON reports on stdout stay parseable.
    """

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    fmt = "slopscan: %(message)s"
    if verbose:
        fmt = "slopscan [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)
