"""Logging setup. Call setup_logging() once at application startup."""

import logging
import sys


def setup_logging(level: str = "WARNING") -> None:
    root = logging.getLogger()
    # Avoid duplicate handlers on repeated calls
    if root.handlers:
        root.setLevel(getattr(logging, level))
        return

    root.setLevel(getattr(logging, level))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))
    root.addHandler(handler)
