"""Console logging setup for ledger runs."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the root logger.

    Existing root handlers are left alone, so embedding applications and pytest keep
    their own configuration.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for noisy in ("fastexcel", "openpyxl"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
