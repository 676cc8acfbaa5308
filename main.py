"""RDTI ledger entrypoint."""

from __future__ import annotations

import sys

from rdti_ledger.application.ledger_service import print_run_summary, run_ledger_pipeline
from rdti_ledger.config import load_settings
from rdti_ledger.infrastructure.logging_config import configure_logging


def main() -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)
    result = run_ledger_pipeline(settings)
    print_run_summary(result)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
