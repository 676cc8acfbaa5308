"""Application layer package."""

from .contributor_service import aggregate_contributors, resolve_contributors
from .effort_service import aggregate_effort
from .ledger_service import LedgerBuild, LedgerRunResult, build_ledger, run_ledger_pipeline
from .tag_service import TagPropagationResult, propagate_activity_tags

__all__ = [
    "propagate_activity_tags",
    "TagPropagationResult",
    "aggregate_effort",
    "resolve_contributors",
    "aggregate_contributors",
    "build_ledger",
    "run_ledger_pipeline",
    "LedgerBuild",
    "LedgerRunResult",
]
