"""RDTI ledger pipeline: load → propagate → roll up → resolve contributors → write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Mapping, Sequence

import polars as pl

from rdti_ledger.application.contributor_service import aggregate_contributors, billable, resolve_contributors
from rdti_ledger.application.effort_service import aggregate_effort, rollup_targets
from rdti_ledger.application.reporting.sheets import results_sheet_df, summary_sheet_df, transformed_sheet_df
from rdti_ledger.application.tag_service import propagate_activity_tags
from rdti_ledger.config import RESULTS_SHEET, SUMMARY_SHEET, TRANSFORMED_SHEET, LedgerSettings, load_settings
from rdti_ledger.domain.hierarchy import HierarchyIndex
from rdti_ledger.domain.store import TaggedTicketStore, load
from rdti_ledger.infrastructure.excel_repository import load_ticket_table, save_output_workbook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerBuild:
    store: TaggedTicketStore
    sheets: Dict[str, pl.DataFrame]
    tags_assigned: int
    activities_rolled_up: int
    transformed_rows: int
    summary_rows: int


@dataclass
class LedgerRunResult:
    output_path: Path
    saved: bool = False
    error: str = ""
    build: LedgerBuild | None = None
    stage_timings: List[tuple[str, float]] = field(default_factory=list)
    total_elapsed: float = 0.0

    @property
    def exit_code(self) -> int:
        return 0 if self.saved else 1


def build_ledger(
    rows: Sequence[Mapping[str, Any]],
    settings: LedgerSettings,
    columns: Sequence[str] = (),
) -> LedgerBuild:
    """Run the whole core over in-memory rows and return the three output sheets."""
    store = load(rows, settings, columns=columns)
    index = HierarchyIndex.build(store)

    propagation = propagate_activity_tags(store, settings, index=index)
    rolled_up = aggregate_effort(propagation.store, propagation.index, settings)

    records = resolve_contributors(rolled_up, propagation.index, settings)
    positive = billable(records)
    groups = aggregate_contributors(positive)

    sheets = {
        RESULTS_SHEET: results_sheet_df(rolled_up, settings),
        TRANSFORMED_SHEET: transformed_sheet_df(positive),
        SUMMARY_SHEET: summary_sheet_df(groups),
    }
    return LedgerBuild(
        store=rolled_up,
        sheets=sheets,
        tags_assigned=len(propagation.assigned),
        activities_rolled_up=len(rollup_targets(rolled_up, settings)),
        transformed_rows=len(positive),
        summary_rows=len(groups),
    )


def run_ledger_pipeline(settings: LedgerSettings | None = None) -> LedgerRunResult:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    run_settings = settings or load_settings()
    result = LedgerRunResult(output_path=run_settings.output_path)

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        result.stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    try:
        table = load_ticket_table(run_settings.input_path)
        _mark("load_ticket_table")
        result.build = build_ledger(table.rows, run_settings, columns=table.headers)
        _mark("build_ledger")
        result.saved, result.error = save_output_workbook(run_settings.output_path, result.build.sheets)
        _mark("save_excel")
    except (OSError, ValueError) as exc:
        logger.error("Ledger run aborted, no output written: %s", exc)
        result.saved = False
        result.error = str(exc)

    result.total_elapsed = perf_counter() - pipeline_start
    return result


def print_run_summary(result: LedgerRunResult) -> None:
    build = result.build
    if build is not None:
        print(
            "Ledger prepared: "
            f"tickets={len(build.store)}, "
            f"tags_assigned={build.tags_assigned}, "
            f"activities_rolled_up={build.activities_rolled_up}, "
            f"transformed_rows={build.transformed_rows}, "
            f"summary_rows={build.summary_rows}"
        )
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in result.stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {result.total_elapsed:.3f}s")
    if result.saved:
        print(f"Saved Excel: {result.output_path}")
    else:
        print(f"Run failed, nothing written: {result.error}")
