"""Output sheet frames: Results, Transformed Data, Project Summary."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import polars as pl

from rdti_ledger.config import CONTRIBUTOR_HEADERS, LedgerSettings
from rdti_ledger.domain.models import AggregatedContributor, ContributorRecord
from rdti_ledger.domain.store import TicketStore

HOURS_HEADER = "Hours/Cost"


def _result_columns(store: TicketStore, settings: LedgerSettings) -> List[str]:
    columns = list(store.columns)
    if not columns:
        for ticket in store.tickets:
            for name in ticket.fields:
                if name not in columns:
                    columns.append(name)
    for derived in (settings.columns.activity, settings.columns.sum_wip):
        if derived not in columns:
            columns.append(derived)
    return columns


def results_sheet_df(store: TicketStore, settings: LedgerSettings) -> pl.DataFrame:
    columns = _result_columns(store, settings)
    activity_column = settings.columns.activity
    sum_column = settings.columns.sum_wip
    schema: Dict[str, Any] = {col: pl.Utf8 for col in columns}
    schema[sum_column] = pl.Float64

    data: Dict[str, List[Any]] = {col: [] for col in columns}
    for ticket in store.tickets:
        for col in columns:
            if col == activity_column:
                data[col].append(ticket.activity_tag)
            elif col == sum_column:
                hours = ticket.sum_wip_hours
                data[col].append(None if hours is None else round(hours, 2))
            else:
                data[col].append(ticket.fields.get(col, ""))
    return pl.DataFrame(data, schema=schema)


def _contributor_schema() -> Dict[str, Any]:
    schema: Dict[str, Any] = {col: pl.Utf8 for col in CONTRIBUTOR_HEADERS}
    schema[HOURS_HEADER] = pl.Float64
    return schema


def _contributor_frame(rows: Sequence[Sequence[Any]]) -> pl.DataFrame:
    schema = _contributor_schema()
    if not rows:
        return pl.DataFrame({col: [] for col in CONTRIBUTOR_HEADERS}, schema=schema)
    return pl.DataFrame([list(row) for row in rows], schema=schema, orient="row")


def transformed_sheet_df(records: Sequence[ContributorRecord]) -> pl.DataFrame:
    return _contributor_frame([record.as_row() for record in records if record.hours > 0])


def summary_sheet_df(groups: Sequence[AggregatedContributor]) -> pl.DataFrame:
    return _contributor_frame([group.as_row() for group in groups])
