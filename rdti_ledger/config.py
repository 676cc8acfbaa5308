"""Run settings: fixed column names and business constants with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

KEY_COLUMN = "Work item key"
PARENT_COLUMN = "Parent"
LINKED_COLUMN = "Linked work items"
WORK_TYPE_COLUMN = "Work type"
ACTIVITY_COLUMN = "R&DTI Activity"
DURATION_COLUMN = "Work Hours in Progress"
ASSIGNEE_COLUMN = "Assignee"
MOB_COLUMN = "Mob"
SUM_WIP_COLUMN = "Sum of WIP hours"

ACTIVITY_KEY_PREFIX = "MAP-"
ACTIVITY_WORK_TYPE = "Idea"
UNASSIGNED_PLACEHOLDER = "Unassigned"
SUPPORT_TAG = "Platform"
ROLE = "Employee"
PHASE = "Development"
ACTIVITY_TYPE_CORE = "Core"
ACTIVITY_TYPE_SUPPORT = "Support"

RESULTS_SHEET = "Results"
TRANSFORMED_SHEET = "Transformed Data"
SUMMARY_SHEET = "Project Summary"
CONTRIBUTOR_HEADERS: list[str] = ["Project", "Who", "Role", "Activity Type", "Hours/Cost", "Phase", "Work Item"]

DEFAULT_INPUT_FILE = "input.xlsx"
DEFAULT_OUTPUT_FILE = "output_with_rdti.xlsx"
DEFAULT_HOURS_PER_DAY = 8.0
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def duration_units(hours_per_day: float = DEFAULT_HOURS_PER_DAY) -> dict[str, float]:
    return {"d": hours_per_day, "h": 1.0, "m": 1.0 / 60.0}


@dataclass(frozen=True)
class ColumnMap:
    key: str = KEY_COLUMN
    parent: str = PARENT_COLUMN
    linked: str = LINKED_COLUMN
    work_type: str = WORK_TYPE_COLUMN
    activity: str = ACTIVITY_COLUMN
    duration: str = DURATION_COLUMN
    assignee: str = ASSIGNEE_COLUMN
    mob: str = MOB_COLUMN
    sum_wip: str = SUM_WIP_COLUMN


@dataclass(frozen=True)
class LedgerSettings:
    """Everything the core algorithms and the Excel adapters need for one run."""

    input_path: Path = Path(DEFAULT_INPUT_FILE)
    output_path: Path = Path(DEFAULT_OUTPUT_FILE)
    columns: ColumnMap = field(default_factory=ColumnMap)
    units: Mapping[str, float] = field(default_factory=duration_units)
    activity_key_prefix: str = ACTIVITY_KEY_PREFIX
    activity_work_type: str = ACTIVITY_WORK_TYPE
    unassigned_placeholder: str = UNASSIGNED_PLACEHOLDER
    support_tag: str = SUPPORT_TAG
    role: str = ROLE
    phase: str = PHASE
    log_level: str = "INFO"

    def activity_type_for(self, tag: str) -> str:
        return ACTIVITY_TYPE_SUPPORT if tag == self.support_tag else ACTIVITY_TYPE_CORE


def _hours_per_day(environ: Mapping[str, str]) -> float:
    raw = environ.get("RDTI_HOURS_PER_DAY", str(DEFAULT_HOURS_PER_DAY))
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid RDTI_HOURS_PER_DAY: {raw}") from exc
    if value <= 0:
        raise ValueError(f"RDTI_HOURS_PER_DAY must be positive, got {value}")
    return value


def _log_level(environ: Mapping[str, str]) -> str:
    level = environ.get("RDTI_LOG_LEVEL", "INFO").strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"RDTI_LOG_LEVEL must be one of {list(LOG_LEVELS)}, got {level!r}")
    return level


def load_settings(environ: Mapping[str, str] | None = None, base_dir: Path | None = None) -> LedgerSettings:
    env = os.environ if environ is None else environ
    root = Path.cwd() if base_dir is None else base_dir
    input_path = Path(env.get("RDTI_INPUT_PATH") or root / DEFAULT_INPUT_FILE)
    output_path = Path(env.get("RDTI_OUTPUT_PATH") or root / DEFAULT_OUTPUT_FILE)
    return LedgerSettings(
        input_path=input_path,
        output_path=output_path,
        units=duration_units(_hours_per_day(env)),
        log_level=_log_level(env),
    )
