"""Domain models for tickets and contributor ledger rows."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from rdti_ledger.config import ColumnMap, LedgerSettings


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def split_names(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def extract_parent_key(parent_ref: str) -> str:
    """Return the key a ``"KEY title"`` parent reference points at.

    Only a key followed by a space counts; a bare key or leading blank links nothing.
    """
    head, sep, _ = parent_ref.partition(" ")
    return head if sep and head else ""


@dataclass(frozen=True)
class Ticket:
    key: str
    parent_ref: str
    parent_key: str
    linked_keys: tuple[str, ...]
    work_type: str
    activity_tag: str
    duration_raw: str
    assignee: str
    mob: tuple[str, ...]
    fields: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)
    sum_wip_hours: float | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], columns: ColumnMap) -> "Ticket":
        fields = {name: _text(value) for name, value in row.items()}
        parent_ref = fields.get(columns.parent, "")
        return cls(
            key=fields.get(columns.key, "").strip(),
            parent_ref=parent_ref,
            parent_key=extract_parent_key(parent_ref),
            linked_keys=split_names(fields.get(columns.linked, "")),
            work_type=fields.get(columns.work_type, ""),
            activity_tag=fields.get(columns.activity, ""),
            duration_raw=fields.get(columns.duration, ""),
            assignee=fields.get(columns.assignee, "").strip(),
            mob=split_names(fields.get(columns.mob, "")),
            fields=fields,
        )

    @property
    def has_tag(self) -> bool:
        return bool(self.activity_tag)

    def is_activity(self, settings: LedgerSettings) -> bool:
        return self.work_type == settings.activity_work_type and self.key.startswith(settings.activity_key_prefix)

    def with_activity_tag(self, tag: str) -> "Ticket":
        if self.activity_tag:
            return self
        return replace(self, activity_tag=tag)

    def with_sum_wip_hours(self, hours: float) -> "Ticket":
        return replace(self, sum_wip_hours=hours)


@dataclass(frozen=True)
class ContributorRecord:
    activity: str
    person: str
    role: str
    activity_type: str
    hours: float
    phase: str
    source_work_item: str

    def as_row(self) -> list[Any]:
        return [
            self.activity,
            self.person,
            self.role,
            self.activity_type,
            round(self.hours, 2),
            self.phase,
            self.source_work_item,
        ]


@dataclass
class AggregatedContributor:
    """Running totals for one ``(activity, person)`` pair."""

    activity: str
    person: str
    role: str
    activity_type: str
    phase: str
    total_hours: float = 0.0
    source_work_items: set[str] = field(default_factory=set)

    @classmethod
    def start(cls, record: ContributorRecord) -> "AggregatedContributor":
        return cls(
            activity=record.activity,
            person=record.person,
            role=record.role,
            activity_type=record.activity_type,
            phase=record.phase,
        )

    def add(self, record: ContributorRecord) -> None:
        self.total_hours += record.hours
        self.source_work_items.add(record.source_work_item)

    def as_row(self) -> list[Any]:
        return [
            self.activity,
            self.person,
            self.role,
            self.activity_type,
            round(self.total_hours, 2),
            self.phase,
            ", ".join(sorted(self.source_work_items)),
        ]
