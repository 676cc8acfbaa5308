"""Application service for the per-contributor ledger."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from rdti_ledger.application.effort_service import countable_links, require_tagged, rollup_targets
from rdti_ledger.config import LedgerSettings
from rdti_ledger.domain.duration import is_assigned, parse_hours
from rdti_ledger.domain.hierarchy import HierarchyIndex
from rdti_ledger.domain.models import AggregatedContributor, ContributorRecord, Ticket
from rdti_ledger.domain.store import TaggedTicketStore

logger = logging.getLogger(__name__)


def ticket_contributors(ticket: Ticket, tag: str, settings: LedgerSettings) -> List[ContributorRecord]:
    if ticket.mob:
        people: Sequence[str] = ticket.mob
    elif is_assigned(ticket, settings.unassigned_placeholder):
        people = [ticket.assignee]
    else:
        return []

    # Every mob member is credited the full logged duration.
    hours = parse_hours(ticket.duration_raw, settings.units)
    return [
        ContributorRecord(
            activity=tag,
            person=person,
            role=settings.role,
            activity_type=settings.activity_type_for(tag),
            hours=hours,
            phase=settings.phase,
            source_work_item=ticket.key,
        )
        for person in people
    ]


def subtree_contributors(root: Ticket, tag: str, index: HierarchyIndex, settings: LedgerSettings) -> List[ContributorRecord]:
    records: List[ContributorRecord] = []
    for ticket in [root, *index.descendants(root)]:
        records.extend(ticket_contributors(ticket, tag, settings))
    return records


def resolve_contributors(
    store: TaggedTicketStore,
    index: HierarchyIndex,
    settings: LedgerSettings,
) -> List[ContributorRecord]:
    """Contributor records for every tagged activity ticket, in table order.

    Zero-hour records are kept here; the sheet builders drop them.
    """
    tagged = require_tagged(store)
    bound = index.rebind(tagged)
    records: List[ContributorRecord] = []
    for activity in rollup_targets(tagged, settings):
        for linked in countable_links(activity, bound, settings):
            records.extend(subtree_contributors(linked, activity.activity_tag, bound, settings))
    logger.info("Resolved %d contributor records", len(records))
    return records


def billable(records: Iterable[ContributorRecord]) -> List[ContributorRecord]:
    return [record for record in records if record.hours > 0]


def aggregate_contributors(records: Iterable[ContributorRecord]) -> List[AggregatedContributor]:
    """Fold records into one row per ``(activity, person)``, sorted by activity then person."""
    grouped: Dict[tuple[str, str], AggregatedContributor] = {}
    for record in records:
        group_key = (record.activity, record.person)
        group = grouped.get(group_key)
        if group is None:
            group = AggregatedContributor.start(record)
            grouped[group_key] = group
        group.add(record)
    return [grouped[group_key] for group_key in sorted(grouped)]
