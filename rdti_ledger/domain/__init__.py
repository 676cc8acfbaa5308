"""Domain layer package."""

from .duration import parse_hours, people_count
from .hierarchy import HierarchyCycleError, HierarchyIndex
from .models import AggregatedContributor, ContributorRecord, Ticket
from .store import TaggedTicketStore, TicketStore, load

__all__ = [
    "Ticket",
    "ContributorRecord",
    "AggregatedContributor",
    "TicketStore",
    "TaggedTicketStore",
    "load",
    "HierarchyIndex",
    "HierarchyCycleError",
    "parse_hours",
    "people_count",
]
