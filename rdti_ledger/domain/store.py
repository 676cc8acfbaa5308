"""Record store: ordered tickets plus a key lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from rdti_ledger.config import LedgerSettings
from rdti_ledger.domain.models import Ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketStore:
    """Tickets in input order and the key → ticket mapping built from them."""

    tickets: tuple[Ticket, ...]
    by_key: Mapping[str, Ticket]
    columns: tuple[str, ...] = ()

    @classmethod
    def from_tickets(cls, tickets: Iterable[Ticket], columns: Sequence[str] = ()) -> "TicketStore":
        ordered = tuple(tickets)
        by_key: dict[str, Ticket] = {}
        for ticket in ordered:
            if not ticket.key:
                continue
            if ticket.key in by_key:
                logger.warning("Duplicate work item key %s; the later row wins lookups", ticket.key)
            by_key[ticket.key] = ticket
        return cls(tickets=ordered, by_key=by_key, columns=tuple(columns))

    def __len__(self) -> int:
        return len(self.tickets)

    def get(self, key: str) -> Ticket | None:
        return self.by_key.get(key)

    def resolve(self, keys: Iterable[str]) -> list[Ticket]:
        resolved: list[Ticket] = []
        for key in keys:
            ticket = self.by_key.get(key)
            if ticket is None:
                logger.debug("Linked work item %s not found in table", key)
                continue
            resolved.append(ticket)
        return resolved

    def map_tickets(self, func: Callable[[Ticket], Ticket], store_type: type[TicketStore] | None = None) -> TicketStore:
        """Build a new store by applying ``func`` to every ticket, keeping input order."""
        target = type(self) if store_type is None else store_type
        return target.from_tickets((func(ticket) for ticket in self.tickets), self.columns)


class TaggedTicketStore(TicketStore):
    """A store whose activity tags have been propagated."""


def load(rows: Iterable[Mapping[str, Any]], settings: LedgerSettings, columns: Sequence[str] = ()) -> TicketStore:
    tickets = [Ticket.from_row(row, settings.columns) for row in rows]
    store = TicketStore.from_tickets(tickets, columns)
    logger.info("Loaded %d tickets (%d addressable keys)", len(store), len(store.by_key))
    return store
