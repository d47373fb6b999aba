"""Single owner of the current Snapshot.

Refreshes take a ticket before they fetch and publish afterwards; a result is published
only when no refresh that started later has already published, so the last started
refresh wins and a superseded one is discarded once it completes.
"""

import itertools
import logging

from pairwatch.domain.models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotHolder:
    def __init__(self) -> None:
        self._snapshot = Snapshot.empty()
        self._tickets = itertools.count(1)
        self._published_ticket = 0

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    def __call__(self) -> Snapshot:
        return self._snapshot

    def next_ticket(self) -> int:
        return next(self._tickets)

    def publish(self, snapshot: Snapshot, ticket: int) -> bool:
        if ticket < self._published_ticket:
            logger.info(
                "Discarding snapshot for source %s: superseded by a newer refresh", snapshot.source_id
            )
            return False
        self._snapshot = snapshot
        self._published_ticket = ticket
        return True

    def clear(self) -> None:
        self._snapshot = Snapshot.empty()
