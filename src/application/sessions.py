"""
Billing session registry.

Each billing session owns one ``BillBuilder`` and therefore at most one
draft bill. Sessions live in memory; a session left idle past the
configured timeout is dropped the next time the registry is used, unless
its draft still holds items or is being finalized.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

from src.config import get_logger
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces.data_service import IDataService
from src.core.services.bill_builder import BillBuilder

logger = get_logger(__name__)

DEFAULT_IDLE_TIMEOUT = timedelta(hours=1)


class BillingSessionRegistry:
    """Maps session ids to their bill builders."""

    def __init__(
        self,
        data_service: IDataService,
        idle_timeout: timedelta = DEFAULT_IDLE_TIMEOUT,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._data_service = data_service
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: dict[str, BillBuilder] = {}
        self._last_accessed: dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> tuple[str, BillBuilder]:
        self.prune_idle()
        session_id = uuid4().hex
        builder = BillBuilder(self._data_service)
        self._sessions[session_id] = builder
        self._last_accessed[session_id] = self._clock()
        logger.info("billing_session_created", session_id=session_id)
        return session_id, builder

    def get(self, session_id: str) -> BillBuilder:
        """Return the builder for *session_id* and mark it as used.

        Raises:
            EntityNotFoundError: If the session does not exist or has expired.
        """
        self.prune_idle()
        builder = self._sessions.get(session_id)
        if builder is None:
            raise EntityNotFoundError("session", session_id)
        self._last_accessed[session_id] = self._clock()
        return builder

    def close(self, session_id: str, force: bool = False) -> None:
        """End a session, discarding its draft.

        Raises:
            EntityNotFoundError: If the session does not exist.
            DraftInProgressError: If the draft has items and ``force`` is False.
        """
        self.get(session_id).discard_draft(force=force)
        self._remove(session_id)
        logger.info("billing_session_closed", session_id=session_id)

    def prune_idle(self) -> int:
        """Drop idle sessions whose draft is missing or empty.

        Returns:
            Number of sessions removed.
        """
        cutoff = self._clock() - self._idle_timeout
        expired = [
            session_id
            for session_id, builder in self._sessions.items()
            if self._last_accessed[session_id] <= cutoff and _is_disposable(builder)
        ]
        for session_id in expired:
            self._sessions[session_id].discard_draft()
            self._remove(session_id)
            logger.info("billing_session_expired", session_id=session_id)
        return len(expired)

    def _remove(self, session_id: str) -> None:
        del self._sessions[session_id]
        del self._last_accessed[session_id]


def _is_disposable(builder: BillBuilder) -> bool:
    if builder.finalizing:
        return False
    draft = builder.draft
    return draft is None or not draft.items
