"""Background polling that turns other clients' writes into push notifications."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler as APScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .domain.repositories.documents import DocumentStore
from .errors import StoreUnavailable

logger = logging.getLogger("studyhabits.scheduler")

POLL_JOB_ID = "document_poll"


class ChangePoller:
    """Runs ``store.poll()`` on an interval so subscribers see remote writes."""

    def __init__(self, store: DocumentStore, *, interval_seconds: float = 2.0):
        """Initialize the poller.

        Args:
            store: Document store whose subscribers should be refreshed
            interval_seconds: Seconds between polls
        """
        self.store = store
        self.interval_seconds = interval_seconds
        self.scheduler: APScheduler | None = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        if self.scheduler is not None:
            logger.warning("Poller already running")
            return

        self.scheduler = APScheduler(daemon=True)
        self.scheduler.add_job(
            func=self.poll_once,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=POLL_JOB_ID,
            name="Document change poll",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Change poller started", extra={"interval_seconds": self.interval_seconds})

    def stop(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("Change poller stopped")

    def poll_once(self) -> int:
        """Poll the store once; store failures are logged and retried next tick."""
        try:
            pushed = self.store.poll()
        except StoreUnavailable as exc:
            logger.error(f"Change poll failed: {exc}")
            return 0
        if pushed:
            logger.debug("Pushed remote changes", extra={"documents": pushed})
        return pushed


def create_poller(
    store: DocumentStore,
    *,
    interval_seconds: float = 2.0,
    auto_start: bool = False,
) -> ChangePoller:
    """Create and optionally start a change poller."""
    poller = ChangePoller(store, interval_seconds=interval_seconds)
    if auto_start:
        poller.start()
    return poller
