import logging
import os
from contextlib import contextmanager

from filelock import FileLock, Timeout
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.models.counter import OrderCounter
from storefront.services.exceptions import CounterUnavailable

log = logging.getLogger(__name__)


class CounterRepository:
    """
    Monotonic named counters persisted in the database.

    SQLite has no row locks, so callers hold `locked(name)` from the
    increment until their transaction commits.
    """

    def __init__(self, db: Session, locks_dir: str = None):
        self.db = db
        self.locks_dir = locks_dir or settings.LOCKS_DIR

    @contextmanager
    def locked(self, name: str, timeout: float = 10):
        os.makedirs(self.locks_dir, exist_ok=True)
        lock = FileLock(os.path.join(self.locks_dir, f"counter_{name}.lock"))
        try:
            lock.acquire(timeout=timeout)
        except Timeout:
            log.warning("counter %s: lock not acquired within %ss", name, timeout)
            raise CounterUnavailable(f"Could not acquire counter lock for {name!r}")
        try:
            yield
        finally:
            lock.release()

    def next_value(self, name: str) -> int:
        row = (
            self.db.query(OrderCounter)
            .filter(OrderCounter.name == name)
            .with_for_update()
            .first()
        )
        if row is None:
            row = OrderCounter(name=name, value=0)
            self.db.add(row)
        row.value += 1
        self.db.flush()
        log.debug("counter %s -> %d", name, row.value)
        return row.value
