"""Per-owner atomic sections.

``atomically(owner_id)`` serializes every mutation that touches one owner's
cart, orders and saved addresses. The owner's lock is taken first and a
protean UnitOfWork is opened inside it. A command handler's own UnitOfWork
joins the one opened here, so the lock is only released after the whole
command has committed or rolled back. Mutations of different owners proceed
in parallel.

``dispatch(command)`` is how the API and other callers run a state-changing
command: synchronously, inside ``atomically`` for the command's owner.

The locks are process-local. Deployments running several worker processes
against one database must rely on the database for cross-process exclusion.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

_owner_locks: dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


def _lock_for(owner_id) -> threading.RLock:
    key = str(owner_id)
    with _registry_lock:
        lock = _owner_locks.get(key)
        if lock is None:
            lock = _owner_locks[key] = threading.RLock()
        return lock


@contextmanager
def atomically(owner_id) -> Iterator[None]:
    """Run the enclosed block exclusively for ``owner_id`` inside one unit of work."""
    with _lock_for(owner_id):
        with UnitOfWork():
            yield


def dispatch(command, owner_id=None):
    """Process ``command`` inside ``atomically`` and return the handler's result.

    ``owner_id`` defaults to the command's own ``owner_id``. Commands that only
    name an order (admin overrides) pass the order's owner explicitly.
    """
    with atomically(owner_id if owner_id is not None else command.owner_id):
        return current_domain.process(command, asynchronous=False)
