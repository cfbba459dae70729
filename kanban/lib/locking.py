"""
Lock management for the board.

Every command on a Game reads then writes shared state (registry, pool,
clock). board_lock serializes them so a host that dispatches commands from
several threads still sees each command as one atomic step.
"""

import threading
from contextlib import contextmanager


class LockTimeout(Exception):
    """Lock acquisition timed out."""
    pass


DEFAULT_TIMEOUT = 30


def new_board_lock() -> threading.RLock:
    """Create the lock a Game guards its state with.

    Re-entrant so a command may call query methods that take the same lock.
    """
    return threading.RLock()


@contextmanager
def board_lock(lock, timeout: float = DEFAULT_TIMEOUT, lock_name: str = "board lock"):
    """
    Acquire lock, yield, release on exit.

    Raises:
        LockTimeout: If the lock is not acquired within timeout seconds
    """
    if not lock.acquire(timeout=timeout):
        raise LockTimeout(f"Could not acquire {lock_name} within {timeout}s")
    try:
        yield
    finally:
        lock.release()
