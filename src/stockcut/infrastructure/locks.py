"""Keyed mutual exclusion with optional leases.

Locks are identified by a string key and owned by a token chosen by the
caller. A lease (TTL) bounds how long a crashed holder can block others:
once it expires, the next acquirer takes the lock over.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator
from uuid import uuid4

from stockcut.domain.exceptions import LockUnavailable

logger = logging.getLogger(__name__)


@dataclass
class _Lease:
    """Current holder of a key."""

    owner: str
    expires_at: float | None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class InMemoryLockService:
    """Process-local lock service.

    Suitable for a single server process. Deployments with several
    processes need an implementation backed by a shared store with the
    same interface.

    Attributes:
        lease_seconds: Lease length for new locks, or None for no expiry.
    """

    def __init__(
        self,
        lease_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the lock service.

        Args:
            lease_seconds: Lease length; None disables expiry.
            clock: Monotonic time source, replaceable in tests.
        """
        if lease_seconds is not None and lease_seconds <= 0:
            raise ValueError("Lease must be positive")
        self.lease_seconds = lease_seconds
        self._clock = clock
        self._leases: dict[str, _Lease] = {}
        self._condition = threading.Condition()

    def acquire(
        self,
        key: str,
        owner: str,
        blocking: bool = False,
        timeout: float | None = None,
    ) -> bool:
        """Try to take the lock for a key.

        Args:
            key: Lock key.
            owner: Token identifying the holder; needed to release.
            blocking: Wait for the lock instead of failing immediately.
            timeout: Maximum seconds to wait when blocking; None waits forever.

        Returns:
            True if the lock is now held by ``owner``.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            while True:
                lease = self._leases.get(key)
                if lease is None:
                    break
                if lease.expired(self._clock()):
                    logger.warning(
                        "Lease on %s held by %s expired; handing over to %s",
                        key,
                        lease.owner,
                        owner,
                    )
                    break
                if not blocking:
                    return False
                if deadline is None:
                    self._condition.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False
                    self._condition.wait(remaining)

            expires_at = (
                None if self.lease_seconds is None else self._clock() + self.lease_seconds
            )
            self._leases[key] = _Lease(owner=owner, expires_at=expires_at)
            return True

    def release(self, key: str, owner: str) -> bool:
        """Release a lock held by ``owner``.

        Returns:
            False if the lock was not held by ``owner``, for example because
            its lease expired and another caller took it over.
        """
        with self._condition:
            lease = self._leases.get(key)
            if lease is None or lease.owner != owner:
                logger.warning("Release of %s by %s ignored; not the holder", key, owner)
                return False
            del self._leases[key]
            self._condition.notify_all()
            return True

    def is_locked(self, key: str) -> bool:
        """True if a live (unexpired) lease exists for the key."""
        with self._condition:
            lease = self._leases.get(key)
            return lease is not None and not lease.expired(self._clock())

    @contextmanager
    def hold(
        self,
        key: str,
        owner: str | None = None,
        blocking: bool = False,
        timeout: float | None = None,
    ) -> Iterator[str]:
        """Hold a lock for the duration of a ``with`` block.

        The lock is released on every exit path, including exceptions.

        Yields:
            The owner token.

        Raises:
            LockUnavailable: If the lock could not be acquired.
        """
        token = owner or uuid4().hex
        if not self.acquire(key, token, blocking=blocking, timeout=timeout):
            raise LockUnavailable(key)
        try:
            yield token
        finally:
            self.release(key, token)
