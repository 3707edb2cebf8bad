"""
The Faucet Time Sources

Operations read "now" from a clock owned by the host. Timestamps are
whole seconds; the host never hands out a timestamp smaller than one it
already handed out.
"""

from __future__ import annotations
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import ntplib

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Source of the current timestamp in seconds."""

    @abstractmethod
    def now(self) -> int: ...


class ManualClock(Clock):
    """Clock that only moves when told to. Used by tests and the demo node."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"Clock cannot move backwards: {timestamp} < {self._now}")
        self._now = timestamp


class SystemClock(Clock):
    """Local wall clock, held back while the system time steps backwards."""

    def __init__(self):
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, int(time.time()))
        return self._last


class NtpClock(Clock):
    """
    Wall clock corrected by an NTP offset.

    The offset is refreshed every `refresh_interval_sec`. When a refresh
    fails the last known offset is kept.
    """

    def __init__(
        self,
        host: str = "pool.ntp.org",
        timeout_sec: float = 2.0,
        refresh_interval_sec: int = 60,
    ):
        self.host = host
        self.timeout_sec = timeout_sec
        self.refresh_interval_sec = refresh_interval_sec
        self._client = ntplib.NTPClient()
        self._offset = 0.0
        self._last_sync: Optional[float] = None
        self._last = 0

    def sync(self) -> bool:
        """
        Query the NTP server and update the offset.

        Returns:
            True if the offset was updated
        """
        self._last_sync = time.monotonic()
        try:
            response = self._client.request(self.host, version=4, timeout=self.timeout_sec)
        except (ntplib.NTPException, OSError) as e:
            logger.warning(f"NTP query to {self.host} failed, keeping offset {self._offset:.3f}s: {e}")
            return False

        self._offset = response.offset
        logger.debug(f"NTP offset from {self.host}: {self._offset:.3f}s")
        return True

    def now(self) -> int:
        if self._last_sync is None or time.monotonic() - self._last_sync >= self.refresh_interval_sec:
            self.sync()
        # Offset corrections must not move time backwards
        self._last = max(self._last, int(time.time() + self._offset))
        return self._last

    @property
    def offset(self) -> float:
        return self._offset
