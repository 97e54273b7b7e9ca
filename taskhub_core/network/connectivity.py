# =============================================================================
# taskhub_core/network/connectivity.py
# Connectivity Probe: pre-flight network check before remote writes
# =============================================================================
"""
ConnectivityProbe answers one question: can we reach Supabase right now?

Features:
- One-shot ``is_connected()`` check that never raises
- Connection state with status history (last check, last online, failures)
- Callbacks on status change (drives a "no connection" banner)
- Optional background monitoring task

It does not retry or back off; it only advises callers before they call
the gateway.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from taskhub_core.config import Settings, get_settings
from taskhub_core.logging import get_logger

logger = get_logger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"           # Internet + Supabase reachable
    OFFLINE = "offline"         # No connectivity
    DEGRADED = "degraded"       # Internet OK but Supabase unavailable
    CHECKING = "checking"       # Currently checking status
    UNKNOWN = "unknown"         # Initial state


@dataclass
class ConnectionState:
    """Current connection state with metadata."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    internet_available: bool = False
    supabase_available: bool = False
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None


DEFAULT_HOSTS: Tuple[Tuple[str, int], ...] = (
    ("8.8.8.8", 53),          # Google DNS
    ("1.1.1.1", 53),          # Cloudflare DNS
    ("208.67.222.222", 53),   # OpenDNS
)


class ConnectivityProbe:
    """
    Network reachability check for Supabase.

    Usage:
        probe = ConnectivityProbe()
        if not await probe.is_connected():
            raise ConnectivityError(...)
    """

    CHECK_INTERVAL_ONLINE = 30      # Seconds between checks when online
    CHECK_INTERVAL_OFFLINE = 10     # Seconds between checks when offline

    def __init__(
        self,
        settings: Optional[Settings] = None,
        hosts: Sequence[Tuple[str, int]] = DEFAULT_HOSTS,
    ):
        self._settings = settings or get_settings()
        self._hosts = tuple(hosts)
        self._state = ConnectionState()
        self._callbacks: List[Callable[[ConnectionState], None]] = []
        self._monitor_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def is_online(self) -> bool:
        return self._state.status == ConnectionStatus.ONLINE

    async def is_connected(self) -> bool:
        """
        Run a fresh check and report whether Supabase is reachable.

        Never raises; any failure counts as "not connected".
        """
        try:
            state = await self.check_connection()
        except Exception as e:
            logger.error(f"Connectivity check failed: {e}")
            return False
        return state.status == ConnectionStatus.ONLINE

    async def check_connection(self) -> ConnectionState:
        """
        Perform a connection check and update state.

        Returns:
            Updated ConnectionState
        """
        old_status = self._state.status
        self._state.status = ConnectionStatus.CHECKING
        self._state.last_check = datetime.now()

        internet_ok = await self._check_internet()
        self._state.internet_available = internet_ok

        supabase_ok = False
        if internet_ok:
            supabase_ok = await self._check_supabase()
        self._state.supabase_available = supabase_ok

        if internet_ok and supabase_ok:
            self._state.status = ConnectionStatus.ONLINE
            self._state.last_online = datetime.now()
            self._state.consecutive_failures = 0
            self._state.error_message = None
        elif internet_ok:
            self._state.status = ConnectionStatus.DEGRADED
            self._state.consecutive_failures += 1
        else:
            self._state.status = ConnectionStatus.OFFLINE
            self._state.consecutive_failures += 1

        if old_status != self._state.status:
            logger.info(f"Connection status changed: {old_status.value} -> {self._state.status.value}")
            self._notify_callbacks()

        return self._state

    async def _can_connect(self, host: str, port: int) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self._settings.connection_timeout,
            )
        except (OSError, asyncio.TimeoutError):
            return False
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True

    async def _check_internet(self) -> bool:
        """Check internet connectivity by reaching well-known DNS hosts."""
        for host, port in self._hosts:
            if await self._can_connect(host, port):
                return True
        return False

    async def _check_supabase(self) -> bool:
        """Check that the configured Supabase host accepts connections."""
        if not self._settings.supabase_url:
            # Nothing configured to reach
            return True

        parsed = urlparse(self._settings.supabase_url)
        if not parsed.hostname:
            self._state.error_message = f"Invalid Supabase URL: {self._settings.supabase_url}"
            return False

        port = parsed.port or (443 if parsed.scheme != "http" else 80)
        ok = await self._can_connect(parsed.hostname, port)
        if not ok:
            self._state.error_message = f"Supabase host {parsed.hostname}:{port} unreachable"
        return ok

    # ------------------------------------------------------------------
    # Callbacks and monitoring
    # ------------------------------------------------------------------

    def register_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        """Register a callback for connection status changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

    def start_monitoring(self) -> None:
        """Start periodic checks on the running event loop."""
        if self._monitor_task is not None and not self._monitor_task.done():
            return
        self._monitor_task = asyncio.get_running_loop().create_task(
            self._monitoring_loop(), name="ConnectionMonitor"
        )
        logger.debug("Connection monitoring started")

    async def stop_monitoring(self) -> None:
        """Stop periodic checks."""
        task, self._monitor_task = self._monitor_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Connection monitoring stopped")

    async def _monitoring_loop(self) -> None:
        while True:
            interval = self.CHECK_INTERVAL_ONLINE if self.is_online else self.CHECK_INTERVAL_OFFLINE
            await asyncio.sleep(interval)
            try:
                await self.check_connection()
            except Exception as e:
                logger.error(f"Error in connection check: {e}")

    def get_status_display(self) -> dict:
        """Status information for UI display."""
        return {
            "status": self._state.status.value,
            "is_online": self.is_online,
            "internet": self._state.internet_available,
            "supabase": self._state.supabase_available,
            "last_check": self._state.last_check.isoformat() if self._state.last_check else None,
            "last_online": self._state.last_online.isoformat() if self._state.last_online else None,
            "failures": self._state.consecutive_failures,
            "error": self._state.error_message,
        }
