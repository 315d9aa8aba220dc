"""
Connectivity monitoring.

The NetworkMonitor listens to a ConnectivitySignal, keeps the process-wide
online flag, and republishes transitions to subscribers and the
notification sink.
"""
import logging
import threading
from collections.abc import Callable

from .notifications import Notifier
from .types import ConnectivitySignal

logger = logging.getLogger(__name__)

StatusCallback = Callable[[bool], None]


class LocalConnectivitySignal:
    """In-process connectivity signal.

    Whatever observes the platform (a browser bridge, an OS hook, a test)
    calls ``set_online`` and the registered callbacks fire on changes.
    """

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: list[tuple[Callable[[], None], Callable[[], None]]] = []
        self._lock = threading.Lock()

    def is_online(self) -> bool:
        return self._online

    def subscribe(
        self,
        on_offline: Callable[[], None],
        on_online: Callable[[], None]
    ) -> Callable[[], None]:
        entry = (on_offline, on_online)
        with self._lock:
            self._listeners.append(entry)

        def detach() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return detach

    def set_online(self, online: bool) -> None:
        """Update the state and fire the matching event."""
        with self._lock:
            self._online = online
            listeners = list(self._listeners)

        for on_offline, on_online in listeners:
            try:
                if online:
                    on_online()
                else:
                    on_offline()
            except Exception as e:
                logger.error(f"Connectivity listener failed: {e}")

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)


class NetworkMonitor:
    """Two-state (online/offline) connectivity monitor."""

    def __init__(self, signal: ConnectivitySignal, notifier: Notifier | None = None):
        self._signal = signal
        self._notifier = notifier or Notifier()
        self._lock = threading.Lock()
        self._subscribers: list[_Registration] = []
        self._online = bool(signal.is_online())
        self._detach: Callable[[], None] | None = signal.subscribe(
            self._handle_offline,
            self._handle_online
        )
        logger.debug(f"Network monitor started ({'online' if self._online else 'offline'})")

    @property
    def online(self) -> bool:
        return self._online

    def on_status_change(self, callback: StatusCallback) -> Callable[[], None]:
        """Register a listener for connectivity changes.

        Returns a function that removes the registration. Calling it more
        than once is harmless.
        """
        token = _Registration(callback)
        with self._lock:
            self._subscribers.append(token)

        def unsubscribe() -> None:
            with self._lock:
                if token in self._subscribers:
                    self._subscribers.remove(token)
            token.callback = None

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def close(self) -> None:
        """Detach from the connectivity signal and drop all subscribers."""
        with self._lock:
            detach, self._detach = self._detach, None
            self._subscribers.clear()
        if detach is not None:
            detach()

    def _handle_offline(self) -> None:
        if not self._transition(False):
            return
        logger.warning("Network connection lost")
        self._notify(
            self._notifier.warning,
            "Connection Lost",
            "You are offline. Some features may be unavailable until the connection is restored."
        )

    def _handle_online(self) -> None:
        if not self._transition(True):
            return
        logger.info("Network connection restored")
        self._notify(self._notifier.success, "Connection Restored", "You are back online.")

    def _notify(self, send: Callable[[str, str], bool], title: str, body: str) -> None:
        try:
            send(title, body)
        except Exception as e:
            logger.error(f"Failed to deliver connectivity notification: {e}")

    def _transition(self, online: bool) -> bool:
        with self._lock:
            if self._online == online:
                return False
            self._online = online
            subscribers = list(self._subscribers)

        for registration in subscribers:
            callback = registration.callback
            if callback is None:
                continue
            try:
                callback(online)
            except Exception as e:
                logger.error(f"Connectivity subscriber failed: {e}")
        return True


class _Registration:
    # Identity-compared wrapper so the same callback can be registered twice
    __slots__ = ("callback",)

    def __init__(self, callback: StatusCallback):
        self.callback: StatusCallback | None = callback


# Process-wide connectivity state; platform bridges call
# ``connectivity_signal.set_online``
connectivity_signal = LocalConnectivitySignal()
network_monitor = NetworkMonitor(connectivity_signal)
