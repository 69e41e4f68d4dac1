"""Change notification for filter value sets."""

from typing import Any, Callable, List, Mapping

from config.logging_config import get_logger

from .values import FilterValueSet, copy_values

logger = get_logger("notifier")

FilterChangeCallback = Callable[[FilterValueSet], Any]


class ChangeNotifier:
    """
    Synchronous fan-out of "filters changed" events.

    Each subscriber receives its own deep copy of the full value set. A
    subscriber that raises is logged and skipped; the others still run.
    """

    def __init__(self):
        self._subscribers: List[FilterChangeCallback] = []

    def subscribe(self, callback: FilterChangeCallback) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            A function that removes this registration when called.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # Already removed

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify(self, values: Mapping[str, Any]) -> int:
        """
        Deliver ``values`` to every subscriber.

        Returns:
            Number of subscribers that raised.
        """
        failures = 0
        for callback in list(self._subscribers):
            try:
                callback(copy_values(values))
            except Exception:
                failures += 1
                logger.exception("Filter change subscriber %r failed", callback)
        return failures
