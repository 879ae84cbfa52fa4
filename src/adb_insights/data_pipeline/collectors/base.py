"""Base class for best-effort external data collectors."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from adb_insights.utils.datetime import now_iso
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)


class BaseCollector(ABC):
    """Common plumbing for collectors that poll external sources.

    Subclasses report each fetch through :meth:`_record_success` or
    :meth:`_handle_error`; the running tallies are exposed by :meth:`status`
    and every emitted event is stamped with the collector's source name.
    """

    def __init__(
        self,
        source_name: str,
        on_event: Optional[Callable[[Dict[str, Any]], None]] = None
    ):
        """
        Args:
            source_name: Name used in log lines and emitted events
            on_event: Receives event dicts such as ``signal_refresh``
        """
        self.source_name = source_name
        self.on_event = on_event or self._log_event
        self.is_running = False
        self.success_count = 0
        self.error_count = 0
        self.last_error: Optional[str] = None

    def _log_event(self, event: Dict[str, Any]) -> None:
        logger.debug(f"[{self.source_name}] {event.get('type', 'event')}: {event}")

    def _create_base_event(self, **fields) -> Dict[str, Any]:
        event = {"timestamp": now_iso(), "source": self.source_name}
        event.update(fields)
        return event

    def _emit_event(self, event: Dict[str, Any]) -> None:
        """Hand ``event`` to the callback; a failing callback is logged, not raised."""
        try:
            self.on_event(event)
        except Exception as e:
            logger.error(f"[{self.source_name}] Event callback failed: {e}")

    def _record_success(self) -> None:
        self.success_count += 1

    def _handle_error(self, error: Exception, context: str = "") -> None:
        """Log a recoverable fetch failure at WARNING and count it."""
        self.error_count += 1
        self.last_error = str(error)
        context_str = f" ({context})" if context else ""
        logger.warning(f"[{self.source_name}] Failed{context_str}: {error}")

    def status(self) -> Dict[str, Any]:
        return {
            "source": self.source_name,
            "running": self.is_running,
            "successes": self.success_count,
            "errors": self.error_count,
            "last_error": self.last_error,
        }

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass
