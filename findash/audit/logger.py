"""
Audit Logger

DESIGN DECISION: Every change to the user's data is logged.
This provides:
1. Traceability of edits
2. Debugging capability when storage misbehaves
3. A recent-activity feed the dashboard can show

The audit logger:
- Is synchronous, like everything else in the store
- Never raises: a logging problem must not break a mutation
- Keeps a bounded buffer of recent events in memory
"""

from collections import deque
from typing import Optional

import structlog

from findash.config import get_settings
from findash.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory ring buffer (for the activity feed)
    """

    def __init__(self, buffer_size: Optional[int] = None):
        """
        Initialize audit logger.

        Args:
            buffer_size: How many recent events to keep.
                        Defaults to the configured audit_buffer_size.
        """
        if buffer_size is None:
            buffer_size = get_settings().app.audit_buffer_size
        self._events: deque[AuditEvent] = deque(maxlen=buffer_size)
        self._logger = structlog.get_logger("findash.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity and remember it."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)

    def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """Most recent events, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._events))[:limit]

    def clear(self) -> None:
        self._events.clear()
