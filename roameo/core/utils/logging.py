"""Structured logging for external service calls."""

import logging
from typing import Any

from roameo.core.services.executor import CallContext

logger = logging.getLogger(__name__)


class StructuredCallLogger:
    """Structured logger for routing and geocoding calls."""

    def log_attempt(
        self,
        ctx: CallContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log a service call attempt with structured data."""
        log_data: dict[str, Any] = {
            "service": ctx.service,
            "key": ctx.key,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Service call: {ctx.service} {ctx.key} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
