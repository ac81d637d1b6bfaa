"""
Per-invocation context models.

ExecutionContext carries the invocation deadline to the application.
InvocationMetadata is the optional capability exposing Lambda specifics
(raw invocation, client context, gateway request) without type probing.
"""

import json
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from .aws_v1 import APIGatewayProxyEvent
from .invocation import ClientContext, InvocationRequest

logger = logging.getLogger("lambda_http.context")


class ExecutionContext:
    """
    Deadline-bound execution context, observed cooperatively.

    The context is done once its deadline has passed or cancel() was called.
    Nothing is interrupted; the application is expected to check done() or
    use wait() for interruptible sleeps.
    """

    def __init__(self, deadline: Optional[datetime] = None):
        self.deadline = deadline
        self._cancelled = threading.Event()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline.timestamp() - time.time())

    def done(self) -> bool:
        if self._cancelled.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the context is done or timeout seconds elapse.

        Returns True if the context is done.
        """
        remaining = self.remaining()
        if remaining is not None:
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._cancelled.wait(timeout)
        return self.done()

    def __repr__(self) -> str:
        deadline = self.deadline.isoformat() if self.deadline else None
        return f"ExecutionContext(deadline={deadline!r}, done={self.done()})"


class InvocationMetadata:
    """Lambda-specific view of the current invocation."""

    def __init__(self, invoke_request: InvocationRequest, gateway_request: APIGatewayProxyEvent):
        self.invoke_request = invoke_request
        self.gateway_request = gateway_request

    @property
    def request_id(self) -> str:
        return self.invoke_request.request_id

    @property
    def client_context(self) -> ClientContext:
        """Parsed client context; an empty one when absent or unparseable."""
        raw = self.invoke_request.client_context
        if not raw:
            return ClientContext()
        try:
            return ClientContext.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.debug("Ignoring unparseable client context", extra={"error_detail": str(e)})
            return ClientContext()

    @property
    def deadline(self) -> Optional[datetime]:
        return self.invoke_request.deadline.to_datetime()

    def remaining_time_in_millis(self) -> Optional[int]:
        deadline = self.deadline
        if deadline is None:
            return None
        delta = deadline - datetime.now(timezone.utc)
        return max(0, int(delta.total_seconds() * 1000))
