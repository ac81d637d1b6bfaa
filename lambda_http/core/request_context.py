"""
RequestContext management.
Use ContextVar so concurrent invocations on different threads keep their own
request id, trace id and invocation metadata.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator, Optional

from .trace import TraceId

if TYPE_CHECKING:
    from lambda_http.models.context import InvocationMetadata


# Context variable for Trace ID (full header format).
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
# Context variable for Request ID.
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
# Context variable for the Lambda capability of the current invocation.
_invocation_var: ContextVar[Optional["InvocationMetadata"]] = ContextVar(
    "invocation", default=None
)


def get_trace_id() -> Optional[str]:
    """Get the current Trace ID."""
    return _trace_id_var.get()


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def get_invocation() -> Optional["InvocationMetadata"]:
    """
    Lambda metadata of the invocation being served, or None outside Lambda.

    Applications use this (or environ["lambda.invocation"]) instead of probing
    the response object for Lambda specifics.
    """
    return _invocation_var.get()


@contextmanager
def invocation_scope(
    request_id: Optional[str],
    trace_id: Optional[str] = None,
    metadata: Optional["InvocationMetadata"] = None,
) -> Iterator[None]:
    """Bind the invocation ids and metadata for the duration of the block."""
    trace = str(TraceId.parse(trace_id)) if trace_id else None
    tokens = (
        _request_id_var.set(request_id or None),
        _trace_id_var.set(trace),
        _invocation_var.set(metadata),
    )
    try:
        yield
    finally:
        _invocation_var.reset(tokens[2])
        _trace_id_var.reset(tokens[1])
        _request_id_var.reset(tokens[0])
