"""
Lambda HTTP Bridge - serve a WSGI application from AWS Lambda

Entry points:
- serve(app): custom runtime loop against the Lambda Runtime API, or a
  local development server when AWS_LAMBDA_RUNTIME_API is not set
- make_lambda_handler(app): handler function for the managed Python runtime
"""

import json
import logging
import os
import time
from typing import Any, Callable, Dict, Optional
from wsgiref.simple_server import make_server

from .config import BridgeConfig
from .core.executor import InvocationExecutor, WSGIApplication
from .core.logging_config import setup_logging
from .core.runtime_client import RuntimeClient
from .exceptions import DecodeError, RuntimeAPIError
from .models.invocation import ClientApplication, Deadline, InvocationRequest

logger = logging.getLogger("lambda_http.main")


def serve_once(executor: InvocationExecutor, runtime: RuntimeClient) -> None:
    """
    Fetch, run and answer a single invocation.

    Only a failure to fetch the next invocation propagates; a rejected
    response or error post is logged and the invocation is abandoned.
    """
    request = runtime.next_invocation()
    # Read by the X-Ray SDK.
    if request.trace_id:
        os.environ["_X_AMZN_TRACE_ID"] = request.trace_id
    else:
        os.environ.pop("_X_AMZN_TRACE_ID", None)

    try:
        try:
            response = executor.invoke(request)
        except DecodeError as e:
            logger.error(
                "Rejected invocation payload",
                extra={"aws_request_id": request.request_id, "error_detail": str(e)},
            )
            runtime.post_error(request.request_id, e)
            return

        runtime.post_response(request.request_id, response.payload)
    except RuntimeAPIError as e:
        logger.error(
            "Runtime API rejected invocation result",
            extra={
                "aws_request_id": request.request_id,
                "status_code": e.status_code,
                "error_detail": e.detail,
            },
        )


def serve_local(app: WSGIApplication, config: BridgeConfig) -> None:
    """Serve the application over plain HTTP for local testing."""
    with make_server(config.LOCAL_HOST, config.LOCAL_PORT, app) as server:
        host, port = server.server_address[:2]
        logger.info(f"Starting test server on {host}:{port}")
        server.serve_forever()


def serve(app: Optional[WSGIApplication] = None, config: Optional[BridgeConfig] = None) -> None:
    """
    Serve app for the Lambda custom runtime. Never returns.

    Without AWS_LAMBDA_RUNTIME_API a local HTTP server is started instead,
    on LOCAL_PORT (an ephemeral port by default).
    """
    config = config or BridgeConfig()
    setup_logging(config.LOG_CONFIG_PATH)
    executor = InvocationExecutor(app, config)

    if not config.AWS_LAMBDA_RUNTIME_API:
        serve_local(executor.app, config)
        return

    runtime = RuntimeClient(config.AWS_LAMBDA_RUNTIME_API)
    logger.info(
        "Serving Lambda invocations",
        extra={"runtime_api": config.AWS_LAMBDA_RUNTIME_API},
    )
    try:
        while True:
            serve_once(executor, runtime)
    finally:
        runtime.close()


def _client_context_json(context: Any) -> bytes:
    client_context = getattr(context, "client_context", None)
    if client_context is None:
        return b""
    client = getattr(client_context, "client", None)
    data = {
        "client": {
            name: getattr(client, name, None) or ""
            for name in ClientApplication.model_fields
        },
        "custom": getattr(client_context, "custom", None) or {},
        "env": getattr(client_context, "env", None) or {},
    }
    return json.dumps(data).encode("utf-8")


def request_from_lambda_context(event: Any, context: Any) -> InvocationRequest:
    """Build an InvocationRequest from the managed runtime's (event, context) pair."""
    if isinstance(event, (bytes, str)):
        payload = event.encode("utf-8") if isinstance(event, str) else event
    else:
        payload = json.dumps(event).encode("utf-8")

    deadline = Deadline()
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if remaining is not None:
        deadline = Deadline.from_millis(int(time.time() * 1000) + int(remaining()))

    return InvocationRequest(
        payload=payload,
        deadline=deadline,
        client_context=_client_context_json(context),
        request_id=getattr(context, "aws_request_id", "") or "",
        invoked_function_arn=getattr(context, "invoked_function_arn", "") or "",
        trace_id=os.environ.get("_X_AMZN_TRACE_ID"),
    )


def make_lambda_handler(
    app: Optional[WSGIApplication] = None, config: Optional[BridgeConfig] = None
) -> Callable[[Any, Any], Dict[str, Any]]:
    """
    Create a lambda_handler(event, context) serving app.

    Usage:
        lambda_handler = make_lambda_handler(app)

    DecodeError propagates, so Lambda reports the invocation as failed.
    """
    executor = InvocationExecutor(app, config)

    def lambda_handler(event: Any, context: Any) -> Dict[str, Any]:
        response = executor.invoke(request_from_lambda_context(event, context))
        return json.loads(response.payload)

    return lambda_handler


if __name__ == "__main__":
    serve()
