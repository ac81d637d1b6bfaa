"""
Invocation Executor

Runs one Lambda invocation end-to-end: decode the proxy event, build the
WSGI request, call the application inside the fault boundary, capture the
response and encode the API Gateway envelope.
"""

import base64
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from lambda_http.config import BridgeConfig
from lambda_http.exceptions import HandlerFault
from lambda_http.models.aws_v1 import APIGatewayProxyEvent, APIGatewayProxyResponse
from lambda_http.models.context import ExecutionContext, InvocationMetadata
from lambda_http.models.invocation import InvocationRequest, InvocationResponse, PingResponse

from .event_decoder import decode_event
from .mangle import HeaderRemapper, canonical_header_key
from .redirect import fix_relative_redirect
from .request_builder import SyntheticRequest, build_request
from .request_context import invocation_scope
from .response_capture import ResponseCapture

logger = logging.getLogger("lambda_http.executor")

WSGIApplication = Callable[[Dict[str, Any], Callable], Iterable[bytes]]

NOT_FOUND_BODY = b"404 page not found\n"


def not_found_app(environ: Dict[str, Any], start_response: Callable) -> Iterable[bytes]:
    """Default application: every path is 404."""
    start_response("404 Not Found", [("Content-Type", "text/plain")])
    return [NOT_FOUND_BODY]


class InvocationState(str, Enum):
    DECODING = "decoding"
    SYNTHESIZING = "synthesizing"
    EXECUTING = "executing"
    CAPTURING = "capturing"
    FINALIZING = "finalizing"
    DONE = "done"
    FAULTED = "faulted"


class InvocationExecutor:
    """
    Lambda function service for a WSGI application.

    Holds only immutable configuration, so one instance can serve
    concurrent invocations from several threads.
    """

    def __init__(
        self,
        app: Optional[WSGIApplication] = None,
        config: Optional[BridgeConfig] = None,
    ):
        """
        Args:
            app: WSGI application; defaults to not_found_app
            config: BridgeConfig instance; defaults to one loaded from the environment
        """
        self.app = app if app is not None else not_found_app
        self.config = config or BridgeConfig()
        self.remapper = HeaderRemapper(
            self.config.MANGLE_HEADERS,
            self.config.DEMANGLE_HEADERS,
            self.config.REMAP_PREFIX,
        )

    def ping(self) -> PingResponse:
        """Liveness probe."""
        return PingResponse()

    def invoke(self, request: InvocationRequest) -> InvocationResponse:
        """
        Serve one invocation.

        Raises:
            DecodeError: payload is not a proxy event; no envelope is produced
        """
        started = time.monotonic()
        state = InvocationState.DECODING
        event = decode_event(request.payload)

        context = ExecutionContext(request.deadline.to_datetime())
        metadata = InvocationMetadata(request, event)

        with invocation_scope(request.request_id, request.trace_id, metadata):
            try:
                state = InvocationState.SYNTHESIZING
                synthetic = self._synthesize(event, context, metadata)

                state = InvocationState.EXECUTING
                capture = ResponseCapture()
                self._execute(synthetic, capture)

                state = InvocationState.CAPTURING
                envelope = self._capture(capture, event)
            except Exception as e:
                envelope = self._fault(e, request, state)
                state = InvocationState.FAULTED
            finally:
                context.cancel()

            payload = envelope.model_dump_json(exclude_none=True).encode("utf-8")
            logger.info(
                "Invocation completed",
                extra={
                    "method": event.httpMethod,
                    "path": event.path,
                    "status_code": envelope.statusCode,
                    "faulted": state is InvocationState.FAULTED,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )
        return InvocationResponse(payload=payload)

    def _synthesize(
        self,
        event: APIGatewayProxyEvent,
        context: ExecutionContext,
        metadata: InvocationMetadata,
    ) -> SyntheticRequest:
        headers = httpx.Headers(event.headers, encoding="utf-8")
        if self.config.DEMANGLE_INPUT_HEADERS:
            self.remapper.demangle(headers)
        return build_request(event, context, headers=headers, metadata=metadata)

    def _execute(self, synthetic: SyntheticRequest, capture: ResponseCapture) -> None:
        result = self.app(synthetic.to_environ(), capture.start_response)
        try:
            for chunk in result:
                capture.write(chunk)
        finally:
            close = getattr(result, "close", None)
            if close is not None:
                close()

    def _capture(
        self, capture: ResponseCapture, event: APIGatewayProxyEvent
    ) -> APIGatewayProxyResponse:
        capture.close()
        status_code = capture.status_code or 200

        headers = capture.response_headers()
        if "content-type" not in headers:
            headers["Content-Type"] = self.config.DEFAULT_CONTENT_TYPE
        if self.config.MANGLE_OUTPUT_HEADERS:
            self.remapper.mangle(headers)
        if self.config.FIX_RELATIVE_REDIRECT:
            fix_relative_redirect(status_code, headers, event, self.config.PLATFORM_DOMAIN_SUFFIX)

        # Single-valued map keeps the first value of each header.
        single: Dict[str, str] = {}
        multi: Dict[str, List[str]] = {}
        for name, value in headers.multi_items():
            key = canonical_header_key(name)
            single.setdefault(key, value)
            multi.setdefault(key, []).append(value)

        return APIGatewayProxyResponse(
            statusCode=status_code,
            headers=single,
            multiValueHeaders=multi if self.config.MULTI_VALUE_HEADERS else None,
            body=capture.body,
            isBase64Encoded=True,
        )

    def _fault(
        self, exc: Exception, request: InvocationRequest, state: InvocationState
    ) -> APIGatewayProxyResponse:
        fault = HandlerFault(exc, request.request_id)
        logger.error(
            str(fault),
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"state": state.value, "error_type": type(exc).__name__},
        )
        return APIGatewayProxyResponse(
            statusCode=500,
            headers={"Content-Type": "text/plain"},
            body=base64.b64encode(self.config.PANIC_MESSAGE.encode("utf-8")).decode("ascii"),
            isBase64Encoded=True,
        )
