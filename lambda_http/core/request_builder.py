"""
Where: lambda_http/core/request_builder.py
What: Build the synthetic request (and its WSGI environ) for one invocation.
Why: Keep proxy-event to WSGI translation apart from execution and capture.
"""

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from lambda_http.models.aws_v1 import APIGatewayProxyEvent
from lambda_http.models.context import ExecutionContext, InvocationMetadata

from .logging_config import StreamToLogger

logger = logging.getLogger("lambda_http.request_builder")

# WSGI environ keys carrying the optional Lambda capabilities.
CONTEXT_KEY = "lambda.context"
INVOCATION_KEY = "lambda.invocation"


class MalformedBody(io.RawIOBase):
    """Request body stream that raises the body decoding error on read."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        raise self.error


def _wsgi_str(value: str) -> str:
    # PEP 3333 native strings carry bytes as latin-1.
    return value.encode("utf-8").decode("latin-1")


def encode_query(event: APIGatewayProxyEvent) -> str:
    """Re-encode query parameters with keys sorted."""
    pairs: List[Tuple[str, str]] = []
    if event.multiValueQueryStringParameters:
        for key in sorted(event.multiValueQueryStringParameters):
            pairs.extend((key, v) for v in event.multiValueQueryStringParameters[key])
    else:
        for key in sorted(event.queryStringParameters):
            pairs.append((key, event.queryStringParameters[key]))
    return urlencode(pairs)


@dataclass
class SyntheticRequest:
    method: str
    path: str
    query_string: str
    headers: httpx.Headers
    body: bytes
    context: ExecutionContext
    metadata: Optional[InvocationMetadata] = None
    remote_addr: str = ""
    body_error: Optional[Exception] = None

    @property
    def url(self) -> str:
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def _server(self, scheme: str) -> Tuple[str, str]:
        host = self.headers.get("host", "")
        name, _, port = host.rpartition(":") if ":" in host else (host, "", "")
        if not port.isdigit():
            name, port = host, ""
        port = self.headers.get("x-forwarded-port") or port
        if not port:
            port = "443" if scheme == "https" else "80"
        return name or "localhost", port

    def to_environ(self) -> Dict[str, Any]:
        """PEP 3333 environ for this request."""
        scheme = (self.headers.get("x-forwarded-proto") or "https").split(",")[0].strip()
        server_name, server_port = self._server(scheme)

        environ: Dict[str, Any] = {
            "REQUEST_METHOD": self.method,
            "SCRIPT_NAME": "",
            "PATH_INFO": _wsgi_str(self.path),
            "QUERY_STRING": self.query_string,
            "REQUEST_URI": _wsgi_str(self.url),
            "RAW_URI": _wsgi_str(self.url),
            "SERVER_NAME": server_name,
            "SERVER_PORT": server_port,
            "SERVER_PROTOCOL": "HTTP/1.1",
            "REMOTE_ADDR": self.remote_addr,
            "wsgi.version": (1, 0),
            "wsgi.url_scheme": scheme,
            "wsgi.errors": StreamToLogger(logging.getLogger("lambda_http.wsgi"), logging.ERROR),
            "wsgi.multithread": True,
            "wsgi.multiprocess": False,
            "wsgi.run_once": False,
            CONTEXT_KEY: self.context,
            INVOCATION_KEY: self.metadata,
        }

        if self.body_error is not None:
            environ["wsgi.input"] = MalformedBody(self.body_error)
        else:
            environ["wsgi.input"] = io.BytesIO(self.body)
            environ["CONTENT_LENGTH"] = str(len(self.body))

        for name, value in self.headers.multi_items():
            key = name.upper().replace("-", "_")
            if key == "CONTENT_LENGTH":
                continue
            if key != "CONTENT_TYPE":
                key = f"HTTP_{key}"
            value = _wsgi_str(value)
            if key in environ:
                environ[key] = f"{environ[key]},{value}"
            else:
                environ[key] = value

        return environ


def build_request(
    event: APIGatewayProxyEvent,
    context: ExecutionContext,
    headers: Optional[httpx.Headers] = None,
    metadata: Optional[InvocationMetadata] = None,
) -> SyntheticRequest:
    """
    Build the synthetic request for a decoded proxy event.

    Args:
        event: decoded proxy event
        context: execution context bound to the invocation deadline
        headers: inbound headers, already demangled by the caller if enabled;
            defaults to the event headers
        metadata: capability object exposed to the application

    A body that is not valid base64 does not fail construction; reading
    wsgi.input raises the decoding error instead.
    """
    if headers is None:
        headers = httpx.Headers(event.headers, encoding="utf-8")

    body = b""
    body_error: Optional[Exception] = None
    if event.isBase64Encoded:
        try:
            body = base64.b64decode(event.body, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning("Request body is not valid base64", extra={"error_detail": str(e)})
            body_error = e
    else:
        body = event.body.encode("utf-8")

    return SyntheticRequest(
        method=event.httpMethod or "GET",
        path=event.path or "/",
        query_string=encode_query(event),
        headers=headers,
        body=body,
        context=context,
        metadata=metadata,
        remote_addr=event.requestContext.identity.sourceIp,
        body_error=body_error,
    )
