"""
Lambda Runtime API client.

Fetches invocations from the custom runtime interface and posts results back.
Reference: https://docs.aws.amazon.com/lambda/latest/dg/runtimes-api.html
"""

import logging
from typing import Optional

import httpx

from lambda_http.exceptions import RuntimeAPIError
from lambda_http.models.invocation import Deadline, InvocationRequest

logger = logging.getLogger("lambda_http.runtime_client")

RUNTIME_API_VERSION = "2018-06-01"


class RuntimeClient:
    def __init__(self, runtime_api: str, client: Optional[httpx.Client] = None):
        """
        Args:
            runtime_api: host:port from AWS_LAMBDA_RUNTIME_API
            client: httpx.Client to use; the next-invocation call long-polls,
                so the default client has no timeout
        """
        self.base_url = f"http://{runtime_api}/{RUNTIME_API_VERSION}/runtime"
        # Avoid leaking HTTP(S)_PROXY into the link-local runtime endpoint.
        self.client = client or httpx.Client(timeout=None, trust_env=False)

    def _send(self, method: str, url: str, expected: int, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(
                "Runtime API request failed",
                extra={
                    "target_url": url,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise RuntimeAPIError(str(e)) from e
        if response.status_code != expected:
            raise RuntimeAPIError(response.text, response.status_code)
        return response

    def next_invocation(self) -> InvocationRequest:
        """Block until the next invocation is available."""
        response = self._send("GET", f"{self.base_url}/invocation/next", 200)
        headers = response.headers

        deadline_ms = headers.get("Lambda-Runtime-Deadline-Ms", "")
        deadline = Deadline.from_millis(int(deadline_ms)) if deadline_ms.isdigit() else Deadline()

        return InvocationRequest(
            payload=response.content,
            deadline=deadline,
            client_context=headers.get("Lambda-Runtime-Client-Context", "").encode("utf-8"),
            request_id=headers.get("Lambda-Runtime-Aws-Request-Id", ""),
            invoked_function_arn=headers.get("Lambda-Runtime-Invoked-Function-Arn", ""),
            trace_id=headers.get("Lambda-Runtime-Trace-Id"),
        )

    def post_response(self, request_id: str, payload: bytes) -> None:
        self._send(
            "POST",
            f"{self.base_url}/invocation/{request_id}/response",
            202,
            content=payload,
            headers={"Content-Type": "application/json"},
        )

    def post_error(self, request_id: str, error: Exception) -> None:
        """Report a call-level failure for one invocation."""
        self._send(
            "POST",
            f"{self.base_url}/invocation/{request_id}/error",
            202,
            json={"errorMessage": str(error), "errorType": type(error).__name__},
            headers={"Lambda-Runtime-Function-Error-Type": "Unhandled"},
        )

    def close(self) -> None:
        self.client.close()
