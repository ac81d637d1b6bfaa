"""
Response sink handed to the WSGI application.

The body is base64-encoded as it arrives: whole 3-byte groups are encoded on
every write and at most two bytes wait for the next write or close(). Lambda
cannot stream, so the sink has no flush() or hijack(); applications detect
buffering by their absence.
"""

import base64
from typing import Callable, List, Optional, Sequence, Tuple

import httpx

WriteCallable = Callable[[bytes], None]


def parse_status(status: str) -> int:
    """Numeric code of a WSGI status line ("404 Not Found" -> 404)."""
    code = status.split(" ", 1)[0]
    if len(code) != 3 or not code.isdigit():
        raise ValueError(f"Invalid WSGI status line: {status!r}")
    return int(code)


class ResponseCapture:
    def __init__(self):
        self.status_code = 0
        self.closed = False
        self._headers = httpx.Headers(encoding="utf-8")
        self._sent_headers: Optional[httpx.Headers] = None
        self._started = False
        self._chunks: List[str] = []
        self._pending = b""

    @property
    def headers(self) -> httpx.Headers:
        """Response headers. Changes made after the first body byte are ignored."""
        return self._headers

    @property
    def headers_sent(self) -> bool:
        return self._sent_headers is not None

    def response_headers(self) -> httpx.Headers:
        """Headers as committed: the snapshot taken at first write, else the live set."""
        if self._sent_headers is not None:
            return self._sent_headers
        return self._headers

    def set_status(self, code: int) -> None:
        # Last write wins.
        self.status_code = int(code)

    def start_response(
        self,
        status: str,
        headers: Sequence[Tuple[str, str]],
        exc_info=None,
    ) -> WriteCallable:
        """PEP 3333 start_response."""
        if exc_info:
            try:
                if self.headers_sent:
                    raise exc_info[1].with_traceback(exc_info[2])
            finally:
                exc_info = None
        elif self._started:
            raise RuntimeError("start_response called twice without exc_info")

        self._started = True
        self.set_status(parse_status(status))
        self._headers = httpx.Headers(list(headers), encoding="utf-8")
        return self.write

    def write(self, data: bytes) -> None:
        if self.closed:
            raise ValueError("write to closed response")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"response body must be bytes, not {type(data).__name__}")
        if not data:
            return
        if self._sent_headers is None:
            self._sent_headers = httpx.Headers(self._headers)

        data = self._pending + bytes(data)
        cut = len(data) - len(data) % 3
        if cut:
            self._chunks.append(base64.b64encode(data[:cut]).decode("ascii"))
        self._pending = data[cut:]

    def close(self) -> None:
        """Flush trailing bytes with padding. Safe to call more than once."""
        if self.closed:
            return
        if self._pending:
            self._chunks.append(base64.b64encode(self._pending).decode("ascii"))
            self._pending = b""
        self.closed = True

    @property
    def body(self) -> str:
        """Base64 text of everything written; only available after close()."""
        if not self.closed:
            raise RuntimeError("response body read before close")
        return "".join(self._chunks)
