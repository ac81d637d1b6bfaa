"""
Custom exception classes.

Represent failures of the invocation bridge. Only DecodeError and
RuntimeAPIError ever leave the executor; HandlerFault is raised and logged
inside the fault boundary.
"""


class BridgeError(Exception):
    """Base exception class for the Lambda HTTP bridge."""

    pass


class DecodeError(BridgeError):
    """Raised when the invocation payload is not a valid proxy event."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to decode proxy event: {cause}")


class HandlerFault(BridgeError):
    """Raised when the application terminates abnormally."""

    def __init__(self, cause: BaseException, request_id: str = ""):
        self.cause = cause
        self.request_id = request_id
        super().__init__(f"Handler fault: {type(cause).__name__}: {cause}")


class RuntimeAPIError(BridgeError):
    """Error talking to the Lambda Runtime API."""

    def __init__(self, detail: str, status_code: int = 0):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Runtime API error ({status_code}): {detail}")
