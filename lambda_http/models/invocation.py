"""
Invocation models.

Describe one call delivered by the Lambda transport and the payload returned to it.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Deadline(BaseModel):
    """Absolute invocation deadline as Unix seconds plus nanoseconds."""

    seconds: int = 0
    nanos: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_millis(cls, epoch_ms: int) -> "Deadline":
        return cls(seconds=epoch_ms // 1000, nanos=(epoch_ms % 1000) * 1_000_000)

    @property
    def is_zero(self) -> bool:
        return self.seconds == 0 and self.nanos == 0

    def to_datetime(self) -> Optional[datetime]:
        """
        UTC datetime of the deadline, or None when no deadline was given.

        Deadlines beyond what datetime can represent are clamped to
        datetime.max / datetime.min.
        """
        if self.is_zero:
            return None
        try:
            return datetime.fromtimestamp(self.seconds + self.nanos / 1e9, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            bound = datetime.max if self.seconds > 0 else datetime.min
            return bound.replace(tzinfo=timezone.utc)


class InvocationRequest(BaseModel):
    """
    One invocation as delivered by the transport.

    payload carries the serialized proxy event; client_context is the raw JSON
    supplied by mobile SDK callers (usually empty).
    """

    payload: bytes
    deadline: Deadline = Field(default_factory=Deadline)
    client_context: bytes = b""
    request_id: str = ""
    invoked_function_arn: str = ""
    trace_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class InvocationResponse(BaseModel):
    """Serialized proxy response envelope."""

    payload: bytes


class PingResponse(BaseModel):
    """Empty liveness acknowledgement."""


class ClientApplication(BaseModel):
    installation_id: str = ""
    app_title: str = ""
    app_version_name: str = ""
    app_version_code: str = ""
    app_package_name: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")


class ClientContext(BaseModel):
    """Client context sent by AWS Mobile SDK callers."""

    client: ClientApplication = Field(default_factory=ClientApplication)
    env: Dict[str, str] = Field(default_factory=dict)
    custom: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")
