"""
Data model definitions package.

Aggregates the Pydantic models and context objects used by the executor.
"""

from .aws_v1 import (
    APIGatewayProxyEvent,
    APIGatewayProxyResponse,
    ApiGatewayIdentity,
    ApiGatewayRequestContext,
)
from .context import ExecutionContext, InvocationMetadata
from .invocation import (
    ClientApplication,
    ClientContext,
    Deadline,
    InvocationRequest,
    InvocationResponse,
    PingResponse,
)

__all__ = [
    "APIGatewayProxyEvent",
    "APIGatewayProxyResponse",
    "ApiGatewayIdentity",
    "ApiGatewayRequestContext",
    "ClientApplication",
    "ClientContext",
    "Deadline",
    "ExecutionContext",
    "InvocationMetadata",
    "InvocationRequest",
    "InvocationResponse",
    "PingResponse",
]
