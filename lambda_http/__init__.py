"""
Serve WSGI applications from AWS Lambda behind API Gateway proxy integrations.

API Gateway must treat all media types as binary ("Binary Media Types"
includes */*), since every response body is returned base64-encoded.
"""

from .config import BridgeConfig
from .core.executor import InvocationExecutor, not_found_app
from .core.request_context import get_invocation
from .exceptions import BridgeError, DecodeError, HandlerFault, RuntimeAPIError
from .main import make_lambda_handler, serve

__all__ = [
    "BridgeConfig",
    "InvocationExecutor",
    "not_found_app",
    "get_invocation",
    "BridgeError",
    "DecodeError",
    "HandlerFault",
    "RuntimeAPIError",
    "make_lambda_handler",
    "serve",
]
