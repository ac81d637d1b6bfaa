"""
Core logic package.

Provides the invocation-translation engine: decoding, request synthesis,
response capture, header remapping and redirect fixup.
"""

from .event_decoder import decode_event
from .mangle import HeaderRemapper, canonical_header_key
from .redirect import fix_relative_redirect
from .request_builder import SyntheticRequest, build_request
from .request_context import get_invocation
from .response_capture import ResponseCapture

__all__ = [
    "decode_event",
    "HeaderRemapper",
    "canonical_header_key",
    "fix_relative_redirect",
    "SyntheticRequest",
    "build_request",
    "get_invocation",
    "ResponseCapture",
]
