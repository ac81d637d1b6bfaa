import logging

from pydantic import ValidationError

from lambda_http.exceptions import DecodeError
from lambda_http.models.aws_v1 import APIGatewayProxyEvent

logger = logging.getLogger("lambda_http.event_decoder")


def decode_event(payload: bytes) -> APIGatewayProxyEvent:
    """
    Decode an invocation payload into an API Gateway proxy event.

    Raises:
        DecodeError: payload is not JSON, not an object, or does not match the schema
    """
    try:
        return APIGatewayProxyEvent.model_validate_json(payload)
    except ValidationError as e:
        logger.warning(
            "Rejected invocation payload",
            extra={
                "error_count": e.error_count(),
                "snippet": payload[:200].decode("utf-8", errors="replace"),
            },
        )
        raise DecodeError(e) from e
