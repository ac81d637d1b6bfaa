import json

import pytest
from pydantic import ValidationError

from lambda_http.core.event_decoder import decode_event
from lambda_http.exceptions import DecodeError

from .events import GATEWAY_HOST


def test_decode_sample_event(sample_event):
    event = decode_event(json.dumps(sample_event).encode())

    assert event.httpMethod == "POST"
    assert event.path == "/path/to/resource"
    assert event.resource == "/{proxy+}"
    assert event.stage == "prod"
    assert event.host == GATEWAY_HOST
    assert event.queryStringParameters == {"foo": "bar"}
    assert event.pathParameters == {"proxy": "path/to/resource"}
    assert event.stageVariables == {"baz": "qux"}
    assert event.body == '{"test":"body"}'
    assert event.isBase64Encoded is False
    assert event.requestContext.identity.sourceIp == "127.0.0.1"
    assert event.requestContext.requestId == "c6af9ac6-7b61-11e6-9a41-93e8deadbeef"


def test_decode_minimal_event_uses_zero_values():
    event = decode_event(b'{"httpMethod": "GET", "path": "/missing"}')

    assert event.httpMethod == "GET"
    assert event.headers == {}
    assert event.queryStringParameters == {}
    assert event.body == ""
    assert event.stage == ""
    assert event.host == ""


def test_decode_null_fields():
    payload = {
        "httpMethod": "GET",
        "path": "/",
        "headers": None,
        "queryStringParameters": None,
        "multiValueQueryStringParameters": None,
        "pathParameters": None,
        "stageVariables": None,
        "requestContext": None,
        "body": None,
        "isBase64Encoded": None,
    }

    event = decode_event(json.dumps(payload).encode())

    assert event.headers == {}
    assert event.multiValueQueryStringParameters == {}
    assert event.body == ""
    assert event.isBase64Encoded is False
    assert event.stage == ""


def test_host_lookup_is_case_insensitive():
    event = decode_event(b'{"headers": {"host": "example.com"}}')

    assert event.host == "example.com"


@pytest.mark.parametrize(
    "payload",
    [
        b"{not json",
        b"[]",
        b"null",
        b'"GET /"',
        b'{"headers": "Host: example.com"}',
        b'{"isBase64Encoded": "sometimes"}',
    ],
)
def test_decode_rejects_invalid_payload(payload):
    with pytest.raises(DecodeError) as exc_info:
        decode_event(payload)

    assert isinstance(exc_info.value.cause, ValidationError)


def test_decoded_event_is_frozen():
    event = decode_event(b'{"path": "/"}')

    with pytest.raises(ValidationError):
        event.path = "/other"
