import base64
import sys

import pytest

from lambda_http.core.response_capture import ResponseCapture, parse_status


def _written(chunks) -> bytes:
    capture = ResponseCapture()
    for chunk in chunks:
        capture.write(chunk)
    capture.close()
    return base64.b64decode(capture.body)


def test_body_round_trip_binary_in_uneven_chunks():
    data = bytes(range(256)) * 3
    chunks = [data[i : i + 7] for i in range(0, len(data), 7)]

    assert _written(chunks) == data


def test_body_round_trip_empty_and_single_bytes():
    assert _written([]) == b""
    assert _written([b""]) == b""
    assert _written([b"a", b"b", b"c", b"d"]) == b"abcd"


def test_encoding_is_incremental():
    capture = ResponseCapture()

    capture.write(b"abcd")

    # One full group encoded, one byte pending.
    assert capture._chunks == ["YWJj"]
    capture.close()
    assert capture.body == "YWJjZA=="


def test_status_is_unset_until_written():
    capture = ResponseCapture()

    assert capture.status_code == 0
    capture.set_status(201)
    capture.set_status(202)
    assert capture.status_code == 202


def test_start_response_sets_status_and_headers():
    capture = ResponseCapture()

    write = capture.start_response("404 Not Found", [("Content-Type", "text/plain")])

    assert capture.status_code == 404
    assert capture.headers["content-type"] == "text/plain"
    assert write == capture.write


@pytest.mark.parametrize("status", ["OK", "20 OK", "2000 OK", ""])
def test_parse_status_rejects_invalid_lines(status):
    with pytest.raises(ValueError):
        parse_status(status)


def test_start_response_twice_without_exc_info_fails():
    capture = ResponseCapture()
    capture.start_response("200 OK", [])

    with pytest.raises(RuntimeError):
        capture.start_response("500 Internal Server Error", [])


def test_start_response_with_exc_info_before_body_replaces_response():
    capture = ResponseCapture()
    capture.start_response("200 OK", [("X-Stage", "first")])

    try:
        raise KeyError("boom")
    except KeyError:
        capture.start_response("500 Internal Server Error", [], sys.exc_info())

    assert capture.status_code == 500
    assert "x-stage" not in capture.headers


def test_start_response_with_exc_info_after_body_reraises():
    capture = ResponseCapture()
    capture.start_response("200 OK", [])
    capture.write(b"partial")

    with pytest.raises(KeyError):
        try:
            raise KeyError("boom")
        except KeyError:
            capture.start_response("500 Internal Server Error", [], sys.exc_info())


def test_headers_are_frozen_after_first_write():
    capture = ResponseCapture()
    capture.headers["X-Before"] = "1"

    capture.write(b"body")
    capture.headers["X-After"] = "1"

    committed = capture.response_headers()
    assert capture.headers_sent
    assert "x-before" in committed
    assert "x-after" not in committed


def test_write_after_close_fails():
    capture = ResponseCapture()
    capture.close()

    with pytest.raises(ValueError):
        capture.write(b"late")


def test_write_requires_bytes():
    capture = ResponseCapture()

    with pytest.raises(TypeError):
        capture.write("text")


def test_body_requires_close():
    capture = ResponseCapture()
    capture.write(b"abc")

    with pytest.raises(RuntimeError):
        capture.body


def test_close_is_idempotent():
    capture = ResponseCapture()
    capture.write(b"ab")
    capture.close()
    capture.close()

    assert capture.body == "YWI="


def test_streaming_capabilities_are_absent():
    capture = ResponseCapture()

    assert not hasattr(capture, "flush")
    assert not hasattr(capture, "hijack")
