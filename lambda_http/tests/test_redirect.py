import json

import httpx
import pytest

from lambda_http.core.event_decoder import decode_event
from lambda_http.core.redirect import fix_relative_redirect

from .events import GATEWAY_HOST


def _event(host=GATEWAY_HOST, stage="prod"):
    payload = {"path": "/redirect", "headers": {"Host": host}, "requestContext": {"stage": stage}}
    return decode_event(json.dumps(payload).encode())


def test_relative_redirect_gets_stage_prefix():
    headers = httpx.Headers({"Location": "/error"})

    changed = fix_relative_redirect(307, headers, _event())

    assert changed is True
    assert headers["Location"] == "/prod/error"


@pytest.mark.parametrize("status_code", [200, 300, 400, 500])
def test_non_redirect_status_is_ignored(status_code):
    headers = httpx.Headers({"Location": "/error"})

    assert fix_relative_redirect(status_code, headers, _event()) is False
    assert headers["Location"] == "/error"


@pytest.mark.parametrize("status_code", [301, 302, 303, 307, 308, 399])
def test_redirect_range_is_half_open(status_code):
    headers = httpx.Headers({"Location": "/next"})

    assert fix_relative_redirect(status_code, headers, _event()) is True


def test_custom_domain_is_left_alone():
    headers = httpx.Headers({"Location": "/error"})

    assert fix_relative_redirect(302, headers, _event(host="api.example.com")) is False
    assert headers["Location"] == "/error"


def test_absolute_and_relative_path_locations_are_left_alone():
    for location in ["https://example.com/error", "../error", "error"]:
        headers = httpx.Headers({"Location": location})

        assert fix_relative_redirect(302, headers, _event()) is False
        assert headers["Location"] == location


def test_missing_location_or_stage_is_a_no_op():
    assert fix_relative_redirect(302, httpx.Headers(), _event()) is False

    headers = httpx.Headers({"Location": "/error"})
    assert fix_relative_redirect(302, headers, _event(stage="")) is False
    assert headers["Location"] == "/error"


def test_custom_domain_suffix():
    headers = httpx.Headers({"Location": "/error"})
    event = _event(host="abc.execute-api.internal.test")

    assert fix_relative_redirect(302, headers, event, domain_suffix=".internal.test") is True
    assert headers["Location"] == "/prod/error"
