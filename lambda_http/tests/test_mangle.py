import time
from email.utils import formatdate

import httpx

from lambda_http.core.mangle import (
    DEFAULT_DEMANGLE,
    DEFAULT_MANGLE,
    HeaderRemapper,
    canonical_header_key,
)


def test_mangle():
    headers = httpx.Headers({"Via": "127.0.0.1"})

    HeaderRemapper().mangle(headers)

    assert headers["X-Amzn-Remapped-Via"] == "127.0.0.1"
    assert headers["Via"] == "127.0.0.1"


def test_mangle_does_not_overwrite_existing_value():
    headers = httpx.Headers({"Server": "app", "X-Amzn-Remapped-Server": "original"})
    remapper = HeaderRemapper()

    remapper.mangle(headers)
    headers["Server"] = "changed"
    remapper.mangle(headers)

    assert headers["X-Amzn-Remapped-Server"] == "original"


def test_mangle_fills_empty_prefixed_value():
    headers = httpx.Headers({"Date": "Mon, 01 Jan 2024 00:00:00 GMT", "X-Amzn-Remapped-Date": ""})

    HeaderRemapper().mangle(headers)

    assert headers["X-Amzn-Remapped-Date"] == "Mon, 01 Jan 2024 00:00:00 GMT"


def test_mangle_is_case_insensitive_and_skips_other_headers():
    headers = httpx.Headers({"content-type": "application/json", "X-Custom": "1"})

    HeaderRemapper().mangle(headers)

    assert headers["X-Amzn-Remapped-Content-Type"] == "application/json"
    assert "X-Amzn-Remapped-X-Custom" not in headers


def test_mangle_uses_first_value_of_multi_valued_header():
    headers = httpx.Headers([("Via", "first"), ("Via", "second")])

    HeaderRemapper().mangle(headers)

    assert headers.get_list("X-Amzn-Remapped-Via") == ["first"]


def test_demangle():
    now = formatdate(time.time(), usegmt=True)
    headers = httpx.Headers({"X-Amzn-Remapped-Date": now})

    HeaderRemapper().demangle(headers)

    assert headers["Date"] == now
    # The remapped header is left in place.
    assert headers["X-Amzn-Remapped-Date"] == now


def test_demangle_does_not_overwrite_plain_value():
    headers = httpx.Headers({"Via": "gateway", "X-Amzn-Remapped-Via": "client"})

    HeaderRemapper().demangle(headers)

    assert headers["Via"] == "gateway"


def test_demangle_ignores_empty_prefixed_value():
    headers = httpx.Headers({"X-Amzn-Remapped-Authorization": ""})

    HeaderRemapper().demangle(headers)

    assert "Authorization" not in headers


def test_custom_tables():
    remapper = HeaderRemapper(mangle_names=["Server"], prefix="X-Remapped-")
    headers = httpx.Headers({"Server": "app", "Via": "proxy", "X-Remapped-Server": ""})

    remapper.mangle(headers)

    assert headers["X-Remapped-Server"] == "app"
    assert "X-Remapped-Via" not in headers
    assert remapper.demangle_names == ("X-Remapped-Server",)


def test_default_tables_are_symmetric():
    assert len(DEFAULT_MANGLE) == len(DEFAULT_DEMANGLE) == 27
    for name, remapped in zip(DEFAULT_MANGLE, DEFAULT_DEMANGLE):
        assert remapped == f"X-Amzn-Remapped-{name}"


def test_canonical_header_key():
    assert canonical_header_key("content-type") == "Content-Type"
    assert canonical_header_key("X-AMZN-REMAPPED-WWW-AUTHENTICATE") == (
        "X-Amzn-Remapped-Www-Authenticate"
    )
    assert canonical_header_key("location") == "Location"
    assert canonical_header_key("bad header") == "bad header"
