"""
Header remapping between standard names and X-Amzn-Remapped-* aliases.

API Gateway renames some reserved headers on the way in and expects them
under their remapped name on the way out. HeaderRemapper copies values in
either direction without ever overwriting a non-empty value, so both
operations are idempotent.
"""

import re
from typing import Iterable, Optional, Tuple

import httpx

REMAP_PREFIX = "X-Amzn-Remapped-"

DEFAULT_MANGLE: Tuple[str, ...] = (
    "Accept",
    "Accept-Charset",
    "Accept-Encoding",
    "Age",
    "Authorization",
    "Connection",
    "Content-Encoding",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "Expect",
    "Host",
    "Max-Forwards",
    "Pragma",
    "Proxy-Authenticate",
    "Range",
    "Referer",
    "Server",
    "TE",
    "Trailer",
    "Transfer-Encoding",
    "Upgrade",
    "User-Agent",
    "Via",
    "WWW-Authenticate",
    "Warn",
)

DEFAULT_DEMANGLE: Tuple[str, ...] = tuple(REMAP_PREFIX + name for name in DEFAULT_MANGLE)

_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def canonical_header_key(name: str) -> str:
    """
    Canonical MIME form of a header name ("content-type" -> "Content-Type").

    Names containing characters outside the HTTP token set are returned as is.
    """
    if not _TOKEN.fullmatch(name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def first_value(headers: httpx.Headers, name: str) -> str:
    """First value of a header, or "" when absent."""
    values = headers.get_list(name)
    return values[0] if values else ""


class HeaderRemapper:
    """Symmetric mangle/demangle over an httpx.Headers collection."""

    def __init__(
        self,
        mangle_names: Iterable[str] = DEFAULT_MANGLE,
        demangle_names: Optional[Iterable[str]] = None,
        prefix: str = REMAP_PREFIX,
    ):
        self.prefix = prefix
        self._mangle = {name.lower(): name for name in mangle_names}
        if demangle_names is None:
            demangle_names = [prefix + name for name in self._mangle.values()]
        self._demangle = tuple(demangle_names)

    @property
    def mangle_names(self) -> Tuple[str, ...]:
        return tuple(self._mangle.values())

    @property
    def demangle_names(self) -> Tuple[str, ...]:
        return self._demangle

    def mangle(self, headers: httpx.Headers) -> None:
        """Copy remappable headers into their prefixed counterpart when it is empty."""
        for key in list(headers.keys()):
            name = self._mangle.get(key.lower())
            if name is None:
                continue
            remapped = self.prefix + name
            if not first_value(headers, remapped):
                headers[remapped] = first_value(headers, key)

    def demangle(self, headers: httpx.Headers) -> None:
        """Copy prefixed headers down to their plain name when it is empty."""
        cut = len(self.prefix)
        for remapped in self._demangle:
            if remapped[:cut].lower() != self.prefix.lower():
                continue
            value = first_value(headers, remapped)
            if not value:
                continue
            name = remapped[cut:]
            if not first_value(headers, name):
                headers[name] = value
