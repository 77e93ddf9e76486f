"""Canonical forms of a request, the input both signing algorithms hash.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import base64
import hashlib
import urllib.parse as _urlparse
from typing import Iterable, Mapping

from .constants import UTF8

_SAFE_CHARS: str = "-_.~"
_UNENCODED_PATH_SERVICES = frozenset({"s3"})


def uri_encode(value: str, safe: str = "") -> str:
    """Percent-encode everything except unreserved characters (and ``safe``)."""
    return _urlparse.quote(value, safe=_SAFE_CHARS + safe)


def parse_query(query: str) -> list[tuple[str, str]]:
    """Decode a query string (or form-encoded body) into ``(name, value)`` pairs."""
    return _urlparse.parse_qsl(query, keep_blank_values=True)


def canonical_query_string(pairs: Iterable[tuple[str, str]]) -> str:
    """Return the query string in canonical (sorted & URL-escaped) form.

    Pairs are sorted by encoded name only; the sort is stable so repeated names
    keep their original order.
    """
    encoded = [(uri_encode(k), uri_encode(v)) for k, v in pairs]
    encoded.sort(key=lambda pair: pair[0])
    return "&".join(f"{k}={v}" for k, v in encoded)


def canonical_headers(headers: Mapping[str, str]) -> tuple[str, str]:
    """Return ``(canonical_headers, signed_headers)`` for ``headers``.

    Names are lower-cased and values lose leading and trailing whitespace;
    inner whitespace is kept as is.
    """
    sorted_hdrs = sorted((k.lower(), str(v).strip()) for k, v in headers.items())
    canonical = "\n".join(f"{k}:{v}" for k, v in sorted_hdrs)
    signed = ";".join(k for k, _ in sorted_hdrs)
    return canonical, signed


def canonical_path(path: str, service: str) -> str:
    """URI-encode the path, except for S3 whose object keys are signed byte-for-byte."""
    path = path or "/"
    if service in _UNENCODED_PATH_SERVICES:
        return path
    return uri_encode(path, safe="/")


def payload_hash(body: bytes) -> str:
    """Hex SHA-256 digest of the request body."""
    return hashlib.sha256(body).hexdigest()


def content_md5(body: bytes) -> str:
    """Base64 MD5 digest of the body, the value of the Content-MD5 integrity header."""
    return base64.b64encode(hashlib.md5(body).digest()).decode(UTF8)


def canonical_request_v4(
    method: str,
    path: str,
    query: str,
    headers: str,
    signed_headers: str,
    content_hash: str,
) -> str:
    return "\n".join(
        (
            method.upper(),
            path,
            query,
            headers + "\n",
            signed_headers,
            content_hash,
        )
    )


def string_to_sign_v2(host: str, path: str, query: str) -> str:
    return "\n".join(("POST", host, path or "/", query))
