from __future__ import annotations

import urllib.parse as urlparse
from typing import Mapping

from requests.structures import CaseInsensitiveDict

from .constants import UTF8
from .credentials import AWSCredentials


class AWSRequest:
    """Outbound request description handed to the signer.

    The caller owns the instance. Signing mutates ``headers`` and, for
    Signature Version 2, ``body`` in place; the transport then sends it as is.
    """

    def __init__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
        service: str = "",
        region: str = "",
        credentials: AWSCredentials | None = None,
    ) -> None:
        self.method = method.upper()
        self.url = url
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict(headers or {})
        self.body = body
        self.service = service
        self.region = region
        self.credentials = credentials

    @property
    def body(self) -> bytes:
        return self._body

    @body.setter
    def body(self, value: bytes | str | None) -> None:
        if value is None:
            value = b""
        elif isinstance(value, str):
            value = value.encode(UTF8)
        self._body = value

    @property
    def host(self) -> str:
        return urlparse.urlsplit(self.url).netloc.lower()

    @property
    def path(self) -> str:
        return urlparse.urlsplit(self.url).path or "/"

    @property
    def query(self) -> str:
        return urlparse.urlsplit(self.url).query

    def __repr__(self) -> str:
        return f"<AWSRequest {self.method} {self.url} service={self.service} region={self.region}>"
