"""Client for the EC2 instance metadata service.

The service listens on a link-local address that is only reachable from inside
an EC2 instance, so every fetch first checks that we are on one.

Requests carry an IMDSv2 session token when the service hands one out, and go
out as plain IMDSv1 GETs otherwise.
"""

from __future__ import annotations

import logging
from typing import Mapping

import requests

from .constants import (
    DEFAULT_METADATA_TIMEOUT,
    IMDS_BASE_URL,
    IMDS_METADATA_PATH,
    IMDS_TOKEN_HEADER,
    IMDS_TOKEN_PATH,
    IMDS_TOKEN_TTL_HEADER,
    IMDS_TOKEN_TTL_SECONDS,
)
from .errorcode import ER_METADATA_REQUEST_FAILED, ER_NOT_ON_EC2_INSTANCE
from .errors import MetadataUnavailable
from .platform_detection import is_ec2_instance

logger = logging.getLogger(__name__)


class InstanceMetadataClient:
    def __init__(
        self,
        timeout: float = DEFAULT_METADATA_TIMEOUT,
        environ: Mapping[str, str] | None = None,
        base_url: str = IMDS_BASE_URL,
    ) -> None:
        self.timeout = timeout
        self.environ = environ
        self.base_url = base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.base_url}{IMDS_METADATA_PATH}{key.lstrip('/')}"

    def is_available(self) -> bool:
        return is_ec2_instance(self.environ)

    def session_token(self) -> str | None:
        """Ask for an IMDSv2 session token, ``None`` when the service gives none."""
        try:
            response = requests.put(
                f"{self.base_url}{IMDS_TOKEN_PATH}",
                headers={IMDS_TOKEN_TTL_HEADER: IMDS_TOKEN_TTL_SECONDS},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.debug("IMDSv2 token request failed: %s", exc)
            return None
        return response.text if response.ok else None

    def fetch(self, key: str) -> str:
        """Fetch metadata ``key``, e.g. ``iam/info``, and return the raw body text."""
        if not self.is_available():
            raise MetadataUnavailable(
                msg="Instance metadata is only available on an EC2 instance.",
                errno=ER_NOT_ON_EC2_INSTANCE,
            )

        token = self.session_token()
        headers = {IMDS_TOKEN_HEADER: token} if token else {}

        url = self.url_for(key)
        logger.debug("Fetching instance metadata: %s", url)
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise MetadataUnavailable(
                msg=f"Instance metadata request for '{key}' failed: {exc}",
                errno=ER_METADATA_REQUEST_FAILED,
            ) from exc

        if not response.ok:
            raise MetadataUnavailable(
                msg=f"Instance metadata request for '{key}' returned HTTP {response.status_code}.",
                errno=ER_METADATA_REQUEST_FAILED,
            )
        return response.text


def fetch_metadata(key: str, timeout: float = DEFAULT_METADATA_TIMEOUT) -> str:
    return InstanceMetadataClient(timeout=timeout).fetch(key)
