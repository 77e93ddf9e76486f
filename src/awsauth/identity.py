"""Caller identity lookup through STS ``GetCallerIdentity``.

Used to fill the lazy ``user_arn``/``account_number`` fields of
:class:`~awsauth.credentials.AWSCredentials`.
"""

from __future__ import annotations

import logging
from typing import Callable

import requests

from .constants import (
    FORM_CONTENT_TYPE,
    STS_API_VERSION,
    STS_GLOBAL_REGION,
    STS_SERVICE,
)
from .credentials import AWSCredentials
from .errorcode import ER_IDENTITY_LOOKUP_FAILED, ER_IDENTITY_RESPONSE_MALFORMED
from .errors import IdentityLookupError
from .request import AWSRequest
from .signer import sign

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_TIMEOUT = 10


def sts_hostname(region: str) -> str:
    """Global endpoint for us-east-1, regional endpoint everywhere else."""
    if not region or region == STS_GLOBAL_REGION:
        return "sts.amazonaws.com"
    if region.startswith("cn-"):
        return f"sts.{region}.amazonaws.com.cn"
    return f"sts.{region}.amazonaws.com"


def build_caller_identity_request(
    credentials: AWSCredentials, region: str = STS_GLOBAL_REGION
) -> AWSRequest:
    return AWSRequest(
        method="POST",
        url=f"https://{sts_hostname(region)}/",
        headers={
            "Accept": "application/json",
            "Content-Type": FORM_CONTENT_TYPE,
        },
        body=f"Action=GetCallerIdentity&Version={STS_API_VERSION}",
        service=STS_SERVICE,
        region=region or STS_GLOBAL_REGION,
        credentials=credentials,
    )


def get_caller_identity(
    credentials: AWSCredentials,
    region: str = STS_GLOBAL_REGION,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_IDENTITY_TIMEOUT,
) -> dict[str, str]:
    """Return ``{"Arn": ..., "Account": ...}`` for ``credentials``."""
    request = sign(build_caller_identity_request(credentials, region))
    session = session or requests.Session()
    try:
        response = session.post(
            request.url,
            data=request.body,
            headers=dict(request.headers),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise IdentityLookupError(
            msg=f"GetCallerIdentity request failed: {exc}",
            errno=ER_IDENTITY_LOOKUP_FAILED,
        ) from exc

    if not response.ok:
        raise IdentityLookupError(
            msg=f"GetCallerIdentity returned HTTP {response.status_code}.",
            errno=ER_IDENTITY_LOOKUP_FAILED,
        )

    try:
        result = response.json()["GetCallerIdentityResponse"][
            "GetCallerIdentityResult"
        ]
        identity = {"Arn": result["Arn"], "Account": result["Account"]}
    except (ValueError, KeyError, TypeError) as exc:
        raise IdentityLookupError(
            msg="GetCallerIdentity response is missing Arn or Account.",
            errno=ER_IDENTITY_RESPONSE_MALFORMED,
        ) from exc

    logger.debug("GetCallerIdentity returned %s", identity["Arn"])
    return identity


def lookup_for_region(
    region: str = STS_GLOBAL_REGION,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_IDENTITY_TIMEOUT,
) -> Callable[[AWSCredentials], dict[str, str]]:
    """Build an identity lookup for :meth:`AWSCredentials.ensure_identity`."""

    def lookup(credentials: AWSCredentials) -> dict[str, str]:
        return get_caller_identity(credentials, region, session, timeout)

    return lookup
