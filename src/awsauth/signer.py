"""AWS request signing.

Signature Version 2 (legacy, signature carried as a form parameter):
http://docs.aws.amazon.com/general/latest/gr/signature-version-2.html

Signature Version 4 (signature carried in the Authorization header):
http://docs.aws.amazon.com/general/latest/gr/signature-version-4.html
"""

from __future__ import annotations

import base64
import datetime as _dt
import hashlib as _hashlib
import hmac as _hmac
import logging
from enum import Enum, unique
from typing import Mapping

from .canonical import (
    canonical_headers,
    canonical_path,
    canonical_query_string,
    canonical_request_v4,
    content_md5,
    parse_query,
    payload_hash,
    string_to_sign_v2,
    uri_encode,
)
from .constants import (
    FORM_CONTENT_TYPE,
    HTTP_HEADER_AMZ_CONTENT_SHA256,
    HTTP_HEADER_AMZ_DATE,
    HTTP_HEADER_AMZ_SECURITY_TOKEN,
    HTTP_HEADER_AUTHORIZATION,
    HTTP_HEADER_CONTENT_MD5,
    HTTP_HEADER_CONTENT_TYPE,
    HTTP_HEADER_HOST,
    SIGV2_EXPIRES_AFTER_SECONDS,
    SIGV2_EXPIRES_FORMAT,
    SIGV2_METHOD,
    SIGV2_VERSION,
    SIGV4_ALGORITHM,
    SIGV4_DATETIME_FORMAT,
    SIGV4_KEY_PREFIX,
    SIGV4_TERMINATOR,
    UTF8,
)
from .credentials import AWSCredentials
from .errorcode import ER_MALFORMED_FORM_BODY, ER_MISSING_SIGNING_CREDENTIALS
from .errors import SigningPrecondition
from .request import AWSRequest

logger = logging.getLogger(__name__)

_LEGACY_SERVICES = frozenset({"sdb", "importexport"})


@unique
class SigningAlgorithm(Enum):
    """Signature scheme a service accepts."""

    LEGACY = "v2"
    """Signature Version 2, form-parameter signing still required by SimpleDB and Import/Export."""
    STANDARD = "v4"
    """Signature Version 4, header signing used by every other service."""

    @staticmethod
    def for_service(service: str) -> SigningAlgorithm:
        return (
            SigningAlgorithm.LEGACY
            if service in _LEGACY_SERVICES
            else SigningAlgorithm.STANDARD
        )


def _sign(key: bytes, msg: str) -> bytes:
    """Return an HMAC-SHA256 of *msg* keyed with *key*."""
    return _hmac.new(key, msg.encode(UTF8), _hashlib.sha256).digest()


def _utc_timestamp(timestamp: _dt.datetime | None) -> _dt.datetime:
    if timestamp is None:
        timestamp = _dt.datetime.now(_dt.timezone.utc)
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=_dt.timezone.utc)
    else:
        timestamp = timestamp.astimezone(_dt.timezone.utc)
    return timestamp.replace(microsecond=0)


def _check_credentials(credentials: AWSCredentials | None) -> AWSCredentials:
    if credentials is None or not credentials.access_key_id:
        raise SigningPrecondition(
            msg="Can't sign a request without an AWS access key id.",
            errno=ER_MISSING_SIGNING_CREDENTIALS,
        )
    if not credentials.secret_key:
        raise SigningPrecondition(
            msg="Can't sign a request without an AWS secret key.",
            errno=ER_MISSING_SIGNING_CREDENTIALS,
        )
    return credentials


def sign(
    request: AWSRequest,
    credentials: AWSCredentials | None = None,
    timestamp: _dt.datetime | None = None,
) -> AWSRequest:
    """Sign ``request`` in place with the algorithm its service requires.

    Parameters:

    request
        The request description; its headers (and for v2 its body) are rewritten.
    credentials
        Signing credentials, ``request.credentials`` when omitted.
    timestamp
        Signing time, now when omitted. Naive values are taken as UTC.
    """
    credentials = _check_credentials(credentials or request.credentials)
    timestamp = _utc_timestamp(timestamp)

    algorithm = SigningAlgorithm.for_service(request.service)
    logger.debug("Signing %r with %s", request, algorithm.value)
    if algorithm is SigningAlgorithm.LEGACY:
        sign_v2(request, credentials, timestamp)
    else:
        sign_v4(request, credentials, timestamp)
    return request


def _form_encode(params: Mapping[str, str]) -> str:
    return "&".join(f"{uri_encode(k)}={uri_encode(v)}" for k, v in params.items())


def sign_v2(
    request: AWSRequest, credentials: AWSCredentials, timestamp: _dt.datetime
) -> None:
    """Add Signature Version 2 authentication parameters to the form body.

    The body must be a UTF-8 form-encoded string; anything else raises
    :class:`SigningPrecondition`.
    """
    try:
        form = request.body.decode(UTF8)
    except UnicodeDecodeError as exc:
        raise SigningPrecondition(
            msg=f"Can't sign a form body that is not valid UTF-8: {exc}",
            errno=ER_MALFORMED_FORM_BODY,
        ) from exc
    query = dict(parse_query(form))
    query.pop("Signature", None)
    request.headers.pop(HTTP_HEADER_AUTHORIZATION, None)

    request.headers[HTTP_HEADER_CONTENT_TYPE] = FORM_CONTENT_TYPE

    expires = timestamp + _dt.timedelta(seconds=SIGV2_EXPIRES_AFTER_SECONDS)
    query["AWSAccessKeyId"] = credentials.access_key_id
    query["Expires"] = expires.strftime(SIGV2_EXPIRES_FORMAT)
    query["SignatureVersion"] = SIGV2_VERSION
    query["SignatureMethod"] = SIGV2_METHOD
    if credentials.session_token:
        query["SecurityToken"] = credentials.session_token

    query = {k: query[k] for k in sorted(query)}
    to_sign = string_to_sign_v2(
        request.host, request.path, canonical_query_string(query.items())
    )

    digest = _hmac.new(
        credentials.secret_key.encode(UTF8), to_sign.encode(UTF8), _hashlib.sha256
    ).digest()
    query["Signature"] = base64.b64encode(digest).decode(UTF8).strip()

    request.body = _form_encode(query)


def derive_signing_key(secret_key: str, date: str, region: str, service: str) -> bytes:
    """Chain HMAC-SHA256 from ``AWS4<secret>`` through every scope component."""
    key = (SIGV4_KEY_PREFIX + secret_key).encode(UTF8)
    for element in (date, region, service, SIGV4_TERMINATOR):
        key = _sign(key, element)
    return key


def compute_signature_v4(
    method: str,
    url_path: str,
    query: str,
    headers: Mapping[str, str],
    content_hash: str,
    secret_key: str,
    amz_date: str,
    region: str,
    service: str,
) -> tuple[str, str, str]:
    """Return ``(signature, credential_scope, signed_headers)`` for an already prepared request.

    ``headers`` are signed exactly as given; ``url_path`` is the raw url path
    and ``query`` the raw query string.
    """
    short_date = amz_date[:8]
    credential_scope = f"{short_date}/{region}/{service}/{SIGV4_TERMINATOR}"

    canonical_hdrs, signed_headers = canonical_headers(headers)
    canonical_request = canonical_request_v4(
        method,
        canonical_path(url_path, service),
        canonical_query_string(parse_query(query)),
        canonical_hdrs,
        signed_headers,
        content_hash,
    )
    canonical_hash = _hashlib.sha256(canonical_request.encode(UTF8)).hexdigest()

    string_to_sign = "\n".join(
        (SIGV4_ALGORITHM, amz_date, credential_scope, canonical_hash)
    )
    signing_key = derive_signing_key(secret_key, short_date, region, service)
    signature = _hmac.new(
        signing_key, string_to_sign.encode(UTF8), _hashlib.sha256
    ).hexdigest()
    return signature, credential_scope, signed_headers


def sign_v4(
    request: AWSRequest, credentials: AWSCredentials, timestamp: _dt.datetime
) -> None:
    """Add Signature Version 4 authentication headers."""
    amz_date = timestamp.strftime(SIGV4_DATETIME_FORMAT)
    content_hash = payload_hash(request.body)

    request.headers.pop(HTTP_HEADER_AUTHORIZATION, None)
    if HTTP_HEADER_HOST not in request.headers:
        request.headers[HTTP_HEADER_HOST] = request.host
    request.headers[HTTP_HEADER_AMZ_CONTENT_SHA256] = content_hash
    request.headers[HTTP_HEADER_AMZ_DATE] = amz_date
    request.headers[HTTP_HEADER_CONTENT_MD5] = content_md5(request.body)
    if credentials.session_token:
        request.headers[HTTP_HEADER_AMZ_SECURITY_TOKEN] = credentials.session_token

    signature, credential_scope, signed_headers = compute_signature_v4(
        request.method,
        request.path,
        request.query,
        request.headers,
        content_hash,
        credentials.secret_key,
        amz_date,
        request.region,
        request.service,
    )

    request.headers[HTTP_HEADER_AUTHORIZATION] = (
        f"{SIGV4_ALGORITHM} "
        f"Credential={credentials.access_key_id}/{credential_scope}, "
        f"SignedHeaders={signed_headers}, "
        f"Signature={signature}"
    )
