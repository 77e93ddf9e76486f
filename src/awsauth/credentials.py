"""AWS security credentials.

``access_key_id`` and ``secret_key`` authenticate API requests. Temporary
credentials (instance profiles, assumed roles) also carry a ``session_token``.
``user_arn`` and ``account_number`` cache the caller identity; they are filled
at most once, on demand, through :meth:`AWSCredentials.ensure_identity`.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Mapping

logger = logging.getLogger(__name__)

IdentityLookup = Callable[["AWSCredentials"], Mapping[str, str]]

_VISIBLE_PREFIX_LEN = 3
_ARN_ACCOUNT_FIELD = 4


def _account_from_arn(arn: str) -> str:
    """Account id of ``arn:partition:service:region:account:resource``, or ``""``."""
    parts = arn.split(":", 5)
    if len(parts) < 6 or parts[0] != "arn":
        return ""
    return parts[_ARN_ACCOUNT_FIELD]


class AWSCredentials:
    """Credential record used to sign requests."""

    def __init__(
        self,
        access_key_id: str,
        secret_key: str,
        session_token: str = "",
        user_arn: str = "",
        account_number: str = "",
    ) -> None:
        self._access_key_id = access_key_id
        self._secret_key = secret_key
        self._session_token = session_token or ""
        self._user_arn = user_arn or ""
        self._account_number = account_number or ""
        self._identity_lock = threading.Lock()

    @property
    def access_key_id(self) -> str:
        return self._access_key_id

    @property
    def secret_key(self) -> str:
        return self._secret_key

    @property
    def session_token(self) -> str:
        return self._session_token

    @property
    def user_arn(self) -> str:
        return self._user_arn

    @property
    def account_number(self) -> str:
        return self._account_number

    def has_identity(self) -> bool:
        return bool(self._user_arn and self._account_number)

    def ensure_identity(self, lookup: IdentityLookup) -> AWSCredentials:
        """Fill ``user_arn`` and ``account_number`` from ``lookup`` if either is empty.

        ``lookup`` receives this record and returns a mapping with ``Arn`` and
        ``Account`` entries, the shape of a GetCallerIdentity result. The fill
        holds a per-record lock, so concurrent callers share a single lookup and
        later callers see the cached values. Fields that are already set are
        never overwritten.

        Both fields always describe the same principal. With ``user_arn``
        already known, the account number is read from that ARN and ``lookup``
        is skipped. Otherwise a lookup result that disagrees with the field
        already known is not used to fill the other one.
        """
        if self.has_identity():
            return self
        with self._identity_lock:
            if self.has_identity():
                return self
            if self._user_arn and not self._account_number:
                self._account_number = _account_from_arn(self._user_arn)
                if self._account_number:
                    return self
            identity = lookup(self)
            if not self._user_arn and (
                not self._account_number
                or identity.get("Account") == self._account_number
            ):
                self._user_arn = identity.get("Arn", "")
            if not self._account_number and identity.get("Arn") == self._user_arn:
                self._account_number = identity.get("Account", "")
            logger.debug("Caller identity resolved: %s", self._user_arn)
        return self

    def get_user_arn(self, lookup: IdentityLookup) -> str:
        """Amazon Resource Name of the configured user, e.g. ``arn:aws:iam::123456789012:user/Bob``."""
        if not self._user_arn:
            self.ensure_identity(lookup)
        return self._user_arn

    def get_account_number(self, lookup: IdentityLookup) -> str:
        """12-digit AWS account number."""
        if not self._account_number:
            self.ensure_identity(lookup)
        return self._account_number

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AWSCredentials):
            return NotImplemented
        return (
            self._access_key_id == other._access_key_id
            and self._secret_key == other._secret_key
            and self._session_token == other._session_token
        )

    def __hash__(self) -> int:
        return hash((self._access_key_id, self._secret_key, self._session_token))

    def __repr__(self) -> str:
        details = self._account_number + self._access_key_id
        if self._secret_key:
            details += f", {self._secret_key[:_VISIBLE_PREFIX_LEN]}..."
        if self._session_token:
            details += f", {self._session_token[:_VISIBLE_PREFIX_LEN]}..."
        prefix = f"{self._user_arn} " if self._user_arn else ""
        return f"{prefix}({details})"

    __str__ = __repr__
