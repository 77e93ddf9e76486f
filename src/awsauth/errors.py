from __future__ import annotations

import logging
from logging import getLogger

logger = getLogger(__name__)


class Error(Exception):
    """Base awsauth exception class."""

    def __init__(
        self,
        msg: str | None = None,
        errno: int | None = None,
        done_format_msg: bool | None = None,
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        self.raw_msg = msg
        self.errno = errno or -1

        if not self.msg:
            self.msg = "Unknown error"

        if self.errno != -1 and not done_format_msg:
            self.msg = f"{self.errno:06d}: {self.msg}"

        if logger.getEffectiveLevel() == logging.DEBUG:
            logger.debug("%s raised: %s", type(self).__name__, self.msg)

    def __repr__(self) -> str:
        return self.__str__()

    def __str__(self) -> str:
        return self.msg


class CredentialsNotFound(Error):
    """Exception for a credential chain in which no source produced credentials."""

    pass


class CredentialsFileMalformed(Error):
    """Exception for a credentials file lacking the selected profile or its keys."""

    pass


class MetadataUnavailable(Error):
    """Exception for an unreachable or unusable instance metadata service."""

    pass


class SigningPrecondition(Error):
    """Exception for a request that can't be signed: empty credentials or a non UTF-8 form body."""

    pass


class IdentityLookupError(Error):
    """Exception for a failed GetCallerIdentity call."""

    pass
