"""
AWS credential resolution without boto3.

Resolves credentials in the order: environment, shared credentials file, EC2
instance metadata. The first source whose trigger fires is the only one used:
a triggered source that fails ends resolution instead of falling through.
"""

from __future__ import annotations

import configparser
import json
import logging
import os
from typing import Callable, Mapping, NamedTuple

from .constants import (
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_PROFILE,
    ENV_ACCESS_KEY_ID,
    ENV_CONFIG_FILE,
    ENV_DEFAULT_PROFILE,
    ENV_DEFAULT_REGION,
    ENV_PROFILE,
    ENV_REGION,
    ENV_SECRET_ACCESS_KEY,
    ENV_SESSION_TOKEN,
    ENV_SHARED_CREDENTIALS_FILE,
    ENV_USER_ARN,
    FILE_ACCESS_KEY_ID,
    FILE_SECRET_ACCESS_KEY,
    IMDS_AVAILABILITY_ZONE_KEY,
    IMDS_IAM_INFO_KEY,
    IMDS_SECURITY_CREDENTIALS_KEY,
)
from .credentials import AWSCredentials
from .errorcode import (
    ER_CREDENTIALS_FILE_MALFORMED,
    ER_CREDENTIALS_NOT_FOUND,
    ER_METADATA_MALFORMED,
    ER_MISSING_ACCESS_KEY,
    ER_MISSING_PROFILE,
    ER_MISSING_SECRET_KEY,
)
from .errors import CredentialsFileMalformed, CredentialsNotFound, MetadataUnavailable
from .instance_metadata import InstanceMetadataClient

logger = logging.getLogger(__name__)


class CredentialSource(NamedTuple):
    """One link of the credential chain."""

    name: str
    is_triggered: Callable[[], bool]
    load: Callable[[], AWSCredentials]


def credentials_file_path(environ: Mapping[str, str] | None = None) -> str:
    environ = os.environ if environ is None else environ
    path = (
        environ.get(ENV_SHARED_CREDENTIALS_FILE)
        or environ.get(ENV_CONFIG_FILE)
        or DEFAULT_CREDENTIALS_FILE
    )
    return os.path.expanduser(path)


def credentials_profile(environ: Mapping[str, str] | None = None) -> str:
    environ = os.environ if environ is None else environ
    return (
        environ.get(ENV_PROFILE) or environ.get(ENV_DEFAULT_PROFILE) or DEFAULT_PROFILE
    )


class CredentialResolver:
    """Walks the credential chain and produces an :class:`AWSCredentials`.

    Args:
        environ: Environment to read, defaults to ``os.environ``.
        metadata_client: Client used for the instance metadata source. One
          bound to ``environ`` is created when omitted.
        logger: Where resolution diagnostics go; credentials are only ever
          logged in their masked ``repr`` form.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        metadata_client: InstanceMetadataClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.metadata_client = metadata_client or InstanceMetadataClient(
            environ=self.environ
        )
        self.logger = logger or logging.getLogger(__name__)

    def sources(self) -> tuple[CredentialSource, ...]:
        return (
            CredentialSource(
                "environment", self._env_triggered, self.load_env_credentials
            ),
            CredentialSource(
                "credentials file", self._file_triggered, self.load_file_credentials
            ),
            CredentialSource(
                "instance metadata",
                self.metadata_client.is_available,
                self.load_instance_credentials,
            ),
        )

    def resolve(self) -> AWSCredentials:
        for source in self.sources():
            if not source.is_triggered():
                continue
            self.logger.debug("Loading AWS credentials from %s", source.name)
            credentials = source.load()
            self.logger.debug("Loaded AWS credentials: %r", credentials)
            return credentials
        raise CredentialsNotFound(
            msg="Can't find AWS credentials in the environment, a credentials file or instance metadata.",
            errno=ER_CREDENTIALS_NOT_FOUND,
        )

    def _env_triggered(self) -> bool:
        return ENV_ACCESS_KEY_ID in self.environ

    def load_env_credentials(self) -> AWSCredentials:
        access_key_id = self.environ[ENV_ACCESS_KEY_ID]
        if not access_key_id:
            raise CredentialsNotFound(
                msg=f"{ENV_ACCESS_KEY_ID} is set but empty.",
                errno=ER_MISSING_ACCESS_KEY,
            )
        secret_key = self.environ.get(ENV_SECRET_ACCESS_KEY)
        if not secret_key:
            raise CredentialsNotFound(
                msg=f"{ENV_ACCESS_KEY_ID} is set but {ENV_SECRET_ACCESS_KEY} is missing.",
                errno=ER_MISSING_SECRET_KEY,
            )
        return AWSCredentials(
            access_key_id,
            secret_key,
            self.environ.get(ENV_SESSION_TOKEN, ""),
            self.environ.get(ENV_USER_ARN, ""),
        )

    def _file_triggered(self) -> bool:
        return os.path.isfile(credentials_file_path(self.environ))

    def load_file_credentials(self) -> AWSCredentials:
        path = credentials_file_path(self.environ)
        profile = credentials_profile(self.environ)

        parser = configparser.ConfigParser(interpolation=None)
        try:
            with open(path, encoding="utf-8") as f:
                parser.read_file(f)
        except (OSError, configparser.Error) as exc:
            raise CredentialsFileMalformed(
                msg=f"Can't read credentials file {path}: {exc}",
                errno=ER_CREDENTIALS_FILE_MALFORMED,
            ) from exc

        if not parser.has_section(profile):
            raise CredentialsFileMalformed(
                msg=f"Profile '{profile}' not found in {path}.",
                errno=ER_MISSING_PROFILE,
            )
        section = parser[profile]
        missing = [
            key
            for key in (FILE_ACCESS_KEY_ID, FILE_SECRET_ACCESS_KEY)
            if not section.get(key)
        ]
        if missing:
            raise CredentialsFileMalformed(
                msg=f"Profile '{profile}' in {path} is missing: {', '.join(missing)}",
                errno=ER_CREDENTIALS_FILE_MALFORMED,
            )
        return AWSCredentials(
            section[FILE_ACCESS_KEY_ID].strip(), section[FILE_SECRET_ACCESS_KEY].strip()
        )

    def load_instance_credentials(self) -> AWSCredentials:
        """Instance-profile credentials from the EC2 metadata service."""
        info = _parse_metadata_json(
            IMDS_IAM_INFO_KEY, self.metadata_client.fetch(IMDS_IAM_INFO_KEY)
        )
        name = self.metadata_client.fetch(IMDS_SECURITY_CREDENTIALS_KEY).strip()
        key = f"{IMDS_SECURITY_CREDENTIALS_KEY}{name}"
        data = _parse_metadata_json(key, self.metadata_client.fetch(key))
        try:
            credentials = AWSCredentials(
                data["AccessKeyId"],
                data["SecretAccessKey"],
                data.get("Token", ""),
                info["InstanceProfileArn"],
            )
        except KeyError as exc:
            raise MetadataUnavailable(
                msg=f"Instance metadata is missing {exc}.",
                errno=ER_METADATA_MALFORMED,
            ) from exc
        if not credentials.access_key_id or not credentials.secret_key:
            raise MetadataUnavailable(
                msg=f"Instance metadata '{key}' has an empty AccessKeyId or SecretAccessKey.",
                errno=ER_METADATA_MALFORMED,
            )
        return credentials


def _parse_metadata_json(key: str, text: str) -> dict:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise MetadataUnavailable(
            msg=f"Instance metadata '{key}' is not valid JSON.",
            errno=ER_METADATA_MALFORMED,
        ) from exc
    if not isinstance(data, dict):
        raise MetadataUnavailable(
            msg=f"Instance metadata '{key}' is not a JSON object.",
            errno=ER_METADATA_MALFORMED,
        )
    return data


def resolve_credentials(
    environ: Mapping[str, str] | None = None,
    metadata_client: InstanceMetadataClient | None = None,
    logger: logging.Logger | None = None,
) -> AWSCredentials:
    """Resolve credentials using the default chain (environment, credentials file, instance metadata)."""
    return CredentialResolver(environ, metadata_client, logger).resolve()


def get_region(
    environ: Mapping[str, str] | None = None,
    metadata_client: InstanceMetadataClient | None = None,
) -> str | None:
    """Return the current AWS region if it can be discovered."""
    environ = os.environ if environ is None else environ
    if region := environ.get(ENV_REGION) or environ.get(ENV_DEFAULT_REGION):
        return region

    metadata_client = metadata_client or InstanceMetadataClient(environ=environ)
    if not metadata_client.is_available():
        return None
    try:
        az = metadata_client.fetch(IMDS_AVAILABILITY_ZONE_KEY).strip()
    except MetadataUnavailable as exc:
        logger.debug("IMDS region lookup failed: %s", exc, exc_info=True)
        return None
    return az[:-1] if az and az[-1].isalpha() else None
