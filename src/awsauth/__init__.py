#!/usr/bin/env python
# AWS credential resolution and request signing
#
from __future__ import annotations

import logging
from logging import NullHandler

from .credentials import AWSCredentials
from .errors import (
    CredentialsFileMalformed,
    CredentialsNotFound,
    Error,
    IdentityLookupError,
    MetadataUnavailable,
    SigningPrecondition,
)
from .identity import get_caller_identity, lookup_for_region
from .instance_metadata import InstanceMetadataClient
from .platform_detection import is_aws_lambda, is_ec2_instance
from .request import AWSRequest
from .resolver import CredentialResolver, get_region, resolve_credentials
from .signer import SigningAlgorithm, sign
from .version import VERSION

logging.getLogger(__name__).addHandler(NullHandler())

__version__ = ".".join(str(v) for v in VERSION if v is not None)

__all__ = [
    "AWSCredentials",
    "AWSRequest",
    "CredentialResolver",
    "CredentialsFileMalformed",
    "CredentialsNotFound",
    "Error",
    "IdentityLookupError",
    "InstanceMetadataClient",
    "MetadataUnavailable",
    "SigningAlgorithm",
    "SigningPrecondition",
    "get_caller_identity",
    "get_region",
    "is_aws_lambda",
    "is_ec2_instance",
    "lookup_for_region",
    "resolve_credentials",
    "sign",
]
