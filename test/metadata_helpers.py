#!/usr/bin/env python
from __future__ import annotations

import json
import logging
from unittest import mock
from urllib.parse import urlparse

from requests.exceptions import ConnectTimeout, HTTPError
from requests.models import Response

logger = logging.getLogger(__name__)

METADATA_PREFIX = "/latest/meta-data/"
TOKEN_PATH = "/latest/api/token"
TOKEN_HEADER = "X-aws-ec2-metadata-token"


def build_response(content: bytes, status_code: int = 200, headers=None) -> Response:
    """Builds a requests.Response object with the given status code and content."""
    response = Response()
    response.status_code = status_code
    response._content = content
    response.headers = headers or {}
    return response


class FakeInstanceMetadataService:
    """Emulates the EC2 instance metadata service of an instance with a profile attached.

    Entering the context manager makes the process look like an EC2 instance and
    routes requests.get() calls to this object.
    """

    def __init__(self, on_ec2: bool = True):
        self.on_ec2 = on_ec2
        self.reset_defaults()

    def reset_defaults(self):
        # Defaults used for the metadata documents. Can be overriden in individual tests.
        self.profile_name = "test-instance-role"
        self.instance_profile_arn = (
            "arn:aws:iam::123456789012:instance-profile/test-instance-role"
        )
        self.access_key_id = "ASIAEXAMPLEINSTANCE"
        self.secret_access_key = "instanceSecretKey/EXAMPLE"
        self.token = "IQoJb3JpZ2luX2VjEPr//////////wEaCXVzLWVhc3QtMSJH"
        self.availability_zone = "eu-west-1b"
        # IMDSv2 session token handed out on PUT; None emulates an IMDSv1-only service.
        self.imds_token: str | None = "imds-session-token-EXAMPLE"
        self.require_token = False
        self.status_overrides: dict[str, int] = {}
        self.requested_keys: list[str] = []

    @property
    def expected_hostnames(self):
        return ["169.254.169.254"]

    def documents(self) -> dict[str, bytes]:
        return {
            "iam/info": json.dumps(
                {
                    "Code": "Success",
                    "InstanceProfileArn": self.instance_profile_arn,
                    "InstanceProfileId": "AIPAEXAMPLE",
                }
            ).encode("utf-8"),
            "iam/security-credentials/": self.profile_name.encode("utf-8"),
            f"iam/security-credentials/{self.profile_name}": json.dumps(
                {
                    "Code": "Success",
                    "Type": "AWS-HMAC",
                    "AccessKeyId": self.access_key_id,
                    "SecretAccessKey": self.secret_access_key,
                    "Token": self.token,
                    "Expiration": "2030-01-01T00:00:00Z",
                }
            ).encode("utf-8"),
            "placement/availability-zone": self.availability_zone.encode("utf-8"),
        }

    def put(self, url, headers=None, timeout=None, **kwargs):
        """Entry point for the requests.put mock, the IMDSv2 token endpoint."""
        logger.debug(f"Received request: PUT {url}")
        parsed_url = urlparse(url)
        if parsed_url.hostname not in self.expected_hostnames:
            raise ConnectTimeout()
        if parsed_url.path != TOKEN_PATH or self.imds_token is None:
            return build_response(b"Forbidden", status_code=403)
        return build_response(self.imds_token.encode("utf-8"))

    def __call__(self, url, headers=None, timeout=None, **kwargs):
        """Entry point for the requests.get mock."""
        logger.debug(f"Received request: GET {url}")
        parsed_url = urlparse(url)
        if parsed_url.hostname not in self.expected_hostnames:
            raise ConnectTimeout()
        if not parsed_url.path.startswith(METADATA_PREFIX):
            raise HTTPError()
        if self.require_token and (headers or {}).get(TOKEN_HEADER) != self.imds_token:
            return build_response(b"Unauthorized", status_code=401)

        key = parsed_url.path[len(METADATA_PREFIX) :]
        self.requested_keys.append(key)
        if key in self.status_overrides:
            return build_response(b"", status_code=self.status_overrides[key])
        document = self.documents().get(key)
        if document is None:
            return build_response(b"Not Found", status_code=404)
        return build_response(document)

    def __enter__(self):
        self.patchers = [
            mock.patch("requests.get", side_effect=self),
            mock.patch("requests.put", side_effect=self.put),
            mock.patch(
                "awsauth.instance_metadata.is_ec2_instance", return_value=self.on_ec2
            ),
        ]
        self.mocks = [patcher.__enter__() for patcher in self.patchers]
        return self

    @property
    def get_mock(self) -> mock.MagicMock:
        return self.mocks[0]

    @property
    def put_mock(self) -> mock.MagicMock:
        return self.mocks[1]

    def __exit__(self, *args, **kwargs):
        for patcher in reversed(self.patchers):
            patcher.__exit__(*args, **kwargs)
