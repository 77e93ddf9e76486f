from __future__ import annotations

import pytest

from ..metadata_helpers import FakeInstanceMetadataService


@pytest.fixture
def base_environ(tmp_path):
    """An environment with no AWS settings whose credentials file does not exist."""
    return {"AWS_SHARED_CREDENTIALS_FILE": str(tmp_path / "no-such-credentials")}


@pytest.fixture
def credentials_file(tmp_path):
    """Writes a credentials file and returns its path."""

    def write(content: str):
        path = tmp_path / "credentials"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def fake_instance_metadata_service():
    """Emulates an EC2 instance with an instance profile attached."""
    with FakeInstanceMetadataService() as server:
        yield server


@pytest.fixture
def unavailable_metadata_service():
    """Emulates a host that is not an EC2 instance."""
    with FakeInstanceMetadataService(on_ec2=False) as server:
        yield server
