from __future__ import annotations

from unittest import mock

import pytest
from requests.exceptions import ConnectionError, ConnectTimeout

from awsauth.errorcode import ER_METADATA_REQUEST_FAILED, ER_NOT_ON_EC2_INSTANCE
from awsauth.errors import MetadataUnavailable
from awsauth.instance_metadata import InstanceMetadataClient, fetch_metadata


def test_fetch_returns_raw_text(fake_instance_metadata_service):
    client = InstanceMetadataClient(timeout=0.5)

    assert client.fetch("iam/security-credentials/") == "test-instance-role"
    fake_instance_metadata_service.put_mock.assert_called_once_with(
        "http://169.254.169.254/latest/api/token",
        headers={"X-aws-ec2-metadata-token-ttl-seconds": "21600"},
        timeout=0.5,
    )
    fake_instance_metadata_service.get_mock.assert_called_once_with(
        "http://169.254.169.254/latest/meta-data/iam/security-credentials/",
        headers={"X-aws-ec2-metadata-token": fake_instance_metadata_service.imds_token},
        timeout=0.5,
    )


def test_module_level_fetch(fake_instance_metadata_service):
    assert fetch_metadata("placement/availability-zone") == "eu-west-1b"


def test_url_for_strips_leading_slash():
    client = InstanceMetadataClient(base_url="http://169.254.169.254/")
    assert (
        client.url_for("/iam/info")
        == "http://169.254.169.254/latest/meta-data/iam/info"
    )


def test_not_on_ec2_fails_before_network(unavailable_metadata_service):
    with pytest.raises(MetadataUnavailable) as exc_info:
        InstanceMetadataClient().fetch("iam/info")
    assert exc_info.value.errno == ER_NOT_ON_EC2_INSTANCE
    unavailable_metadata_service.get_mock.assert_not_called()


def test_lambda_sandbox_is_never_an_instance():
    with mock.patch("requests.get") as get_mock, mock.patch("requests.put") as put_mock:
        client = InstanceMetadataClient(environ={"LAMBDA_TASK_ROOT": "/var/task"})
        assert not client.is_available()
        with pytest.raises(MetadataUnavailable):
            client.fetch("iam/info")
    get_mock.assert_not_called()
    put_mock.assert_not_called()


@pytest.mark.parametrize("status_code", [401, 404, 500])
def test_non_success_status(fake_instance_metadata_service, status_code):
    fake_instance_metadata_service.status_overrides["iam/info"] = status_code

    with pytest.raises(MetadataUnavailable) as exc_info:
        InstanceMetadataClient().fetch("iam/info")
    assert exc_info.value.errno == ER_METADATA_REQUEST_FAILED
    assert str(status_code) in exc_info.value.msg


@pytest.mark.parametrize("exception", [ConnectTimeout(), ConnectionError()])
def test_unreachable_endpoint(fake_instance_metadata_service, exception):
    fake_instance_metadata_service.get_mock.side_effect = exception

    with pytest.raises(MetadataUnavailable) as exc_info:
        InstanceMetadataClient().fetch("iam/info")
    assert exc_info.value.errno == ER_METADATA_REQUEST_FAILED
    assert exc_info.value.__cause__ is exception
    assert fake_instance_metadata_service.get_mock.call_count == 1


def test_token_required_by_service(fake_instance_metadata_service):
    fake_instance_metadata_service.require_token = True

    assert InstanceMetadataClient().fetch("iam/info").startswith("{")


def test_falls_back_to_imdsv1_without_token(fake_instance_metadata_service):
    fake_instance_metadata_service.imds_token = None

    assert InstanceMetadataClient().fetch("placement/availability-zone") == "eu-west-1b"
    assert fake_instance_metadata_service.put_mock.call_count == 1
    assert fake_instance_metadata_service.get_mock.call_args.kwargs["headers"] == {}


def test_unreachable_token_endpoint_falls_back_to_imdsv1(
    fake_instance_metadata_service,
):
    fake_instance_metadata_service.put_mock.side_effect = ConnectTimeout()

    assert InstanceMetadataClient().fetch("placement/availability-zone") == "eu-west-1b"
    assert fake_instance_metadata_service.get_mock.call_args.kwargs["headers"] == {}
