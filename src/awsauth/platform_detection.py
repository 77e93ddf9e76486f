from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import Mapping

from .constants import DMI_PRODUCT_UUID_PATH, ENV_LAMBDA_TASK_ROOT, HYPERVISOR_UUID_PATH

logger = logging.getLogger(__name__)

_EC2_UUID_PREFIX = "ec2"


class _DetectionState(Enum):
    """Internal enum to represent the detection state of a platform."""

    DETECTED = "detected"
    NOT_DETECTED = "not_detected"


def is_aws_lambda(environ: Mapping[str, str] | None = None) -> bool:
    """
    Check if the current environment is running in an AWS Lambda sandbox.

    If the LAMBDA_TASK_ROOT environment variable exists, then we assume we are
    running in AWS Lambda.
    """
    environ = os.environ if environ is None else environ
    return ENV_LAMBDA_TASK_ROOT in environ


def _probe_uuid_file(path: str) -> _DetectionState:
    try:
        with open(path, encoding="ascii", errors="replace") as f:
            prefix = f.read(len(_EC2_UUID_PREFIX))
    except OSError:
        return _DetectionState.NOT_DETECTED
    return (
        _DetectionState.DETECTED
        if prefix.lower() == _EC2_UUID_PREFIX
        else _DetectionState.NOT_DETECTED
    )


def is_ec2_instance(
    environ: Mapping[str, str] | None = None,
    uuid_paths: tuple[str, ...] = (HYPERVISOR_UUID_PATH, DMI_PRODUCT_UUID_PATH),
) -> bool:
    """
    Check if the current environment is running on an AWS EC2 instance.

    Xen based instances expose the hypervisor UUID under /sys/hypervisor, Nitro
    based ones only through DMI; on EC2 both start with "ec2". Lambda sandboxes
    run on EC2 hardware but have no instance metadata, so they never count.
    Always False off Linux.

    Args:
        environ: Environment to inspect, defaults to os.environ.
        uuid_paths: Files to probe for the EC2 UUID prefix.

    Returns:
        bool: True if running on a genuine EC2 instance.
    """
    if is_aws_lambda(environ):
        return False
    if not sys.platform.startswith("linux"):
        return False
    for path in uuid_paths:
        if _probe_uuid_file(path) == _DetectionState.DETECTED:
            logger.debug("EC2 instance detected via %s", path)
            return True
    return False
