"""Various constants."""

from __future__ import annotations

import os

UTF8 = "utf-8"

# Environment variables consumed by the credential chain
ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN = "AWS_SESSION_TOKEN"
ENV_USER_ARN = "AWS_USER_ARN"
ENV_SHARED_CREDENTIALS_FILE = "AWS_SHARED_CREDENTIALS_FILE"
ENV_CONFIG_FILE = "AWS_CONFIG_FILE"
ENV_PROFILE = "AWS_PROFILE"
ENV_DEFAULT_PROFILE = "AWS_DEFAULT_PROFILE"
ENV_REGION = "AWS_REGION"
ENV_DEFAULT_REGION = "AWS_DEFAULT_REGION"
ENV_LAMBDA_TASK_ROOT = "LAMBDA_TASK_ROOT"

DEFAULT_PROFILE = "default"
DEFAULT_CREDENTIALS_FILE = os.path.join("~", ".aws", "credentials")

# Keys read from a credentials file profile section
FILE_ACCESS_KEY_ID = "aws_access_key_id"
FILE_SECRET_ACCESS_KEY = "aws_secret_access_key"

# EC2 instance metadata service
IMDS_BASE_URL = "http://169.254.169.254"
IMDS_METADATA_PATH = "/latest/meta-data/"
IMDS_TOKEN_PATH = "/latest/api/token"
IMDS_TOKEN_HEADER = "X-aws-ec2-metadata-token"
IMDS_TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
IMDS_TOKEN_TTL_SECONDS = "21600"
IMDS_IAM_INFO_KEY = "iam/info"
IMDS_SECURITY_CREDENTIALS_KEY = "iam/security-credentials/"
IMDS_AVAILABILITY_ZONE_KEY = "placement/availability-zone"
DEFAULT_METADATA_TIMEOUT = 1.0

# Files probed to recognise an EC2 hypervisor
HYPERVISOR_UUID_PATH = "/sys/hypervisor/uuid"
DMI_PRODUCT_UUID_PATH = "/sys/devices/virtual/dmi/id/product_uuid"

# Request signing
SIGV4_ALGORITHM = "AWS4-HMAC-SHA256"
SIGV4_KEY_PREFIX = "AWS4"
SIGV4_TERMINATOR = "aws4_request"
SIGV4_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"
SIGV2_METHOD = "HmacSHA256"
SIGV2_VERSION = "2"
SIGV2_EXPIRES_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
SIGV2_EXPIRES_AFTER_SECONDS = 120
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

HTTP_HEADER_AUTHORIZATION = "Authorization"
HTTP_HEADER_CONTENT_TYPE = "Content-Type"
HTTP_HEADER_CONTENT_MD5 = "Content-MD5"
HTTP_HEADER_HOST = "host"
HTTP_HEADER_AMZ_DATE = "x-amz-date"
HTTP_HEADER_AMZ_CONTENT_SHA256 = "x-amz-content-sha256"
HTTP_HEADER_AMZ_SECURITY_TOKEN = "x-amz-security-token"

# Security token service
STS_SERVICE = "sts"
STS_GLOBAL_REGION = "us-east-1"
STS_API_VERSION = "2011-06-15"
