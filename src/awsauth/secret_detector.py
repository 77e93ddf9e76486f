"""The secret detector detects sensitive information.

It masks AWS secrets that might be leaked through logging: secret access keys,
session tokens, credential documents returned by the instance metadata service
and request signatures.
"""
from __future__ import annotations

import logging
import re

MIN_TOKEN_LEN = 16


class SecretDetector(logging.Formatter):
    AWS_KEY_PATTERN = re.compile(
        r"(aws_secret_access_key|secret_access_key|secret_key|aws_session_token|session_token)"
        r"(\s*[=:]\s*)"
        r"(['\"]?)([a-z0-9/+=]{8,})",
        flags=re.IGNORECASE,
    )
    AWS_JSON_SECRET_PATTERN = re.compile(
        r'"(SecretAccessKey|Token|SessionToken)"\s*:\s*"([^"]+)"',
        flags=re.IGNORECASE,
    )
    SECURITY_TOKEN_HEADER_PATTERN = re.compile(
        r"(x-amz-security-token|SecurityToken)([\'\"\s:=]+)([a-z0-9/+=%]{8,})",
        flags=re.IGNORECASE,
    )
    SIGNATURE_PATTERN = re.compile(
        rf"(Signature|X-Amz-Signature)=(?P<secret>[a-z0-9%/+=]{{{MIN_TOKEN_LEN},}})",
        flags=re.IGNORECASE,
    )

    @staticmethod
    def mask_aws_keys(text):
        return SecretDetector.AWS_KEY_PATTERN.sub(r"\1\2\3****", text)

    @staticmethod
    def mask_aws_json_secrets(text):
        return SecretDetector.AWS_JSON_SECRET_PATTERN.sub(r'"\1": "****"', text)

    @staticmethod
    def mask_security_token(text):
        return SecretDetector.SECURITY_TOKEN_HEADER_PATTERN.sub(r"\1\2****", text)

    @staticmethod
    def mask_signature(text):
        return SecretDetector.SIGNATURE_PATTERN.sub(r"\1=****", text)

    @staticmethod
    def mask_secrets(text: str) -> tuple[bool, str, str]:
        """Masks any secrets. This is the method that should be used by outside classes.

        Args:
            text: A string which may contain a secret.

        Returns:
            Whether anything was masked, the masked string and the masking error if any.
        """
        if text is None:
            return (False, None, None)

        masked = False
        err_str = None
        try:
            masked_text = SecretDetector.mask_signature(
                SecretDetector.mask_security_token(
                    SecretDetector.mask_aws_json_secrets(
                        SecretDetector.mask_aws_keys(text)
                    )
                )
            )
            if masked_text != text:
                masked = True
        except Exception as ex:
            # Masking failed, so treat the text as sensitive and drop it
            masked = True
            masked_text = str(ex)
            err_str = str(ex)

        return masked, masked_text, err_str

    def format(self, record: logging.LogRecord) -> str:
        """Wrapper around logging module's formatter.

        This will ensure that the formatted message is free from sensitive credentials.

        Args:
            record: The logging record.

        Returns:
            Formatted desensitized log string.
        """
        try:
            unsanitized_log = super().format(record)
            masked, sanitized_log, err_str = SecretDetector.mask_secrets(
                unsanitized_log
            )
            if masked and err_str is not None:
                sanitized_log = "{} - {} {} - {} - {} - {}".format(
                    record.asctime,
                    record.threadName,
                    "secret_detector.py",
                    "sanitize_log_str",
                    record.levelname,
                    err_str,
                )
        except Exception as ex:
            sanitized_log = "{} - {} {} - {} - {} - {}".format(
                record.asctime,
                record.threadName,
                "secret_detector.py",
                "sanitize_log_str",
                record.levelname,
                "EXCEPTION - " + str(ex),
            )
        return sanitized_log
