from __future__ import annotations

import pytest

from awsauth import errors
from awsauth.errorcode import ER_CREDENTIALS_NOT_FOUND, ER_MISSING_SIGNING_CREDENTIALS


def test_errno_is_prefixed():
    ex = errors.CredentialsNotFound(
        msg="Can't find AWS credentials.", errno=ER_CREDENTIALS_NOT_FOUND
    )
    assert ex.msg == f"{ER_CREDENTIALS_NOT_FOUND:06d}: Can't find AWS credentials."
    assert ex.raw_msg == "Can't find AWS credentials."
    assert str(ex) == ex.msg
    assert repr(ex) == ex.msg


def test_detecting_duplicate_detail_insertion():
    original_ex = errors.SigningPrecondition(
        msg="No secret key.", errno=ER_MISSING_SIGNING_CREDENTIALS
    )
    again = errors.SigningPrecondition(
        msg=original_ex.msg,
        errno=ER_MISSING_SIGNING_CREDENTIALS,
        done_format_msg=True,
    )
    assert again.msg == original_ex.msg


def test_defaults():
    ex = errors.Error()
    assert ex.errno == -1
    assert ex.msg == "Unknown error"


def test_args():
    assert errors.Error("msg").args == ("msg",)


@pytest.mark.parametrize(
    "error_class",
    [
        errors.CredentialsNotFound,
        errors.CredentialsFileMalformed,
        errors.MetadataUnavailable,
        errors.SigningPrecondition,
        errors.IdentityLookupError,
    ],
)
def test_hierarchy(error_class):
    with pytest.raises(errors.Error):
        raise error_class(msg="failure", errno=123)
