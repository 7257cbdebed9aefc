import pytest

from core.errors import ErrorCode, from_storage_error
from core.storage import (
    InvalidObjectKeyError,
    ObjectNotFoundError,
    StorageConfigurationError,
    StorageIOError,
    UnknownStorageProviderError,
)


@pytest.mark.parametrize(
    ("error", "status_code", "code"),
    [
        (ObjectNotFoundError("k"), 404, ErrorCode.NOT_FOUND),
        (StorageConfigurationError("S3 storage is not configured"), 400, ErrorCode.STORAGE_NOT_CONFIGURED),
        (UnknownStorageProviderError("FTP"), 400, ErrorCode.BAD_STORAGE_PROVIDER),
        (InvalidObjectKeyError("../x"), 400, ErrorCode.STORAGE_KEY_INVALID),
        (StorageIOError("disk full"), 500, ErrorCode.STORAGE_IO_FAILED),
    ],
)
def test_storage_errors_map_to_http_errors(error, status_code, code):
    exc = from_storage_error(error)

    assert exc.status_code == status_code
    assert exc.code is code


def test_configuration_message_is_passed_through():
    exc = from_storage_error(StorageConfigurationError("S3 storage is not configured. Set S3_BUCKET in the environment."))

    assert "S3_BUCKET" in exc.message


def test_io_failure_does_not_leak_internal_message():
    exc = from_storage_error(StorageIOError("Unable to write object '/srv/uploads/abc'"))

    assert "/srv/uploads" not in exc.message
