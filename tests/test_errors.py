import pytest

from clawkit.errors import (
    AppError,
    BadRequest,
    CircuitOpen,
    ConfigError,
    GatewayTimeout,
    InternalError,
    IoError,
    LlmError,
    RateLimited,
    RedisError,
    SerdeError,
    TaskNotFound,
    error_response,
)


@pytest.mark.parametrize(
    "cls, status, expected_error",
    [
        (BadRequest, 400, "BAD_REQUEST"),
        (TaskNotFound, 404, "TASK_NOT_FOUND"),
        (RateLimited, 429, "RATE_LIMITED"),
        (CircuitOpen, 503, "CIRCUIT_OPEN"),
        (RedisError, 500, "REDIS_ERROR"),
        (LlmError, 502, "LLM_ERROR"),
        (ConfigError, 500, "CONFIG_ERROR"),
        (IoError, 500, "IO_ERROR"),
        (SerdeError, 422, "SERDE_ERROR"),
        (InternalError, 500, "INTERNAL_ERROR"),
        (GatewayTimeout, 504, "TIMEOUT"),
    ],
)
def test_status_and_code_mapping(cls, status, expected_error):
    status_out, body = error_response(cls("boom"))
    assert status_out == status
    assert body["error"] == expected_error
    assert body["message"] == "boom"


def test_all_errors_are_app_errors():
    with pytest.raises(AppError) as excinfo:
        raise TaskNotFound("chat")
    status, body = error_response(excinfo.value)
    assert status == 404
    assert body["error"] == "TASK_NOT_FOUND"
    assert body["message"] == "chat"


def test_message_without_payload_uses_default():
    err = RateLimited()
    _, body = error_response(err)
    assert body["message"] == err.default_message
    assert str(err) == err.message


def test_foreign_exception_maps_to_internal():
    status, body = error_response(ValueError("oops"))
    assert status == 500
    assert body == {"error": "INTERNAL_ERROR", "message": "oops"}