"""
Unit tests for error values and the error boundary.
"""

import json

import pytest

from chat_proxy.errors import (
    UpstreamError,
    ValidationFailure,
    classify_error,
    error_response,
    error_status,
)
from chat_proxy.result import Err, Ok


def body_of(response):
    return json.loads(response.body)


def test_validation_failure_response():
    response = error_response(ValidationFailure(field="top_p", reason="Input should be less than or equal to 1"))

    assert response.status_code == 400
    assert body_of(response) == {"error": '"top_p" Input should be less than or equal to 1'}


@pytest.mark.parametrize(
    "status,expected",
    [(None, 500), (200, 500), (302, 500), (400, 400), (401, 401), (429, 429), (503, 503)],
)
def test_error_status(status, expected):
    error = UpstreamError(status=status, status_text=None, body=None, message="x")

    assert error_status(error) == expected


def test_upstream_error_response_hides_body():
    error = UpstreamError(
        status=401,
        status_text="Unauthorized",
        body={"error": "Invalid credentials in Authorization header"},
        message="Request failed with status code 401",
    )

    response = error_response(error)

    assert response.status_code == 401
    assert body_of(response) == {
        "error": {
            "status": 401,
            "message": "Invalid upstream API key. Please check the proxy configuration.",
        }
    }


def test_upstream_error_log_dict():
    error = UpstreamError(status=429, status_text="Too Many Requests", body="slow", message="m")

    assert error.as_log_dict() == {
        "status": 429,
        "statusText": "Too Many Requests",
        "data": "slow",
        "message": "m",
    }


def test_classify_error():
    assert classify_error("anything", 429) == "Rate limit exceeded. Please try again later."
    assert classify_error("anything", 500) == "Upstream server error. Please try again later."
    assert classify_error("ReadTimeout: timed out") == "Request timeout. Please try again."
    assert classify_error("ConnectError: refused") == "Connection error. Could not reach the upstream API."
    assert classify_error("Invalid JSON in upstream response", 200) == "Upstream returned a malformed response."
    assert classify_error("something else") == "An error occurred while processing your request."


def test_result_values():
    ok = Ok(1)
    err = Err("boom")

    assert ok.is_ok() and not ok.is_err()
    assert err.is_err() and not err.is_ok()
    assert ok.unwrap() == 1
    with pytest.raises(ValueError):
        err.unwrap()
