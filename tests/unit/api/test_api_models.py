"""
Unit tests for API request/response models.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from choosewise.api.models import AdviceRequestBody, AdviceResponse, ErrorResponse


def test_request_accepts_camel_case_alias():
    body = AdviceRequestBody.model_validate({"prompt": "Should I?", "systemPrompt": "Be wise"})

    assert body.prompt == "Should I?"
    assert body.system_prompt == "Be wise"


def test_request_accepts_field_name():
    body = AdviceRequestBody(prompt="Should I?", system_prompt="Be wise")
    assert body.system_prompt == "Be wise"


def test_request_strips_whitespace_and_control_characters():
    body = AdviceRequestBody.model_validate(
        {"prompt": "  Should\x00 I\x07?\n\tReally?  ", "systemPrompt": "\x1bBe wise\r\n"}
    )

    assert body.prompt == "Should I?\n\tReally?"
    assert body.system_prompt == "Be wise"


@pytest.mark.parametrize(
    "data",
    [
        {"systemPrompt": "Be wise"},
        {"prompt": "Should I?"},
        {"prompt": "", "systemPrompt": "Be wise"},
        {"prompt": "   ", "systemPrompt": "Be wise"},
        {"prompt": "\x00\x01", "systemPrompt": "Be wise"},
        {"prompt": "x" * 10_001, "systemPrompt": "Be wise"},
        {"prompt": "Should I?", "systemPrompt": "y" * 20_001},
        {"prompt": 42, "systemPrompt": "Be wise"},
    ],
)
def test_request_rejects_invalid_bodies(data):
    with pytest.raises(ValidationError):
        AdviceRequestBody.model_validate(data)


def test_to_decision_request():
    body = AdviceRequestBody(prompt="Should I?", system_prompt="Be wise")

    request = body.to_decision_request()

    assert request.prompt == "Should I?"
    assert request.system_prompt == "Be wise"


def test_advice_response_serializes_camel_case():
    response = AdviceResponse(
        text="Go",
        served_by="emergency",
        timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        request_id="abc12345",
    )

    data = response.model_dump(by_alias=True, exclude_none=True)

    assert data["servedBy"] == "emergency"
    assert data["requestId"] == "abc12345"
    assert "attempts" not in data


def test_error_response_defaults_timestamp():
    error = ErrorResponse(error="rate_limited", message="Slow down")
    assert error.timestamp.tzinfo is not None
    assert error.details is None
