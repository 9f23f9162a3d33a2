import pytest
import requests
from unittest.mock import Mock, patch

from batteryguard.advice.api import (
    EMPTY_ADVICE_MESSAGE,
    NO_CREDENTIAL_MESSAGE,
    SERVICE_FAILURE_MESSAGE,
    AdviceProvider,
    GeminiAdvisor,
    NullAdvisor,
    build_prompt,
    create_advisor,
)
from batteryguard.advice.errors import (
    AuthenticationError,
    MissingCredentialError,
    NetworkError,
    ParseError,
    ServerError,
)
from batteryguard.common.enums import BatteryType


@pytest.fixture
def battery(make_battery):
    return make_battery(name="Drone pack", type=BatteryType.LI_PO, charge_level=100, cycle_count=42)


@pytest.fixture
def advisor() -> GeminiAdvisor:
    return GeminiAdvisor("fake-api-key", model="test-model", timeout=5)


def _response(status_code: int, payload: object) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


def test_fetch_advice_success(advisor: GeminiAdvisor, battery) -> None:
    payload = {"candidates": [{"content": {"parts": [{"text": "Store at 50%. "}, {"text": "Check swelling."}]}}]}

    with patch("batteryguard.advice.api.requests.post", return_value=_response(200, payload)) as mock_post:
        text = advisor.fetch_advice(battery)

    assert text == "Store at 50%. Check swelling."
    url = mock_post.call_args.args[0]
    kwargs = mock_post.call_args.kwargs
    assert "test-model:generateContent" in url
    assert kwargs["headers"] == {"x-goog-api-key": "fake-api-key"}
    assert kwargs["timeout"] == 5
    assert "Drone pack" in kwargs["json"]["contents"][0]["parts"][0]["text"]


def test_prompt_contains_full_snapshot(battery) -> None:
    prompt = build_prompt(battery)
    assert "LiPo (drone/pouch)" in prompt
    assert "Cycle count: 42" in prompt
    assert "Current charge: 100%" in prompt
    assert battery.purchase_date.isoformat() in prompt


def test_fetch_advice_without_key_raises(battery) -> None:
    with patch("batteryguard.advice.api.requests.post") as mock_post:
        with pytest.raises(MissingCredentialError):
            GeminiAdvisor(None).fetch_advice(battery)
    mock_post.assert_not_called()


def test_fetch_advice_network_error(advisor: GeminiAdvisor, battery) -> None:
    with patch(
        "batteryguard.advice.api.requests.post",
        side_effect=requests.ConnectionError("offline"),
    ):
        with pytest.raises(NetworkError) as exc_info:
            advisor.fetch_advice(battery)
    assert isinstance(exc_info.value.original_error, requests.ConnectionError)


@pytest.mark.parametrize(
    "status, error_type",
    [(403, AuthenticationError), (503, ServerError)],
)
def test_fetch_advice_http_errors(advisor: GeminiAdvisor, battery, status: int, error_type: type) -> None:
    payload = {"error": {"message": "nope"}}
    with patch("batteryguard.advice.api.requests.post", return_value=_response(status, payload)):
        with pytest.raises(error_type, match="nope"):
            advisor.fetch_advice(battery)


def test_fetch_advice_unexpected_body(advisor: GeminiAdvisor, battery) -> None:
    with patch("batteryguard.advice.api.requests.post", return_value=_response(200, {"candidates": []})):
        with pytest.raises(ParseError):
            advisor.fetch_advice(battery)


def test_fetch_advice_non_json_body(advisor: GeminiAdvisor, battery) -> None:
    resp = _response(200, None)
    resp.json.side_effect = ValueError("not json")
    with patch("batteryguard.advice.api.requests.post", return_value=resp):
        with pytest.raises(ParseError):
            advisor.fetch_advice(battery)


def test_get_advice_never_raises(advisor: GeminiAdvisor, battery) -> None:
    with patch("batteryguard.advice.api.requests.post", side_effect=requests.Timeout("slow")):
        assert advisor.get_advice(battery) == SERVICE_FAILURE_MESSAGE

    with patch("batteryguard.advice.api.requests.post", return_value=_response(500, {})):
        assert advisor.get_advice(battery) == SERVICE_FAILURE_MESSAGE

    with patch("batteryguard.advice.api.requests.post", side_effect=RuntimeError("boom")):
        assert advisor.get_advice(battery) == SERVICE_FAILURE_MESSAGE


def test_get_advice_empty_text(advisor: GeminiAdvisor, battery) -> None:
    payload = {"candidates": [{"content": {"parts": [{"text": "   "}]}}]}
    with patch("batteryguard.advice.api.requests.post", return_value=_response(200, payload)):
        assert advisor.get_advice(battery) == EMPTY_ADVICE_MESSAGE


def test_get_advice_without_key(battery) -> None:
    assert GeminiAdvisor("").get_advice(battery) == NO_CREDENTIAL_MESSAGE
    assert NullAdvisor().get_advice(battery) == NO_CREDENTIAL_MESSAGE


def test_create_advisor() -> None:
    assert isinstance(create_advisor(None), NullAdvisor)
    advisor = create_advisor("key", "m", 3)
    assert isinstance(advisor, GeminiAdvisor)
    assert isinstance(advisor, AdviceProvider)
    assert advisor.model == "m"
