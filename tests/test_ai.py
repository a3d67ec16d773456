"""Retry and error mapping around the Gemini client."""

import pytest

from mentor.services import ai


class FakeAPIError(Exception):
    def __init__(self, code: int, message: str = "boom"):
        super().__init__(f"{code} {message}")
        self.code = code


class FakeResponse:
    def __init__(self, text: str):
        self.text = text


class FakeModels:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def generate_content(self, model, contents, config=None):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClient:
    def __init__(self, outcomes):
        self.models = FakeModels(outcomes)


@pytest.fixture
def sleeps(monkeypatch):
    delays = []
    monkeypatch.setattr(ai.time, "sleep", lambda seconds: delays.append(seconds))
    return delays


def test_retries_overload_then_succeeds(sleeps) -> None:
    client = FakeClient([FakeAPIError(503), FakeAPIError(503), FakeResponse("ok")])
    response = ai.call_gemini_with_retry(client, "model", "prompt")
    assert response.text == "ok"
    assert client.models.calls == 3
    assert sleeps == [1, 2]


def test_rate_limits_back_off_longer_and_cap_at_ten_seconds(sleeps) -> None:
    client = FakeClient([FakeAPIError(429)] * 4 + [FakeResponse("ok")])
    ai.call_gemini_with_retry(client, "model", "prompt", max_retries=4, initial_delay=2, timeout=1000)
    assert sleeps == [4, 8, 10, 10]


def test_exhausted_rate_limit_maps_to_429(sleeps) -> None:
    client = FakeClient([FakeAPIError(429)] * 4)
    with pytest.raises(ai.AIServiceError) as exc:
        ai.call_gemini_with_retry(client, "model", "prompt", max_retries=3, timeout=1000)
    assert exc.value.status_code == 429
    assert exc.value.message == ai.RATE_LIMIT_MESSAGE
    assert client.models.calls == 4


def test_payment_required_is_not_retried(sleeps) -> None:
    client = FakeClient([FakeAPIError(402)])
    with pytest.raises(ai.AIServiceError) as exc:
        ai.call_gemini_with_retry(client, "model", "prompt")
    assert exc.value.status_code == 402
    assert exc.value.message == ai.USAGE_LIMIT_MESSAGE
    assert sleeps == []


def test_other_errors_are_gateway_errors(sleeps) -> None:
    client = FakeClient([ValueError("bad request payload")])
    with pytest.raises(ai.AIServiceError) as exc:
        ai.call_gemini_with_retry(client, "model", "prompt")
    assert exc.value.status_code == 500
    assert "bad request payload" in exc.value.message


def test_backoff_that_would_exceed_timeout_is_a_timeout(sleeps) -> None:
    client = FakeClient([FakeAPIError(503)])
    with pytest.raises(ai.AIServiceError) as exc:
        ai.call_gemini_with_retry(client, "model", "prompt", initial_delay=5, timeout=2)
    assert exc.value.status_code == 504


def test_error_status_from_message_text() -> None:
    assert ai._error_status(Exception("RESOURCE_EXHAUSTED: quota")) == 429
    assert ai._error_status(Exception("model is overloaded")) == 503
    assert ai._error_status(Exception("something else")) is None


def test_parse_json_object_variants() -> None:
    assert ai.parse_json_object('{"a": 1}') == {"a": 1}
    assert ai.parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}
    assert ai.parse_json_object('Sure! {"a": {"b": 2}} Hope it helps') == {"a": {"b": 2}}
    with pytest.raises(ValueError):
        ai.parse_json_object("[1, 2]")
    with pytest.raises(ValueError):
        ai.parse_json_object("no json here")


def test_missing_api_key(monkeypatch) -> None:
    monkeypatch.setattr(ai, "GEMINI_API_KEY", "")
    with pytest.raises(ai.AIServiceError) as exc:
        ai.get_client()
    assert exc.value.status_code == 500
