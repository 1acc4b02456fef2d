"""Tests for the chat-completion providers: request shape and response classification."""

import json

import pytest

from autocommit.config.schema import ProviderConfig
from autocommit.providers import GroqProvider, OpenAIProvider, ZaiProvider
from autocommit.providers.errors import GenerationError, GenerationErrorKind


def _kind(provider, body) -> GenerationErrorKind:
    with pytest.raises(GenerationError) as exc_info:
        provider.parse_response(body)
    return exc_info.value.kind


@pytest.fixture
def groq() -> GroqProvider:
    return GroqProvider(ProviderConfig(name="groq", api_key="gsk-abc"))


class TestBuildRequest:
    def test_shape(self, groq: GroqProvider):
        req = groq.build_request("diff text", "be terse")
        assert req["model"] == "llama-3.1-8b-instant"
        assert req["messages"] == [
            {"role": "system", "content": "be terse"},
            {"role": "user", "content": "Git diff:\ndiff text"},
        ]
        assert req["temperature"] == 0.7
        assert req["max_tokens"] == 1000

    def test_serialisable(self, groq: GroqProvider):
        payload = json.dumps(groq.build_request('quote " and \\ backslash', "p"))
        assert json.loads(payload)["messages"][1]["content"].endswith('" and \\ backslash')

    def test_configured_model_wins(self):
        provider = OpenAIProvider(ProviderConfig(name="openai", api_key="k", model="gpt-4o"))
        assert provider.build_request("d", "s")["model"] == "gpt-4o"

    def test_token_budgets(self):
        cfg = ProviderConfig(name="x", api_key="k")
        assert ZaiProvider(cfg).build_request("d", "s")["max_tokens"] == 1500
        assert OpenAIProvider(cfg).build_request("d", "s")["max_tokens"] == 500


class TestEndpointAndAuth:
    def test_default_endpoints(self):
        cfg = ProviderConfig(name="x", api_key="k")
        assert GroqProvider(cfg).get_endpoint() == "https://api.groq.com/openai/v1/chat/completions"
        assert OpenAIProvider(cfg).get_endpoint() == "https://api.openai.com/v1/chat/completions"
        assert ZaiProvider(cfg).get_endpoint() == "https://api.z.ai/api/paas/v4/chat/completions"

    def test_endpoint_override(self):
        provider = GroqProvider(
            ProviderConfig(name="groq", api_key="k", endpoint="http://localhost:8080/v1/chat/completions")
        )
        assert provider.get_endpoint() == "http://localhost:8080/v1/chat/completions"

    def test_bearer_header(self, groq: GroqProvider):
        assert groq.get_auth_header() == "Bearer gsk-abc"


class TestParseSuccess:
    def test_content_trimmed(self, groq: GroqProvider, chat_response):
        assert groq.parse_response(chat_response("\n  feat: add x \r\n\t")) == "feat: add x"

    def test_multiline_body_kept(self, groq: GroqProvider, chat_response):
        msg = "feat(api): add limits\n\n- sliding window"
        assert groq.parse_response(chat_response(msg)) == msg

    def test_accepts_str(self, groq: GroqProvider, chat_response):
        assert groq.parse_response(chat_response("fix: y").decode()) == "fix: y"

    def test_first_choice_only(self, groq: GroqProvider):
        body = json.dumps({
            "choices": [
                {"message": {"content": "first"}},
                {"message": {"content": "second"}},
            ]
        })
        assert groq.parse_response(body) == "first"


class TestParseErrors:
    def test_rate_limit(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "You hit the rate limit for this org"}})
        assert _kind(groq, body) == GenerationErrorKind.RATE_LIMITED

    def test_rate_limit_wins_over_auth(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "unauthorized: rate limit", "code": "invalid_api_key"}})
        assert _kind(groq, body) == GenerationErrorKind.RATE_LIMITED

    @pytest.mark.parametrize("message", [
        "invalid api key",
        "Invalid API key provided",
        "Incorrect API key provided: sk-...",
        "unauthorized",
        "Unauthorized request",
    ])
    def test_auth_phrases(self, groq: GroqProvider, message: str):
        body = json.dumps({"error": {"message": message}})
        assert _kind(groq, body) == GenerationErrorKind.INVALID_API_KEY

    def test_auth_code(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "nope", "code": "invalid_api_key"}})
        assert _kind(groq, body) == GenerationErrorKind.INVALID_API_KEY

    def test_auth_status(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "denied", "status": 401}})
        assert _kind(groq, body) == GenerationErrorKind.INVALID_API_KEY

    def test_rate_limit_phrase_is_case_sensitive(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "Rate Limit reached"}})
        assert _kind(groq, body) == GenerationErrorKind.API_ERROR

    def test_other_error(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "model not found"}})
        assert _kind(groq, body) == GenerationErrorKind.API_ERROR

    def test_error_without_message(self, groq: GroqProvider):
        assert _kind(groq, json.dumps({"error": "boom"})) == GenerationErrorKind.API_ERROR

    def test_error_checked_before_choices(self, groq: GroqProvider):
        body = json.dumps({"error": {"message": "bad"}, "choices": [{"message": {"content": "x"}}]})
        assert _kind(groq, body) == GenerationErrorKind.API_ERROR

    def test_not_json(self, groq: GroqProvider):
        assert _kind(groq, b"<html>502 Bad Gateway</html>") == GenerationErrorKind.INVALID_RESPONSE

    def test_deeply_nested_body(self, groq: GroqProvider):
        assert _kind(groq, b"[" * 200000) == GenerationErrorKind.INVALID_RESPONSE

    def test_root_not_object(self, groq: GroqProvider):
        assert _kind(groq, b"[1, 2]") == GenerationErrorKind.INVALID_RESPONSE

    def test_missing_choices(self, groq: GroqProvider):
        assert _kind(groq, b"{}") == GenerationErrorKind.INVALID_RESPONSE

    def test_empty_choices(self, groq: GroqProvider):
        assert _kind(groq, b'{"choices": []}') == GenerationErrorKind.EMPTY_CONTENT

    def test_missing_message(self, groq: GroqProvider):
        assert _kind(groq, b'{"choices": [{}]}') == GenerationErrorKind.INVALID_RESPONSE

    def test_missing_content(self, groq: GroqProvider):
        body = b'{"choices": [{"message": {"role": "assistant"}}]}'
        assert _kind(groq, body) == GenerationErrorKind.INVALID_RESPONSE

    def test_null_content(self, groq: GroqProvider):
        body = b'{"choices": [{"message": {"content": null}}]}'
        assert _kind(groq, body) == GenerationErrorKind.INVALID_RESPONSE

    def test_whitespace_content(self, groq: GroqProvider, chat_response):
        assert _kind(groq, chat_response(" \n\t ")) == GenerationErrorKind.EMPTY_CONTENT
