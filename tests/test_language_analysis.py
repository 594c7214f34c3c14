"""
Tests for the language risk analysis client.

The provider is replaced with an httpx.MockTransport so no network access
is needed.
"""
import json

import httpx
import pytest

from mood_engine import LanguageAnalysisClient
from mood_engine.language_analysis import parse_language_analysis


def completion(content: str) -> dict:
    """Minimal chat-completion response body."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestParseLanguageAnalysis:
    """Test parsing of provider replies."""

    def test_plain_json(self):
        analysis = parse_language_analysis(
            '{"score": 42, "concerns": ["Withdrawal"], "explanation": "Some isolation"}'
        )

        assert analysis.score == 42.0
        assert analysis.concerns == ["Withdrawal"]
        assert analysis.explanation == "Some isolation"

    def test_markdown_code_fence(self):
        analysis = parse_language_analysis('```json\n{"score": 10, "concerns": []}\n```')
        assert analysis.score == 10.0

    def test_score_is_clamped(self):
        assert parse_language_analysis('{"score": 150}').score == 100.0
        assert parse_language_analysis('{"score": -5}').score == 0.0

    def test_single_concern_is_wrapped(self):
        assert parse_language_analysis('{"score": 5, "concerns": "Fatigue"}').concerns == ["Fatigue"]

    @pytest.mark.parametrize(
        "reply",
        [None, "", "not json", "[1, 2]", '{"concerns": []}', '{"score": "high"}'],
    )
    def test_unusable_replies(self, reply):
        assert parse_language_analysis(reply) is None


class TestLanguageAnalysisClient:
    """Test the async provider client."""

    def make_client(self, handler, api_key="test-key"):
        return LanguageAnalysisClient(
            api_url="https://provider.test/v1/",
            api_key=api_key,
            model="test-model",
            timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_successful_analysis(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion('{"score": 65, "concerns": ["Hopelessness"]}'))

        client = self.make_client(handler)
        analysis = await client.analyze(["Rough day", "  ", "Nothing helps"])

        assert analysis.score == 65.0
        assert analysis.concerns == ["Hopelessness"]

        request = requests[0]
        body = json.loads(request.content)
        assert str(request.url) == "https://provider.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        assert body["model"] == "test-model"
        assert json.loads(body["messages"][1]["content"]) == ["Rough day", "Nothing helps"]

    @pytest.mark.asyncio
    async def test_disabled_without_api_key(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=completion('{"score": 1}'))

        client = self.make_client(handler, api_key="")

        assert client.enabled is False
        assert await client.analyze(["note"]) is None
        assert requests == []

    @pytest.mark.asyncio
    async def test_no_notes_skips_request(self):
        def handler(request):
            raise AssertionError("provider should not be called")

        assert await self.make_client(handler).analyze(["", "   "]) is None

    @pytest.mark.asyncio
    async def test_error_status_returns_none(self):
        client = self.make_client(lambda request: httpx.Response(500, text="upstream error"))
        assert await client.analyze(["note"]) is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert await self.make_client(handler).analyze(["note"]) is None

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert await self.make_client(handler).analyze(["note"]) is None

    @pytest.mark.asyncio
    async def test_unexpected_shape_returns_none(self):
        client = self.make_client(lambda request: httpx.Response(200, json={"result": "ok"}))
        assert await client.analyze(["note"]) is None

    @pytest.mark.asyncio
    async def test_unparsable_content_returns_none(self):
        client = self.make_client(lambda request: httpx.Response(200, json=completion("I'd rather not say")))
        assert await client.analyze(["note"]) is None
