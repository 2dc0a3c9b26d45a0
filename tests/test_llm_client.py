import asyncio
import json

import httpx
import pytest

from languagepeer.llm_client import LLMClient, _merge_turns
from languagepeer.settings import settings


def bedrock_reply(text):
	return httpx.Response(200, json={
		"output": {"message": {"role": "assistant", "content": [{"text": text}]}},
		"usage": {"inputTokens": 10, "outputTokens": 5},
	})


@pytest.fixture(autouse=True)
def no_fallback(monkeypatch):
	monkeypatch.setattr(settings, "openrouter_api_key", None)


def test_requires_api_key(monkeypatch):
	monkeypatch.setattr(settings, "bedrock_api_key", None)
	with pytest.raises(ValueError):
		LLMClient()


def test_converse_request_shape():
	seen = {}

	def handler(request):
		seen["url"] = str(request.url)
		seen["auth"] = request.headers["authorization"]
		seen["body"] = json.loads(request.content)
		return bedrock_reply("Good effort.")

	async def go():
		client = LLMClient("test-key", model="test-model", transport=httpx.MockTransport(handler))
		try:
			return await client.generate("Be strict.", "He don't like it.", history=[("assistant", "Hi!")])
		finally:
			await client.aclose()

	assert asyncio.run(go()) == "Good effort."
	assert seen["url"].endswith("/model/test-model/converse")
	assert seen["auth"] == "Bearer test-key"
	assert seen["body"]["system"] == [{"text": "Be strict."}]
	# leading assistant turn is dropped so the conversation starts with the learner
	assert seen["body"]["messages"] == [{"role": "user", "content": [{"text": "He don't like it."}]}]
	assert seen["body"]["inferenceConfig"]["maxTokens"] == settings.bedrock_max_tokens


def test_failure_without_fallback_raises():
	async def go():
		client = LLMClient("k", transport=httpx.MockTransport(lambda r: httpx.Response(500, text="nope")))
		try:
			await client.generate("sys", "hello")
		finally:
			await client.aclose()

	with pytest.raises(RuntimeError):
		asyncio.run(go())


def test_unexpected_body_raises():
	async def go():
		client = LLMClient("k", transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"output": {}})))
		try:
			await client.generate("sys", "hello")
		finally:
			await client.aclose()

	with pytest.raises(RuntimeError):
		asyncio.run(go())


def test_openrouter_fallback(monkeypatch):
	monkeypatch.setattr(settings, "openrouter_api_key", "or-key")

	def handler(request):
		if "openrouter" in request.url.host:
			body = json.loads(request.content)
			assert body["messages"][0] == {"role": "system", "content": "sys"}
			return httpx.Response(200, json={"choices": [{"message": {"content": "from fallback"}}]})
		return httpx.Response(503)

	async def go():
		client = LLMClient("k", transport=httpx.MockTransport(handler))
		try:
			return await client.generate("sys", "hello")
		finally:
			await client.aclose()

	assert asyncio.run(go()) == "from fallback"


def test_merge_turns_alternates_roles():
	turns = [("assistant", "Welcome"), ("user", "a"), ("user", "b"), ("assistant", ""), ("assistant", "c"), ("user", "d")]
	assert _merge_turns(turns) == [("user", "a\nb"), ("assistant", "c"), ("user", "d")]
