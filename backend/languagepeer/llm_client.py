from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional, Sequence, Tuple
from .settings import settings

logger = logging.getLogger(__name__)


class LLMClient:
	"""Async client for the Bedrock Runtime Converse API with an optional OpenRouter fallback."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.bedrock_api_key
		if not self.api_key:
			raise ValueError("BEDROCK_API_KEY is not configured")
		self.model = model or settings.bedrock_model
		region = settings.bedrock_region
		self.base_url = base_url or f"https://bedrock-runtime.{region}.amazonaws.com/model/{self.model}/converse"
		self._client = httpx.AsyncClient(timeout=settings.bedrock_timeout_seconds, transport=transport)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=settings.bedrock_timeout_seconds, transport=transport)

	async def generate(
		self,
		system_prompt: str,
		user_message: str,
		*,
		history: Sequence[Tuple[str, str]] = (),
	) -> str:
		"""Send the system prompt plus prior ``(role, text)`` turns and the new user message."""
		turns = _merge_turns([*history, ("user", user_message)])
		payload: Dict[str, Any] = {
			"system": [{"text": system_prompt}],
			"messages": [{"role": role, "content": [{"text": text}]} for role, text in turns],
			"inferenceConfig": {
				"maxTokens": settings.bedrock_max_tokens,
				"temperature": settings.bedrock_temperature,
			},
		}
		headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
		last_error: Optional[Exception] = None
		try:
			r = await self._client.post(self.base_url, headers=headers, json=payload)
			r.raise_for_status()
		except (httpx.HTTPStatusError, httpx.RequestError) as err:
			last_error = err
		if last_error is None:
			try:
				data = r.json()
				return data["output"]["message"]["content"][0]["text"]
			except Exception:
				last_error = RuntimeError(f"Unexpected Bedrock response: {r.text}")
		logger.warning("Bedrock call failed: %s", last_error)
		if not self._fallback_enabled:
			raise RuntimeError("Bedrock call failed and no fallback configured") from last_error
		return await self._fallback_generate(system_prompt, turns, last_error)

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_generate(self, system_prompt: str, turns: List[Tuple[str, str]], primary_error: Optional[Exception]) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error or RuntimeError("Fallback requested but OpenRouter is not configured")
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": [{"role": "system", "content": system_prompt}]
			+ [{"role": role, "content": text} for role, text in turns],
		}
		try:
			r = await self._fallback_client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			if primary_error is not None:
				raise RuntimeError(
					f"Bedrock primary call failed ({primary_error}); fallback via OpenRouter also failed"
				) from fallback_err
			raise fallback_err


def _merge_turns(turns: Sequence[Tuple[str, str]]) -> List[Tuple[str, str]]:
	# Converse requires alternating roles starting with the user
	merged: List[Tuple[str, str]] = []
	for role, text in turns:
		if not text:
			continue
		if merged and merged[-1][0] == role:
			merged[-1] = (role, f"{merged[-1][1]}\n{text}")
		else:
			merged.append((role, text))
	while merged and merged[0][0] != "user":
		merged.pop(0)
	return merged
