"""
HTTP clients for the LLM providers used for idea and documentation generation.

Each provider sends one prompt and returns the raw text of the first candidate.
A transport failure (connect error, timeout) is repeated once after a fixed
delay. HTTP error statuses are not repeated.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str) and error:
            return error
    return "Unknown error"


class LLMProvider:
    name = "LLM"

    def __init__(
        self,
        api_key: str,
        timeout: Optional[float] = None,
        retry_delay: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.retry_delay = retry_delay if retry_delay is not None else settings.llm_retry_delay_seconds
        self.http_client = http_client

    async def _send(self, url: str, payload: Dict[str, Any], headers: Dict[str, str], params: Optional[Dict[str, str]]) -> httpx.Response:
        if self.http_client is not None:
            return await self.http_client.post(url, json=payload, headers=headers, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload, headers=headers, params=params)

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", **(headers or {})}
        response = None
        for attempt in range(2):
            try:
                response = await self._send(url, payload, headers, params)
                break
            except httpx.TransportError as e:
                if attempt == 1:
                    raise UpstreamError(self.name, f"{self.name} API error: {e.__class__.__name__}: {e}")
                logger.warning("%s request failed (%s), retrying in %.1fs", self.name, e.__class__.__name__, self.retry_delay)
                await asyncio.sleep(self.retry_delay)

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("%s API returned %s: %s", self.name, response.status_code, message)
            raise UpstreamError(self.name, f"{self.name} API error: {message}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise UpstreamError(self.name, f"{self.name} API returned an unexpected body", status_code=response.status_code)
        return data

    async def complete(self, prompt: str, system: Optional[str] = None) -> str:
        raise NotImplementedError


class OpenAIProvider(LLMProvider):
    name = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(api_key, **kwargs)
        self.model = model or settings.openai_model
        self.url = url or settings.openai_url
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens

    async def complete(self, prompt: str, system: Optional[str] = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        data = await self._post_json(
            self.url,
            {
                "model": self.model,
                "messages": messages,
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise UpstreamError(self.name, "No content in OpenAI response")
        return content


class GeminiProvider(LLMProvider):
    name = "Gemini"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(api_key, **kwargs)
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens

    def url_for(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    async def complete(self, prompt: str, system: Optional[str] = None, model: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        data = await self._post_json(self.url_for(model or self.model), payload, params={"key": self.api_key})
        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or [{}]
        content = parts[0].get("text")
        if not content:
            raise UpstreamError(self.name, "No content in Gemini response")
        return content


def openai_from_settings() -> Optional[OpenAIProvider]:
    if not settings.openai_api_key:
        return None
    return OpenAIProvider(settings.openai_api_key)


def gemini_from_settings() -> Optional[GeminiProvider]:
    if not settings.gemini_api_key:
        return None
    return GeminiProvider(settings.gemini_api_key)
