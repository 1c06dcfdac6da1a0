"""
Chat Completion Client
Thin async client for an OpenAI-compatible chat completions API
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from clubos.config import settings
from clubos.exceptions import Timeout, UpstreamFailure

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    """Sends a message list plus tool schemas and returns the provider's reply message"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY
        self.base_url = (base_url or settings.LLM_BASE_URL).rstrip("/")
        self.model = model or settings.LLM_MODEL
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Run one completion round

        Args:
            messages: Conversation so far (system, user, assistant and tool messages)
            tools: Function schemas the model may call

        Returns:
            The assistant message: {"role", "content", "tool_calls"?}

        Raises:
            Timeout: The provider did not answer within the configured timeout
            UpstreamFailure: Transport error, non-2xx status, or malformed body
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": settings.LLM_MAX_TOKENS,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=payload,
                )
                response.raise_for_status()
                result = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Chat completion timed out after {self.timeout}s: {str(e)}")
            raise Timeout("Chat provider timed out")
        except httpx.HTTPError as e:
            logger.warning(f"Chat completion request failed: {str(e)}")
            raise UpstreamFailure("Chat provider unavailable")
        except ValueError as e:
            logger.warning(f"Chat completion returned invalid JSON: {str(e)}")
            raise UpstreamFailure("Chat provider returned an invalid response")

        try:
            return result["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            logger.warning(f"Chat completion response missing message: {result!r}")
            raise UpstreamFailure("Chat provider returned an invalid response")
