"""
Completion Client for the Groq chat-completion API.

This module provides a clean interface to the hosted model. It handles:
- API client initialization
- Request/response handling
- Error mapping into LLMRequestError

Parameters are fixed for every request (temperature, token cap, model).
Failures are not retried here: the conversation pipeline converts them
into a localized fallback reply.
"""
from typing import Dict, List, Optional

import httpx
from groq import AsyncGroq, APIConnectionError, APIStatusError

from hith.core.config import get_settings
from hith.core.exceptions import LLMRequestError
from hith.core.logging_config import get_logger

logger = get_logger(__name__)

TEMPERATURE = 0.5
MAX_TOKENS = 400
DEFAULT_REPLY = "I'm here."


class CompletionClient:
    """
    Async client for the chat-completion endpoint.

    Example:
        >>> client = CompletionClient()
        >>> await client.complete([
        ...     {"role": "system", "content": "..."},
        ...     {"role": "user", "content": "Ciao"},
        ... ])
        'Ciao! Come va oggi?'
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer credential; read from settings when omitted
            model: Model identifier; read from settings when omitted
            base_url: Endpoint override; read from settings when omitted
            http_client: Optional preconfigured httpx client (tests inject
                a mock transport here)
        """
        if api_key is None or model is None:
            settings = get_settings()
            api_key = api_key or settings.groq_api_key
            model = model or settings.llm_model
            base_url = base_url or settings.llm_base_url

        self.model = model
        self.temperature = TEMPERATURE
        self.max_tokens = MAX_TOKENS
        self.client = AsyncGroq(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )

        logger.info(f"CompletionClient initialized: model={model}")

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Send the message list and return the reply text.

        Args:
            messages: Ordered role/content entries, sent verbatim

        Returns:
            The first choice's content, or DEFAULT_REPLY when it is empty

        Raises:
            LLMRequestError: On a non-success response (status and raw body
                attached) or when the endpoint cannot be reached
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except APIStatusError as e:
            body = e.response.text
            logger.error(f"Completion request failed: status={e.status_code}, body={body[:200]}")
            raise LLMRequestError(status=e.status_code, body=body) from e
        except APIConnectionError as e:
            logger.error(f"Completion endpoint unreachable: {e}")
            raise LLMRequestError(status=None, body=str(e)) from e

        text = self._extract_text(response)
        if not text:
            logger.warning("Completion returned no text, using default reply")
            return DEFAULT_REPLY
        return text

    async def close(self) -> None:
        await self.client.close()

    @staticmethod
    def _extract_text(response) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return (content or "").strip()
