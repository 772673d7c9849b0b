"""
Language model client.

Thin wrapper around the OpenAI SDK that issues one chat completion with a
strict JSON schema response format and returns the raw message text.
"""

from typing import Any, Dict, List, Optional

import openai

from shop_assistant.config import (
    CHAT_FREQUENCY_PENALTY,
    CHAT_MAX_COMPLETION_TOKENS,
    CHAT_MODEL,
    CHAT_PRESENCE_PENALTY,
    CHAT_TEMPERATURE,
    CHAT_TOP_P,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
)
from shop_assistant.errors import ModelInvocationError
from shop_assistant.logger import get_logger

logger = get_logger("oracle")


class ModelOracle:
    """Schema-constrained chat completions against an OpenAI-compatible API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        chat_model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_completion_tokens: Optional[int] = None,
        client: Optional[openai.OpenAI] = None
    ):
        """
        Initialize the oracle with API configuration.

        Args:
            api_key: OpenAI API key
            base_url: API base URL
            chat_model: Model to use for chat completion
            temperature: Sampling temperature
            max_completion_tokens: Output length bound
            client: Preconfigured SDK client, used as is when given
        """
        self.chat_model = chat_model or CHAT_MODEL
        self.temperature = CHAT_TEMPERATURE if temperature is None else temperature
        self.max_completion_tokens = max_completion_tokens or CHAT_MAX_COMPLETION_TOKENS

        if client is not None:
            self.client = client
            return

        api_key = api_key or OPENAI_API_KEY
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")

        self.client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url or OPENAI_BASE_URL
        )

    def complete(self, messages: List[Dict[str, str]], response_format: Dict[str, Any]) -> Optional[str]:
        """
        Run one completion and return the message content.

        Args:
            messages: Chat messages, replayed verbatim
            response_format: Strict json_schema response format

        Returns:
            Raw content text (None if the model returned none)

        Raises:
            ModelInvocationError: The API call failed
        """
        try:
            response = self.client.chat.completions.create(
                model=self.chat_model,
                messages=messages,
                response_format=response_format,
                temperature=self.temperature,
                max_completion_tokens=self.max_completion_tokens,
                top_p=CHAT_TOP_P,
                frequency_penalty=CHAT_FREQUENCY_PENALTY,
                presence_penalty=CHAT_PRESENCE_PENALTY
            )
        except openai.OpenAIError as e:
            logger.error(f"Model call failed: {e}", exc_info=True)
            raise ModelInvocationError(str(e)) from e

        message = response.choices[0].message
        if getattr(message, "refusal", None):
            logger.warning(f"Model refused: {message.refusal}")
        return message.content
