from __future__ import annotations

from typing import Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from .base import ResponderError


class ChatCompletionResponder:
    """Forwards each message to a chat-completion endpoint as a single user turn.

    The SDK's own retries are disabled: one inbound message, one upstream call.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        prompt_prefix: str = "",
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        api_key = (api_key or "").strip()
        if not api_key:
            raise RuntimeError("Missing API key for the chat-completion responder.")

        self.model = model
        self.prompt_prefix = prompt_prefix
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def __call__(self, text: str) -> str:
        messages = [{"role": "user", "content": f"{self.prompt_prefix}{text}"}]
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except OpenAIError as exc:
            raise ResponderError(f"Failed to get response from OpenAI: {exc}") from exc

        if not resp.choices or resp.choices[0].message.content is None:
            raise ResponderError("OpenAI returned no message content.")
        return resp.choices[0].message.content

    async def aclose(self) -> None:
        await self.client.close()
