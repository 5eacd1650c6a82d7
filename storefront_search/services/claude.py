import inspect
from typing import Any, Awaitable, Callable

import anthropic

from storefront_search.config import settings
from storefront_search.errors import TurnError
from storefront_search.logging_config import get_logger
from storefront_search.services.prompts import SEARCH_SYSTEM_PROMPT

logger = get_logger(__name__)

SYSTEM_PROMPTS = {
    "search": SEARCH_SYSTEM_PROMPT,
}

TextHandler = Callable[[str], Any]
MessageHandler = Callable[[Any], Any]
ToolUseHandler = Callable[[Any], Awaitable[None]]


class ClaudeService:
    """Drives streamed Claude turns with tools."""

    def __init__(
        self,
        api_key: str = settings.ANTHROPIC_API_KEY,
        model: str = settings.CLAUDE_MODEL,
        max_tokens: int = settings.CLAUDE_MAX_TOKENS,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key)

    async def stream_conversation(
        self,
        messages: list[dict],
        tools: list[dict],
        on_text: TextHandler | None = None,
        on_message: MessageHandler | None = None,
        on_tool_use: ToolUseHandler | None = None,
        prompt_type: str = "search",
    ):
        """
        Run one turn. Text deltas are drained through `on_text`; once the
        stream ends `on_message` gets the final message and `on_tool_use` is
        awaited for each tool_use block, in order.

        Raises TurnError if the API call fails.
        """
        try:
            async with self._client.messages.stream(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_PROMPTS[prompt_type],
                messages=messages,
                tools=tools,
            ) as stream:
                async for event in stream:
                    if event.type == "text" and on_text is not None:
                        await _maybe_await(on_text(event.text))
                final_message = await stream.get_final_message()
        except anthropic.APIError as e:
            raise TurnError(f"Claude turn failed: {e}") from e

        if on_message is not None:
            await _maybe_await(on_message(final_message))

        if on_tool_use is not None:
            for block in final_message.content:
                if block.type == "tool_use":
                    await on_tool_use(block)

        return final_message


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value
