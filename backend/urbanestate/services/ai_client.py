"""AI Client Protocol — the two calls services make against the text-generation provider.

Design Decisions:
    - Protocol over the concrete ResilientAnthropicClient: tests inject a scripted fake
      through the get_ai_client dependency
"""

from typing import Protocol


class AIClient(Protocol):
    async def generate_json(
        self, *, model: str, system: str, prompt: str,
        max_tokens: int = 2000, temperature: float | None = None,
        context=None,
    ) -> dict: ...

    async def generate_text(
        self, *, model: str, system: str, prompt: str,
        max_tokens: int = 2000, temperature: float | None = None,
        context=None,
    ) -> str: ...
