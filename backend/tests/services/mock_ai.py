"""Scripted AI Client — stands in for ResilientAnthropicClient in route and service tests.

Invariants:
    - Responses are consumed in order, one per generate_json/generate_text call
    - An Exception instance in the script is raised instead of returned
    - Every call is recorded (model, system, prompt) for assertions

Design Decisions:
    - Flat fake (no inheritance): implements the AIClient protocol structurally
"""


class ScriptedAIClient:
    """Fake text-generation client driven by a list of canned responses."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls: list[dict] = []

    def _next(self, kind: str, model: str, system: str, prompt: str):
        self.calls.append({
            "kind": kind, "model": model, "system": system, "prompt": prompt,
        })
        if not self._responses:
            raise AssertionError(f"Unexpected {kind} call (script exhausted)")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def generate_json(
        self, *, model, system, prompt, max_tokens=2000, temperature=None, context=None,
    ):
        return self._next("json", model, system, prompt)

    async def generate_text(
        self, *, model, system, prompt, max_tokens=2000, temperature=None, context=None,
    ):
        return self._next("text", model, system, prompt)
