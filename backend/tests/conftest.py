"""Root conftest — environment for the UrbanEstate test suite.

Invariants:
    - Variables are set at import time, before urbanestate is imported, because
      get_settings() caches the first Settings it builds
    - No test talks to Anthropic or a server database: routes get a ScriptedAIClient
      and an in-memory SQLite engine from tests/services/conftest.py
    - Model names are pinned so tests can assert which tier each feature calls
"""

import os

os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["AI_MODEL_FAST"] = "test-model-fast"
os.environ["AI_MODEL_INSTANT"] = "test-model-instant"
os.environ["LOG_FORMAT"] = "text"
